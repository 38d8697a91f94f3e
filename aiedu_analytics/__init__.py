"""AI education impact analytics engine.

Turns survey records about student AI-tool usage into filtered subsets,
descriptive statistics, correlation measures, performance scores, insights
and trend deltas for the dashboard layer.
"""
__version__ = "1.0.0"
