"""
NYC Airbnb 2019 Analysis - Source Code.

Modules:
- config: Paths, schema and plot constants
- data: Loading and rule-based cleaning
- analysis: Descriptive statistics and hypothesis tests
- visualization: EDA plots and PNG export
- pipeline: End-to-end run
"""
