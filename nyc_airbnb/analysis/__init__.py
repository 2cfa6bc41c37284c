"""Descriptive statistics, hypothesis tests and their console report."""
from .descriptive import (
    summarize_numeric,
    category_counts,
    describe_listings,
    subset_sizes,
)
from .hypothesis import (
    DegenerateInputError,
    TTestResult,
    CorrelationResult,
    RegressionResult,
    LinearRelationship,
    AnovaResult,
    QuestionResult,
    welch_t_test,
    one_sample_t_test,
    pearson_correlation,
    linear_regression,
    one_way_anova,
    run_hypothesis_tests,
)
from .report import format_question, print_hypothesis_results
