"""
Hypothesis tests on the cleaned listings table.

The generic tests are free functions taking explicit numeric inputs and
returning frozen result records; the seven question functions below them pick
the slices of the listings table each question needs.

Every test refuses degenerate input (too few observations, no variation,
missing values) with DegenerateInputError instead of returning NaN.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from scipy import stats
from typing import Mapping, Optional, Union

from ..config import (
    BENCHMARK_PRICE,
    BROOKLYN,
    CONFIDENCE_LEVEL,
    ENTIRE_HOME,
    MANHATTAN,
    PRIVATE_ROOM,
    SIGNIFICANCE_LEVEL,
)


class DegenerateInputError(ValueError):
    """Raised when a test's input cannot produce a finite statistic."""


# =============================================================================
# RESULT RECORDS
# =============================================================================

@dataclass(frozen=True)
class TTestResult:
    """Result of a one- or two-sample t-test (two-sided)."""
    method: str
    statistic: float
    df: float
    pvalue: float
    conf_int: tuple[float, float]
    estimates: dict = field(default_factory=dict)  # label -> sample mean
    null_value: float = 0.0
    confidence_level: float = CONFIDENCE_LEVEL

    def is_significant(self, alpha: float = SIGNIFICANCE_LEVEL) -> bool:
        return self.pvalue < alpha


@dataclass(frozen=True)
class CorrelationResult:
    """Pearson product-moment correlation with its t-test."""
    r: float
    statistic: float  # t = r * sqrt(df / (1 - r^2))
    df: int
    pvalue: float
    conf_int: tuple[float, float]
    n: int
    confidence_level: float = CONFIDENCE_LEVEL

    def is_significant(self, alpha: float = SIGNIFICANCE_LEVEL) -> bool:
        return self.pvalue < alpha


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least squares fit of y = intercept + slope * x."""
    slope: float
    intercept: float
    slope_stderr: float
    intercept_stderr: float
    slope_pvalue: float
    r_squared: float
    residual_std_error: float
    df_residual: int
    n: int

    @property
    def slope_t(self) -> float:
        return self.slope / self.slope_stderr if self.slope_stderr > 0 else np.inf

    @property
    def intercept_t(self) -> float:
        return self.intercept / self.intercept_stderr if self.intercept_stderr > 0 else np.inf

    def is_significant(self, alpha: float = SIGNIFICANCE_LEVEL) -> bool:
        return self.slope_pvalue < alpha


@dataclass(frozen=True)
class LinearRelationship:
    """Correlation and simple regression of the same pair of variables."""
    x_name: str
    y_name: str
    correlation: CorrelationResult
    regression: RegressionResult


@dataclass(frozen=True)
class AnovaResult:
    """One-way ANOVA (equal-variance groups)."""
    f_statistic: float
    pvalue: float
    df_between: int
    df_within: int
    ss_between: float
    ss_within: float
    group_means: dict = field(default_factory=dict)
    group_sizes: dict = field(default_factory=dict)

    @property
    def ms_between(self) -> float:
        return self.ss_between / self.df_between

    @property
    def ms_within(self) -> float:
        return self.ss_within / self.df_within

    def is_significant(self, alpha: float = SIGNIFICANCE_LEVEL) -> bool:
        return self.pvalue < alpha


HypothesisResult = Union[TTestResult, CorrelationResult, LinearRelationship, AnovaResult]


@dataclass(frozen=True)
class QuestionResult:
    """A numbered research question and the result answering it."""
    number: int
    title: str
    result: HypothesisResult


# =============================================================================
# INPUT GUARDS
# =============================================================================

def _as_array(values, name: str, min_n: int) -> np.ndarray:
    arr = np.asarray(values, dtype=float).ravel()
    if np.isnan(arr).any():
        raise DegenerateInputError(f"{name} contains missing values")
    if len(arr) < min_n:
        raise DegenerateInputError(
            f"Not enough observations in {name}: {len(arr)} (need at least {min_n})"
        )
    return arr


def _is_constant(arr: np.ndarray) -> bool:
    return np.ptp(arr) == 0


def _require_variation(arr: np.ndarray, name: str) -> None:
    if _is_constant(arr):
        raise DegenerateInputError(f"{name} is constant; the test statistic is undefined")


def _interval(ci) -> tuple[float, float]:
    return (float(ci.low), float(ci.high))


# =============================================================================
# GENERIC TESTS
# =============================================================================

def welch_t_test(
    x,
    y,
    labels: tuple[str, str] = ('x', 'y'),
    confidence_level: float = CONFIDENCE_LEVEL
) -> TTestResult:
    """
    Two-sample t-test without assuming equal variances (two-sided).

    Degrees of freedom follow the Welch-Satterthwaite correction; the
    confidence interval is for mean(x) - mean(y).
    """
    a = _as_array(x, labels[0], min_n=2)
    b = _as_array(y, labels[1], min_n=2)
    if _is_constant(a) and _is_constant(b):
        raise DegenerateInputError(f"{labels[0]} and {labels[1]} are both constant")

    res = stats.ttest_ind(a, b, equal_var=False)
    return TTestResult(
        method="Welch Two Sample t-test",
        statistic=float(res.statistic),
        df=float(res.df),
        pvalue=float(res.pvalue),
        conf_int=_interval(res.confidence_interval(confidence_level)),
        estimates={labels[0]: float(a.mean()), labels[1]: float(b.mean())},
        null_value=0.0,
        confidence_level=confidence_level,
    )


def one_sample_t_test(
    x,
    mu: float,
    label: str = 'x',
    confidence_level: float = CONFIDENCE_LEVEL
) -> TTestResult:
    """Two-sided one-sample t-test of mean(x) == mu; CI is for the mean."""
    a = _as_array(x, label, min_n=2)
    _require_variation(a, label)

    res = stats.ttest_1samp(a, popmean=mu)
    return TTestResult(
        method="One Sample t-test",
        statistic=float(res.statistic),
        df=float(res.df),
        pvalue=float(res.pvalue),
        conf_int=_interval(res.confidence_interval(confidence_level)),
        estimates={f"mean of {label}": float(a.mean())},
        null_value=float(mu),
        confidence_level=confidence_level,
    )


def pearson_correlation(
    x,
    y,
    names: tuple[str, str] = ('x', 'y'),
    confidence_level: float = CONFIDENCE_LEVEL
) -> CorrelationResult:
    """Pearson's r with a two-sided t-test and Fisher-z confidence interval."""
    a = _as_array(x, names[0], min_n=3)
    b = _as_array(y, names[1], min_n=3)
    if len(a) != len(b):
        raise DegenerateInputError(f"{names[0]} and {names[1]} differ in length")
    _require_variation(a, names[0])
    _require_variation(b, names[1])

    res = stats.pearsonr(a, b)
    r = float(res.statistic)
    df = len(a) - 2
    t = r * np.sqrt(df / (1 - r ** 2)) if abs(r) < 1 else np.copysign(np.inf, r)
    # Fisher-z interval needs n > 3
    if len(a) > 3:
        conf_int = _interval(res.confidence_interval(confidence_level))
    else:
        conf_int = (np.nan, np.nan)

    return CorrelationResult(
        r=r,
        statistic=float(t),
        df=df,
        pvalue=float(res.pvalue),
        conf_int=conf_int,
        n=len(a),
        confidence_level=confidence_level,
    )


def linear_regression(x, y, names: tuple[str, str] = ('x', 'y')) -> RegressionResult:
    """Simple OLS regression of y on x; p-value is for slope == 0."""
    a = _as_array(x, names[0], min_n=3)
    b = _as_array(y, names[1], min_n=3)
    if len(a) != len(b):
        raise DegenerateInputError(f"{names[0]} and {names[1]} differ in length")
    _require_variation(a, names[0])
    _require_variation(b, names[1])

    res = stats.linregress(a, b)
    residuals = b - (res.intercept + res.slope * a)
    df_residual = len(a) - 2

    return RegressionResult(
        slope=float(res.slope),
        intercept=float(res.intercept),
        slope_stderr=float(res.stderr),
        intercept_stderr=float(res.intercept_stderr),
        slope_pvalue=float(res.pvalue),
        r_squared=float(res.rvalue ** 2),
        residual_std_error=float(np.sqrt(np.sum(residuals ** 2) / df_residual)),
        df_residual=df_residual,
        n=len(a),
    )


def one_way_anova(groups: Mapping[str, object]) -> AnovaResult:
    """
    One-way ANOVA across named groups.

    Args:
        groups: label -> numeric values

    Raises:
        DegenerateInputError: fewer than 2 groups, an empty group, no
            residual degrees of freedom, or zero within-group variance
    """
    if len(groups) < 2:
        raise DegenerateInputError(f"ANOVA needs at least 2 groups, got {len(groups)}")

    arrays = {label: _as_array(values, str(label), min_n=1) for label, values in groups.items()}
    n_total = sum(len(a) for a in arrays.values())
    df_between = len(arrays) - 1
    df_within = n_total - len(arrays)
    if df_within < 1:
        raise DegenerateInputError("ANOVA needs more observations than groups")

    grand_mean = np.concatenate(list(arrays.values())).mean()
    ss_between = sum(len(a) * (a.mean() - grand_mean) ** 2 for a in arrays.values())
    ss_within = sum(((a - a.mean()) ** 2).sum() for a in arrays.values())
    if ss_within == 0:
        raise DegenerateInputError("Every group is constant; the F statistic is undefined")

    res = stats.f_oneway(*arrays.values())
    return AnovaResult(
        f_statistic=float(res.statistic),
        pvalue=float(res.pvalue),
        df_between=df_between,
        df_within=df_within,
        ss_between=float(ss_between),
        ss_within=float(ss_within),
        group_means={label: float(a.mean()) for label, a in arrays.items()},
        group_sizes={label: len(a) for label, a in arrays.items()},
    )


# =============================================================================
# RESEARCH QUESTIONS
# =============================================================================

def _prices_where(df: pd.DataFrame, column: str, value: str) -> pd.Series:
    return df.loc[df[column] == value, 'price']


def compare_manhattan_brooklyn(df: pd.DataFrame) -> TTestResult:
    """Q1: Is there a difference in average price between Manhattan and Brooklyn?"""
    return welch_t_test(
        _prices_where(df, 'neighbourhood_group', MANHATTAN),
        _prices_where(df, 'neighbourhood_group', BROOKLYN),
        labels=(MANHATTAN, BROOKLYN),
    )


def compare_entire_vs_private(df: pd.DataFrame) -> TTestResult:
    """Q2: Do entire homes/apartments and private rooms differ in average price?"""
    return welch_t_test(
        _prices_where(df, 'room_type', ENTIRE_HOME),
        _prices_where(df, 'room_type', PRIVATE_ROOM),
        labels=(ENTIRE_HOME, PRIVATE_ROOM),
    )


def correlate_reviews_availability(df: pd.DataFrame) -> CorrelationResult:
    """Q3: Are number of reviews and availability correlated?"""
    return pearson_correlation(
        df['number_of_reviews'],
        df['availability_365'],
        names=('number_of_reviews', 'availability_365'),
    )


def compare_to_benchmark(df: pd.DataFrame, benchmark_price: float = BENCHMARK_PRICE) -> TTestResult:
    """Q4: Is the average price different from the benchmark?"""
    return one_sample_t_test(df['price'], mu=benchmark_price, label='price')


def relate_to_price(df: pd.DataFrame, column: str) -> LinearRelationship:
    """Correlation and regression of price on one numeric column."""
    names = (column, 'price')
    return LinearRelationship(
        x_name=column,
        y_name='price',
        correlation=pearson_correlation(df[column], df['price'], names=names),
        regression=linear_regression(df[column], df['price'], names=names),
    )


def relate_reviews_price(df: pd.DataFrame) -> LinearRelationship:
    """Q5: Is there a linear relationship between reviews and price?"""
    return relate_to_price(df, 'number_of_reviews')


def relate_availability_price(df: pd.DataFrame) -> LinearRelationship:
    """Q6: Does availability influence price?"""
    return relate_to_price(df, 'availability_365')


def anova_price_by_room_type(df: pd.DataFrame) -> AnovaResult:
    """Q7: Does mean price differ across room types?"""
    groups = {
        str(label): prices
        for label, prices in df.groupby('room_type', observed=True)['price']
    }
    return one_way_anova(groups)


def run_hypothesis_tests(
    df: pd.DataFrame,
    benchmark_price: Optional[float] = None
) -> list[QuestionResult]:
    """
    Run the seven research questions in order.

    Any degenerate input propagates immediately; there is no partial result.
    """
    benchmark = BENCHMARK_PRICE if benchmark_price is None else benchmark_price
    return [
        QuestionResult(1, "Manhattan vs Brooklyn Prices", compare_manhattan_brooklyn(df)),
        QuestionResult(2, "Entire Home/Apt vs Private Room Prices", compare_entire_vs_private(df)),
        QuestionResult(3, "Reviews vs Availability", correlate_reviews_availability(df)),
        QuestionResult(4, f"Price vs Benchmark ({benchmark:g})", compare_to_benchmark(df, benchmark)),
        QuestionResult(5, "Reviews vs Price", relate_reviews_price(df)),
        QuestionResult(6, "Availability vs Price", relate_availability_price(df)),
        QuestionResult(7, "ANOVA - Price by Room Type", anova_price_by_room_type(df)),
    ]
