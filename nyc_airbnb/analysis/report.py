"""
Console formatting for hypothesis test results.

Each question prints as a block headed '--- Question N: <title> ---' in
question order.
"""

from typing import Iterable

from .hypothesis import (
    AnovaResult,
    CorrelationResult,
    LinearRelationship,
    QuestionResult,
    RegressionResult,
    TTestResult,
)


def _p(pvalue: float) -> str:
    return "< 2.2e-16" if pvalue < 2.2e-16 else f"= {pvalue:.4g}"


def format_t_test(result: TTestResult) -> str:
    alt = "true difference in means" if len(result.estimates) == 2 else "true mean"
    pct = f"{result.confidence_level * 100:g}"
    lines = [
        f"\t{result.method}",
        "",
        f"t = {result.statistic:.4f}, df = {result.df:.2f}, p-value {_p(result.pvalue)}",
        f"alternative hypothesis: {alt} is not equal to {result.null_value:g}",
        f"{pct} percent confidence interval:",
        f"  {result.conf_int[0]:.4f}  {result.conf_int[1]:.4f}",
        "sample estimates:",
    ]
    for label, mean in result.estimates.items():
        lines.append(f"  {label}: {mean:.4f}")
    return "\n".join(lines)


def format_correlation(result: CorrelationResult) -> str:
    pct = f"{result.confidence_level * 100:g}"
    return "\n".join([
        f"Correlation coefficient: {result.r:.6f}",
        f"t = {result.statistic:.4f}, df = {result.df}, p-value {_p(result.pvalue)}",
        f"{pct} percent confidence interval: {result.conf_int[0]:.4f}  {result.conf_int[1]:.4f}",
    ])


def format_regression(result: RegressionResult, x_name: str, y_name: str) -> str:
    return "\n".join([
        f"Linear model: {y_name} ~ {x_name}",
        f"{'':<20}{'Estimate':>12}{'Std. Error':>12}{'t value':>10}",
        f"{'(Intercept)':<20}{result.intercept:>12.4f}{result.intercept_stderr:>12.4f}{result.intercept_t:>10.3f}",
        f"{x_name:<20}{result.slope:>12.4f}{result.slope_stderr:>12.4f}{result.slope_t:>10.3f}",
        f"Residual standard error: {result.residual_std_error:.2f} on {result.df_residual} degrees of freedom",
        f"Multiple R-squared: {result.r_squared:.6f}",
        f"Slope p-value {_p(result.slope_pvalue)}",
    ])


def format_relationship(result: LinearRelationship) -> str:
    return "\n".join([
        format_correlation(result.correlation),
        "",
        format_regression(result.regression, result.x_name, result.y_name),
    ])


def format_anova(result: AnovaResult) -> str:
    lines = [
        f"{'':<12}{'Df':>8}{'Sum Sq':>18}{'Mean Sq':>16}{'F value':>10}{'Pr(>F)':>12}",
        f"{'room_type':<12}{result.df_between:>8}{result.ss_between:>18.0f}{result.ms_between:>16.0f}"
        f"{result.f_statistic:>10.2f}{result.pvalue:>12.4g}",
        f"{'Residuals':<12}{result.df_within:>8}{result.ss_within:>18.0f}{result.ms_within:>16.0f}",
        "Group means:",
    ]
    for label, mean in result.group_means.items():
        lines.append(f"  {label:<20} {mean:>10.2f}  (n = {result.group_sizes[label]:,})")
    return "\n".join(lines)


def format_question(question: QuestionResult) -> str:
    result = question.result
    if isinstance(result, TTestResult):
        body = format_t_test(result)
    elif isinstance(result, CorrelationResult):
        body = format_correlation(result)
    elif isinstance(result, LinearRelationship):
        body = format_relationship(result)
    elif isinstance(result, AnovaResult):
        body = format_anova(result)
    else:
        raise TypeError(f"Unsupported result type: {type(result).__name__}")
    return f"\n--- Question {question.number}: {question.title} ---\n{body}"


def print_hypothesis_results(questions: Iterable[QuestionResult]) -> None:
    print("\n" + "=" * 80)
    print("STATISTICAL ANALYSIS & HYPOTHESIS TESTING")
    print("=" * 80)
    for question in questions:
        print(format_question(question))
