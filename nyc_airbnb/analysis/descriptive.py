"""
Descriptive statistics for the listings tables.

Each calculate/summarize function returns plain pandas objects; the print_*
functions render them for the console report.
"""

import pandas as pd
from typing import Mapping

SUMMARY_LABELS = ['Min.', '1st Qu.', 'Median', 'Mean', '3rd Qu.', 'Max.']


def summarize_numeric(values) -> pd.Series:
    """
    Six-number summary: min, quartiles, mean and max.

    Quartiles use linear interpolation between order statistics. Missing
    values are ignored.

    Raises:
        ValueError: if there are no non-missing values
    """
    series = pd.Series(values, dtype=float).dropna()
    if series.empty:
        raise ValueError("Cannot summarize an empty column")

    q1, median, q3 = series.quantile([0.25, 0.5, 0.75])
    return pd.Series(
        [series.min(), q1, median, series.mean(), q3, series.max()],
        index=SUMMARY_LABELS,
        name=getattr(values, 'name', None),
    )


def category_counts(values) -> pd.Series:
    """Listing counts per label, sorted by label (unused categories dropped)."""
    series = pd.Series(values)
    counts = series.value_counts(sort=False)
    counts = counts[counts > 0].sort_index()
    counts.index = counts.index.astype(str)
    counts.name = 'count'
    return counts


def describe_listings(df: pd.DataFrame) -> dict:
    """
    Per-column summary of a listings table.

    Returns dict keyed by column name with:
    - numeric columns: summarize_numeric() result
    - categorical columns: category_counts() result
    - datetime columns: min/max Series
    - text columns: number of distinct values
    """
    summary = {}
    for col in df.columns:
        values = df[col]
        if isinstance(values.dtype, pd.CategoricalDtype):
            summary[col] = category_counts(values)
        elif pd.api.types.is_datetime64_any_dtype(values):
            summary[col] = pd.Series({'Min.': values.min(), 'Max.': values.max()}, name=col)
        elif pd.api.types.is_numeric_dtype(values):
            if values.notna().any():
                summary[col] = summarize_numeric(values)
        else:
            summary[col] = values.nunique()
    return summary


def subset_sizes(subsets: Mapping[str, pd.DataFrame]) -> dict[str, int]:
    return {label: len(subset) for label, subset in subsets.items()}


def print_structure(df: pd.DataFrame, title: str = "RAW DATA STRUCTURE") -> None:
    """Print rows, columns and the first few values of every column."""
    print("=" * 80)
    print(title)
    print("=" * 80)
    print(f"{len(df):,} obs. of {df.shape[1]} variables:")
    for col in df.columns:
        head = ", ".join(str(v) for v in df[col].head(5).tolist())
        print(f"  $ {col:<32} {str(df[col].dtype):<10} {head}")


def print_cleaning_summary(raw_rows: int, clean_rows: int, stats: Mapping[str, int]) -> None:
    """Print how many rows each rule removed and the final row count."""
    print("\n" + "=" * 80)
    print("DATA CLEANING")
    print("=" * 80)
    print(f"Number of rows BEFORE cleaning: {raw_rows:,}")
    for name, removed in stats.items():
        print(f"  - {name}: {removed:,} rows removed")
    print(f"Number of rows AFTER cleaning:  {clean_rows:,}")
    if raw_rows > 0:
        print(f"Kept {clean_rows / raw_rows * 100:.1f}% of listings")


def print_quality_report(report: dict) -> None:
    """Print the dry-run result of check_data_quality()."""
    print("=" * 80)
    print("DATA QUALITY CHECK (no rows modified)")
    print("=" * 80)
    for rule in report['rules']:
        mark = "✓" if rule['failed'] == 0 else "✗"
        print(f"  {mark} {rule['name']:<28} {rule['failed']:>8,} / {rule['total']:,} ({rule['pct']:.1f}%)")
    print(f"\n{report['checks_passed']} of {report['total_checks']} checks passed")


def _format_summary(summary: pd.Series) -> str:
    header = "  ".join(f"{label:>10}" for label in summary.index)
    row = "  ".join(f"{value:>10.2f}" for value in summary.values)
    return f"{header}\n{row}"


def print_descriptive_summary(df: pd.DataFrame, subsets: Mapping[str, pd.DataFrame]) -> None:
    """Print the cleaned-table summary, key numeric summaries and group counts."""
    print("\n" + "=" * 80)
    print("CLEANED DATA SUMMARY")
    print("=" * 80)
    for col, summary in describe_listings(df).items():
        if isinstance(summary, pd.Series) and summary.index.tolist() == SUMMARY_LABELS:
            print(f"\n{col}:\n{_format_summary(summary)}")
        elif isinstance(summary, pd.Series):
            print(f"\n{col}:")
            for label, value in summary.items():
                print(f"  {label}: {value}")
        else:
            print(f"\n{col}: {summary:,} distinct values")

    print("\n" + "=" * 80)
    print("DESCRIPTIVE STATISTICS")
    print("=" * 80)
    print(f"\nMinimum nights:\n{_format_summary(summarize_numeric(df['minimum_nights']))}")
    print(f"\nPrice (USD):\n{_format_summary(summarize_numeric(df['price']))}")

    print("\nListings by neighbourhood group:")
    for label, count in category_counts(df['neighbourhood_group']).items():
        print(f"  {label:<20} {count:>8,}")

    print("\nListings by room type:")
    for label, count in subset_sizes(subsets).items():
        print(f"  {label:<20} {count:>8,}")
