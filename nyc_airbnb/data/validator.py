"""
Data validation and cleaning using a unified Rule-based architecture.

Every row filter (missing values, invalid prices, never-available listings,
unrealistic minimum stays) uses the same Rule format with check_query and
action_query. The price outlier filter needs the mean and standard deviation
first, so it is handled by a custom method, as is the type conversion.
"""

import duckdb
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import CLEAN_TABLE, DATE_COLUMNS, RAW_TABLE, REQUIRED_COLUMNS

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


class SchemaError(ValueError):
    """Raised when the listings table lacks columns the analysis needs."""


# ============================================================================
# 1. RULE DATACLASS (Unified Format)
# ============================================================================

@dataclass
class Rule:
    """
    Single data quality rule.

    All operations follow the same pattern:
    1. Check query: How many rows are affected?
    2. Action query: Remove them
    """
    name: str
    check_query: str
    action_query: str
    enabled: bool = True

# ============================================================================
# 2. CLEANING CONFIG (Self-Documenting Configuration)
# ============================================================================

@dataclass
class CleaningConfig:
    """
    Configuration for the listings cleaning pipeline.

    Each field enables/disables a specific rule or sets its threshold.
    Defaults reproduce the 2019 NYC analysis exactly.
    """
    # Row filters
    remove_missing_values: bool = True        # Any NULL field drops the row
    remove_non_positive_prices: bool = True   # price = 0 is nonsensical
    remove_unavailable_listings: bool = True  # availability_365 = 0 (never available)
    remove_long_minimum_stays: bool = True
    max_minimum_nights: int = 365

    # Single pass, bounds computed after the row filters
    remove_price_outliers: bool = True
    price_outlier_sd: float = 2.0

    # last_review: text -> DATE
    convert_types: bool = True

    # Logging
    verbose: bool = False


def get_columns(con: duckdb.DuckDBPyConnection, table: str) -> list[str]:
    """Column names of a table or view, in order."""
    return [row[0] for row in con.execute(f"DESCRIBE {table}").fetchall()]


def check_schema(columns, required: Optional[list[str]] = None) -> None:
    """
    Fail fast if any required column is missing.

    Raises:
        SchemaError: listing every missing column
    """
    required = REQUIRED_COLUMNS if required is None else required
    missing = [col for col in required if col not in set(columns)]
    if missing:
        raise SchemaError(
            f"Listings data is missing required column(s): {', '.join(missing)}"
        )

# ============================================================================
# 3. DATA CLEANER CLASS (Applies Rules)
# ============================================================================

class DataCleaner:
    """
    Applies data cleaning rules based on configuration.

    Usage:
        config = CleaningConfig(price_outlier_sd=2.0, verbose=True)
        cleaner = DataCleaner(config)
        clean_con = cleaner.clean(init_db())

    The raw table is never modified: cleaning copies it to the clean table
    first and filters the copy.
    """

    def __init__(
        self,
        config: Optional[CleaningConfig] = None,
        source_table: str = RAW_TABLE,
        table: str = CLEAN_TABLE
    ):
        self.config = config or CleaningConfig()
        self.source_table = source_table
        self.table = table
        self.rules = self._build_rules()
        self.stats = {}
        self.price_bounds = None

    def _build_rules(self) -> list[Rule]:
        """Build list of row-filter rules based on config."""
        rules = []
        t = self.table

        if self.config.remove_non_positive_prices:
            rules.append(Rule(
                "Non-Positive Price",
                f"SELECT COUNT(*) FROM {t} WHERE price <= 0",
                f"DELETE FROM {t} WHERE price <= 0"
            ))

        if self.config.remove_unavailable_listings:
            rules.append(Rule(
                "Never Available",
                f"SELECT COUNT(*) FROM {t} WHERE availability_365 <= 0",
                f"DELETE FROM {t} WHERE availability_365 <= 0"
            ))

        if self.config.remove_long_minimum_stays:
            limit = int(self.config.max_minimum_nights)
            rules.append(Rule(
                f"Minimum Nights > {limit}",
                f"SELECT COUNT(*) FROM {t} WHERE minimum_nights > {limit}",
                f"DELETE FROM {t} WHERE minimum_nights > {limit}"
            ))

        return rules

    def _build_missing_values_rule(self, columns: list[str]) -> Rule:
        """NULL in any column drops the row, so the rule depends on the schema."""
        condition = " OR ".join(f'"{col}" IS NULL' for col in columns)
        return Rule(
            "Missing Values",
            f"SELECT COUNT(*) FROM {self.table} WHERE {condition}",
            f"DELETE FROM {self.table} WHERE {condition}",
            enabled=self.config.remove_missing_values
        )

    def rules_for(self, columns: list[str]) -> list[Rule]:
        """All row-filter rules in application order for the given schema."""
        return [self._build_missing_values_rule(columns)] + self.rules

    def _apply_rule(self, con: duckdb.DuckDBPyConnection, rule: Rule) -> None:
        affected = con.execute(rule.check_query).fetchone()[0]

        if affected > 0:
            con.execute(rule.action_query)
            self.stats[rule.name] = affected

            if self.config.verbose:
                logger.info(f"  ✓ {rule.name}: {affected:,} rows")
        elif self.config.verbose:
            logger.info(f"  - {rule.name}: 0 rows")

    def _remove_price_outliers(self, con: duckdb.DuckDBPyConnection) -> None:
        """
        Remove listings whose price lies more than N standard deviations
        from the mean.

        Mean and sample standard deviation are computed once on the rows that
        survived the rule filters; the filter is not iterated.
        """
        n_sd = self.config.price_outlier_sd
        if self.config.verbose:
            logger.info(f"Removing price outliers (±{n_sd:g} SD)...")

        n_rows, mean_price, sd_price = con.execute(f"""
            SELECT COUNT(*), AVG(price), STDDEV_SAMP(price) FROM {self.table}
        """).fetchone()

        if sd_price is None:
            raise ValueError(
                f"Cannot compute price outlier bounds from {n_rows} listing(s); "
                f"at least 2 are required"
            )

        threshold = n_sd * sd_price
        self.price_bounds = {
            'mean': mean_price,
            'sd': sd_price,
            'lower': mean_price - threshold,
            'upper': mean_price + threshold,
        }

        if self.config.verbose:
            logger.info(
                f"  • Mean ${mean_price:.2f}, SD ${sd_price:.2f} -> "
                f"keeping ${self.price_bounds['lower']:.2f} to ${self.price_bounds['upper']:.2f}"
            )

        self._apply_rule(con, Rule(
            f"Price Outliers (±{n_sd:g} SD)",
            f"SELECT COUNT(*) FROM {self.table} WHERE ABS(price - {mean_price!r}) > {threshold!r}",
            f"DELETE FROM {self.table} WHERE ABS(price - {mean_price!r}) > {threshold!r}"
        ))

    def _convert_types(self, con: duckdb.DuckDBPyConnection, columns: list[str]) -> None:
        """Cast date columns stored as text to DATE. Malformed dates raise."""
        for col in DATE_COLUMNS:
            if col in columns:
                con.execute(f'ALTER TABLE {self.table} ALTER COLUMN "{col}" TYPE DATE')
                if self.config.verbose:
                    logger.info(f"  • {col} -> DATE")

    def clean(self, con: duckdb.DuckDBPyConnection) -> duckdb.DuckDBPyConnection:
        """
        Copy the raw table, apply all enabled rules, remove price outliers
        and convert types.

        Returns the same connection with the clean table populated.

        Raises:
            SchemaError: if the raw table lacks required columns
            ValueError: if fewer than 2 rows remain for the outlier bounds
        """
        columns = get_columns(con, self.source_table)
        check_schema(columns)

        con.execute(f"CREATE OR REPLACE TABLE {self.table} AS SELECT * FROM {self.source_table}")
        self.stats = {}
        self.price_bounds = None

        rules = self.rules_for(columns)
        if self.config.verbose:
            logger.info(f"Applying {sum(r.enabled for r in rules)} data cleaning rules...")

        for rule in rules:
            if rule.enabled:
                self._apply_rule(con, rule)

        if self.config.remove_price_outliers:
            self._remove_price_outliers(con)

        if self.config.convert_types:
            self._convert_types(con, columns)

        if self.config.verbose:
            raw = con.execute(f"SELECT COUNT(*) FROM {self.source_table}").fetchone()[0]
            clean = con.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]
            logger.info(f"\nFinal: {clean:,} of {raw:,} listings kept")

        return con


def check_data_quality(con: duckdb.DuckDBPyConnection, table: str = RAW_TABLE) -> dict:
    """
    Check data quality without modifying data.
    Returns dict with results for each row-filter rule.

    Each rule is counted independently against the given table, so rows
    failing several rules are counted once per rule.
    """
    columns = get_columns(con, table)
    check_schema(columns)
    cleaner = DataCleaner(CleaningConfig(), table=table)
    rules = cleaner.rules_for(columns)

    total = con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    results = []
    total_failed = 0

    for rule in rules:
        failed = con.execute(rule.check_query).fetchone()[0]
        pct = (failed / total * 100) if total > 0 else 0

        results.append({
            'name': rule.name,
            'failed': failed,
            'total': total,
            'pct': pct
        })
        total_failed += failed

    return {
        'rules': results,
        'total_failed': total_failed,
        'checks_passed': sum(1 for r in results if r['failed'] == 0),
        'total_checks': len(rules)
    }
