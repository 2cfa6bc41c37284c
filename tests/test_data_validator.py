"""
Tests for nyc_airbnb/data/validator.py - Core components of data validation and cleaning.
"""

import pytest
import pandas as pd
from nyc_airbnb.data.loader import init_db
from nyc_airbnb.data.validator import (
    Rule,
    CleaningConfig,
    DataCleaner,
    SchemaError,
    check_data_quality,
    check_schema,
)


class TestRule:
    """Test Rule dataclass."""

    def test_rule_creation(self):
        """Test that Rule can be created successfully."""
        rule = Rule(
            name="Test Rule",
            check_query="SELECT COUNT(*) FROM test",
            action_query="DELETE FROM test WHERE id = 1"
        )
        assert rule.name == "Test Rule"
        assert rule.enabled is True

    def test_rule_with_disabled_flag(self):
        """Test that Rule can be created with enabled=False."""
        rule = Rule(
            name="Disabled Rule",
            check_query="SELECT 1",
            action_query="SELECT 1",
            enabled=False
        )
        assert rule.enabled is False


class TestCleaningConfig:
    """Test CleaningConfig dataclass."""

    def test_default_config_values(self):
        """Defaults reproduce the 2019 analysis."""
        config = CleaningConfig()

        assert config.remove_missing_values is True
        assert config.remove_non_positive_prices is True
        assert config.remove_unavailable_listings is True
        assert config.remove_long_minimum_stays is True
        assert config.max_minimum_nights == 365
        assert config.remove_price_outliers is True
        assert config.price_outlier_sd == 2.0
        assert config.convert_types is True
        assert config.verbose is False

    def test_config_with_custom_values(self):
        config = CleaningConfig(
            remove_price_outliers=False,
            max_minimum_nights=30,
            verbose=True
        )
        assert config.remove_price_outliers is False
        assert config.max_minimum_nights == 30
        assert config.verbose is True


class TestSchema:
    """Test required-column checks."""

    def test_complete_schema_passes(self, sample_listings):
        check_schema(sample_listings.columns)

    def test_missing_columns_listed(self, sample_listings):
        columns = sample_listings.drop(columns=['price', 'availability_365']).columns
        with pytest.raises(SchemaError) as exc_info:
            check_schema(columns)
        assert 'price' in str(exc_info.value)
        assert 'availability_365' in str(exc_info.value)

    def test_schema_error_is_value_error(self):
        assert issubclass(SchemaError, ValueError)

    def test_cleaner_rejects_incomplete_table(self, test_db_with_data):
        """Cleaning a table without required columns fails before any rule runs."""
        test_db_with_data.execute(
            "CREATE TABLE partial AS SELECT id, price FROM listings_raw"
        )
        cleaner = DataCleaner(CleaningConfig(), source_table="partial", table="partial_clean")
        with pytest.raises(SchemaError):
            cleaner.clean(test_db_with_data)
        assert cleaner.stats == {}


class TestDataCleaner:
    """Test DataCleaner class."""

    def test_data_cleaner_initialization(self):
        cleaner = DataCleaner(CleaningConfig())
        assert cleaner.table == "listings"
        assert cleaner.source_table == "listings_raw"
        assert len(cleaner.rules) == 3
        assert cleaner.stats == {}
        assert cleaner.price_bounds is None

    def test_default_config_when_none(self):
        cleaner = DataCleaner()
        assert cleaner.config == CleaningConfig()

    def test_rules_respect_config(self):
        cleaner = DataCleaner(CleaningConfig(
            remove_non_positive_prices=False,
            remove_unavailable_listings=False
        ))
        names = [rule.name for rule in cleaner.rules]
        assert names == ['Minimum Nights > 365']

    def test_missing_values_rule_runs_first(self, sample_listings):
        cleaner = DataCleaner(CleaningConfig())
        rules = cleaner.rules_for(list(sample_listings.columns))
        assert rules[0].name == 'Missing Values'
        assert '"host_name" IS NULL' in rules[0].check_query

    def test_full_clean(self, test_db_with_data, expected_test_data_stats):
        cleaner = DataCleaner(CleaningConfig())
        cleaner.clean(test_db_with_data)

        count = test_db_with_data.execute("SELECT COUNT(*) FROM listings").fetchone()[0]
        assert count == expected_test_data_stats['clean_listings']
        assert sum(cleaner.stats.values()) == (
            expected_test_data_stats['total_listings'] - expected_test_data_stats['clean_listings']
        )

    def test_clean_properties(self, test_db_with_data):
        """Every kept row satisfies every filter."""
        cleaner = DataCleaner(CleaningConfig())
        cleaner.clean(test_db_with_data)
        df = test_db_with_data.execute("SELECT * FROM listings").fetchdf()

        assert not df.isna().any().any()
        assert (df['price'] > 0).all()
        assert (df['availability_365'] > 0).all()
        assert (df['minimum_nights'] <= 365).all()
        bounds = cleaner.price_bounds
        assert ((df['price'] - bounds['mean']).abs() <= 2 * bounds['sd']).all()

    def test_raw_table_untouched(self, test_db_with_data, expected_test_data_stats):
        DataCleaner(CleaningConfig()).clean(test_db_with_data)

        raw = test_db_with_data.execute("SELECT COUNT(*) FROM listings_raw").fetchone()[0]
        clean = test_db_with_data.execute("SELECT COUNT(*) FROM listings").fetchone()[0]
        assert raw == expected_test_data_stats['total_listings']
        assert clean <= raw

    def test_clean_twice_is_deterministic(self, test_db_with_data):
        first = DataCleaner(CleaningConfig())
        first.clean(test_db_with_data)
        first_rows = test_db_with_data.execute("SELECT * FROM listings ORDER BY id").fetchdf()

        second = DataCleaner(CleaningConfig())
        second.clean(test_db_with_data)
        second_rows = test_db_with_data.execute("SELECT * FROM listings ORDER BY id").fetchdf()

        assert first.stats == second.stats
        assert first.price_bounds == second.price_bounds
        pd.testing.assert_frame_equal(first_rows, second_rows)

    def test_verbose_logs_rules(self, test_db_with_data, caplog):
        with caplog.at_level("INFO", logger="nyc_airbnb.data.validator"):
            DataCleaner(CleaningConfig(verbose=True)).clean(test_db_with_data)
        assert "Non-Positive Price" in caplog.text
        assert "Final: 6 of 12 listings kept" in caplog.text


class TestCheckDataQuality:
    """Test the dry-run quality report."""

    def test_report_structure(self, test_db_with_data):
        report = check_data_quality(test_db_with_data)

        assert set(report) == {'rules', 'total_failed', 'checks_passed', 'total_checks'}
        assert report['total_checks'] == 4
        assert len(report['rules']) == 4

    def test_report_counts(self, test_db_with_data, expected_test_data_stats):
        report = check_data_quality(test_db_with_data)
        failed = {r['name']: r['failed'] for r in report['rules']}

        assert failed['Missing Values'] == expected_test_data_stats['missing_values']
        assert failed['Non-Positive Price'] == expected_test_data_stats['non_positive_prices']
        assert failed['Never Available'] == expected_test_data_stats['never_available']
        assert failed['Minimum Nights > 365'] == expected_test_data_stats['long_minimum_stays']
        assert report['checks_passed'] == 0

    def test_report_does_not_modify(self, test_db_with_data, expected_test_data_stats):
        check_data_quality(test_db_with_data)
        raw = test_db_with_data.execute("SELECT COUNT(*) FROM listings_raw").fetchone()[0]
        assert raw == expected_test_data_stats['total_listings']

    def test_clean_data_passes(self, synthetic_csv):
        con = init_db(synthetic_csv)
        report = check_data_quality(con)
        assert report['total_failed'] == 0
        assert report['checks_passed'] == report['total_checks']
