"""
End-to-end analysis run: load -> clean -> describe -> test -> export.

Stages run strictly in sequence; the first error halts the run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .analysis.descriptive import (
    print_cleaning_summary,
    print_descriptive_summary,
    print_structure,
    subset_sizes,
)
from .analysis.hypothesis import QuestionResult, run_hypothesis_tests
from .analysis.report import print_hypothesis_results
from .config import BENCHMARK_PRICE, CLEAN_TABLE, DATA_PATH, OUTPUT_DIR, RAW_TABLE
from .data.loader import count_rows, init_db, load_listings, load_room_type_subsets
from .data.validator import CleaningConfig, DataCleaner
from .visualization.export import export_plots, render_eda_plots

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Run configuration; defaults reproduce the 2019 analysis."""
    data_path: Union[str, Path] = DATA_PATH
    output_dir: Union[str, Path] = OUTPUT_DIR
    benchmark_price: float = BENCHMARK_PRICE
    show_plots: bool = False
    export_plots: bool = True
    cleaning: CleaningConfig = field(default_factory=CleaningConfig)


@dataclass
class PipelineResult:
    """What a run produced, for callers that need more than the console."""
    raw_rows: int
    clean_rows: int
    cleaning_stats: dict
    price_bounds: Optional[dict]
    subset_sizes: dict
    questions: list[QuestionResult]
    plot_titles: list[str]
    plot_paths: list[Path]


def run_pipeline(config: Optional[AnalysisConfig] = None) -> PipelineResult:
    """
    Run every stage once and print the report.

    Raises whatever the failing stage raises (FileNotFoundError,
    SchemaError, duckdb.ConversionException, DegenerateInputError, ...).
    """
    config = config or AnalysisConfig()

    # 1. Load
    con = init_db(config.data_path, verbose=config.cleaning.verbose)
    try:
        raw_rows = count_rows(con, RAW_TABLE)
        print_structure(load_listings(con, RAW_TABLE))

        # 2. Clean
        cleaner = DataCleaner(config.cleaning)
        cleaner.clean(con)
        clean_rows = count_rows(con, CLEAN_TABLE)
        print_cleaning_summary(raw_rows, clean_rows, cleaner.stats)

        listings = load_listings(con, CLEAN_TABLE)
        subsets = load_room_type_subsets(con)
    finally:
        con.close()

    # 3. Describe
    print_descriptive_summary(listings, subsets)
    plot_titles = render_eda_plots(listings, subsets, config.benchmark_price, show=config.show_plots)

    # 4. Test
    questions = run_hypothesis_tests(listings, config.benchmark_price)
    print_hypothesis_results(questions)

    # 5. Export
    plot_paths = []
    if config.export_plots:
        plot_paths = export_plots(listings, subsets, config.benchmark_price, config.output_dir)
        print(f"\nAll {len(plot_paths)} plots saved to {Path(config.output_dir)}/")

    return PipelineResult(
        raw_rows=raw_rows,
        clean_rows=clean_rows,
        cleaning_stats=dict(cleaner.stats),
        price_bounds=cleaner.price_bounds,
        subset_sizes=subset_sizes(subsets),
        questions=questions,
        plot_titles=plot_titles,
        plot_paths=plot_paths,
    )
