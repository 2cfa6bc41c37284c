#!/usr/bin/env python
"""
Run the NYC Airbnb 2019 cleaning, EDA and hypothesis-testing pipeline.

Usage:
    python entrypoint/run_analysis.py
    python entrypoint/run_analysis.py --data data/AB_NYC_2019.csv --benchmark 175
    python entrypoint/run_analysis.py --check-only  # Data quality report, no cleaning
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse

import matplotlib

from nyc_airbnb.config import BENCHMARK_PRICE, DATA_PATH, OUTPUT_DIR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='NYC Airbnb 2019 EDA and hypothesis tests')
    parser.add_argument('--data', type=str, default=str(DATA_PATH),
                        help='Path to the listings CSV')
    parser.add_argument('--output-dir', type=str, default=str(OUTPUT_DIR),
                        help='Directory for exported PNGs')
    parser.add_argument('--benchmark', type=float, default=BENCHMARK_PRICE,
                        help='Benchmark price for the one-sample t-test')
    parser.add_argument('--show', action='store_true', help='Show EDA plots on screen')
    parser.add_argument('--no-export', action='store_true', help='Skip writing PNG files')
    parser.add_argument('--check-only', action='store_true',
                        help='Print the data quality report and exit without cleaning')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log each cleaning rule')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if not args.show:
        matplotlib.use('Agg')

    # Imported after the backend is chosen
    from nyc_airbnb.analysis.descriptive import print_quality_report
    from nyc_airbnb.data.loader import init_db
    from nyc_airbnb.data.validator import CleaningConfig, check_data_quality
    from nyc_airbnb.pipeline import AnalysisConfig, run_pipeline

    if args.check_only:
        con = init_db(args.data, verbose=args.verbose)
        try:
            print_quality_report(check_data_quality(con))
        finally:
            con.close()
        return

    print("=" * 70)
    print("NYC AIRBNB 2019 - CLEANING, EDA & STATISTICS")
    print("=" * 70)

    config = AnalysisConfig(
        data_path=args.data,
        output_dir=args.output_dir,
        benchmark_price=args.benchmark,
        show_plots=args.show,
        export_plots=not args.no_export,
        cleaning=CleaningConfig(verbose=args.verbose),
    )
    result = run_pipeline(config)

    print("\n" + "=" * 70)
    print("ANALYSIS COMPLETE")
    print("=" * 70)
    print(f"Listings: {result.raw_rows:,} raw -> {result.clean_rows:,} clean")
    print(f"Questions answered: {len(result.questions)}")
    print(f"Plots written: {len(result.plot_paths)}")


if __name__ == "__main__":
    main()
