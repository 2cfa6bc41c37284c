"""
Plot catalogue for the EDA stage and the PNG export stage.

The EDA stage draws the full set of exploratory charts (optionally shown on
screen); the export stage re-draws the fixed set of 15 charts to named PNG
files. Neither computes new statistics.
"""

import logging
import matplotlib.pyplot as plt
import pandas as pd
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Union

from ..config import (
    BROOKLYN,
    ENTIRE_HOME,
    FIGURE_DPI,
    MANHATTAN,
    PLOT_FILES,
    PRIVATE_ROOM,
    ROOM_TYPE_COLORS,
    SHARED_ROOM,
)
from .plots import (
    close_open_figures,
    plot_boxplot,
    plot_category_counts,
    plot_histogram,
    plot_locations,
    plot_price_by_group,
    plot_scatter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotSpec:
    """A named chart and the callable that draws it on a new figure."""
    name: str
    draw: Callable[[], plt.Figure]


def _borough_prices(df: pd.DataFrame, borough: str) -> pd.Series:
    return df.loc[df['neighbourhood_group'] == borough, 'price']


def eda_plot_specs(
    df: pd.DataFrame,
    subsets: Mapping[str, pd.DataFrame],
    benchmark_price: float
) -> list[PlotSpec]:
    """
    All exploratory charts in report order: distributions, per room type
    price and location charts, then one chart per research question.
    """
    specs = [
        PlotSpec("Neighbourhood Group Distribution", lambda: plot_category_counts(
            df['neighbourhood_group'], "Neighbourhood Group Distribution", "Neighbourhood Group",
            color='skyblue')),
        PlotSpec("Room Type Distribution", lambda: plot_category_counts(
            df['room_type'], "Room Type Distribution", "Room Type", color='salmon')),
        PlotSpec("Histogram of Minimum Nights", lambda: plot_histogram(
            df['minimum_nights'], "Histogram of Minimum Nights", "Minimum Nights", color='lightgreen')),
        PlotSpec("Histogram of Price", lambda: plot_histogram(
            df['price'], "Histogram of Price", "Price (USD)", color='skyblue')),
        PlotSpec("Boxplot of Price", lambda: plot_boxplot(
            df['price'], "Boxplot of Price", "Price (USD)", color='skyblue')),
        PlotSpec("Listing Locations in NYC", lambda: plot_locations(
            df, "Listing Locations in NYC", color='skyblue')),
    ]

    for label, subset in subsets.items():
        colors = ROOM_TYPE_COLORS[label]
        prefix = label.replace("home/apt", "Home/Apt").replace("room", "Room")
        specs.extend([
            PlotSpec(f"Histogram of Price - {prefix}", lambda s=subset, p=prefix, c=colors: plot_histogram(
                s['price'], f"Histogram of Price - {p}", "Price (USD)", color=c['hist'])),
            PlotSpec(f"Boxplot of Price - {prefix}", lambda s=subset, p=prefix, c=colors: plot_boxplot(
                s['price'], f"Boxplot of Price - {p}", "Price (USD)", color=c['box'])),
            PlotSpec(f"Locations - {prefix}", lambda s=subset, p=prefix, c=colors: plot_locations(
                s, f"Locations - {p}", color=c['scatter'])),
        ])

    specs.extend([
        PlotSpec("Price Distribution: Manhattan vs Brooklyn", lambda: plot_boxplot(
            {MANHATTAN: _borough_prices(df, MANHATTAN), BROOKLYN: _borough_prices(df, BROOKLYN)},
            "Price Distribution: Manhattan vs Brooklyn", "Price (USD)", xlabel="Neighbourhood Group")),
        PlotSpec("Price Distribution: Entire Home/Apt vs Private Room", lambda: plot_boxplot(
            {"Entire Home/Apt": subsets[ENTIRE_HOME]['price'], "Private Room": subsets[PRIVATE_ROOM]['price']},
            "Price Distribution: Entire Home/Apt vs Private Room", "Price (USD)", xlabel="Room Type")),
        PlotSpec("Number of Reviews vs Availability (365 days)", lambda: plot_scatter(
            df['number_of_reviews'], df['availability_365'],
            "Number of Reviews vs Availability (365 days)", "Number of Reviews", "Availability (days)")),
        PlotSpec("Distribution of Airbnb Prices (with Benchmark)", lambda: plot_histogram(
            df['price'], "Distribution of Airbnb Prices (with Benchmark)", "Price (USD)",
            color='lightblue', benchmark=benchmark_price)),
        PlotSpec("Number of Reviews vs Price", lambda: plot_scatter(
            df['number_of_reviews'], df['price'],
            "Number of Reviews vs Price", "Number of Reviews", "Price (USD)")),
        PlotSpec("Availability (365 days) vs Price", lambda: plot_scatter(
            df['availability_365'], df['price'],
            "Availability (365 days) vs Price", "Availability (days per year)", "Price (USD)")),
        PlotSpec("Price by Room Type", lambda: plot_price_by_group(
            df, 'room_type', "Price by Room Type", "Room Type")),
    ])
    return specs


def export_plot_specs(
    df: pd.DataFrame,
    subsets: Mapping[str, pd.DataFrame],
    benchmark_price: float
) -> list[PlotSpec]:
    """The exported charts, named by config.PLOT_FILES in order."""
    entire = subsets[ENTIRE_HOME]
    private = subsets[PRIVATE_ROOM]
    shared = subsets[SHARED_ROOM]

    # One chart per PLOT_FILES entry, same order
    draws = [
        lambda: plot_category_counts(
            df['neighbourhood_group'], "Neighbourhood Group Distribution", "Neighbourhood Group",
            color='skyblue'),
        lambda: plot_category_counts(
            df['room_type'], "Room Type Distribution", "Room Type", color='salmon'),
        lambda: plot_histogram(
            df['price'], "Histogram of Price", "Price", color='skyblue'),
        lambda: plot_boxplot(
            df['price'], "Boxplot of Price", "Price", color='skyblue'),
        lambda: plot_locations(
            df, "Listing Locations in NYC", color='skyblue'),
        lambda: plot_histogram(
            entire['price'], "Price: Entire Home/Apt", "Price", color='salmon'),
        lambda: plot_boxplot(
            private['price'], "Price: Private Room", "Price", color='lightgreen'),
        lambda: plot_locations(
            shared, "Shared Room Locations", color='orange'),
        lambda: plot_boxplot(
            {MANHATTAN: _borough_prices(df, MANHATTAN), BROOKLYN: _borough_prices(df, BROOKLYN)},
            "Manhattan vs Brooklyn Prices", "Price", xlabel="Neighbourhood Group"),
        lambda: plot_boxplot(
            {"Entire Home/Apt": entire['price'], "Private Room": private['price']},
            "Entire Home/Apt vs Private Room Prices", "Price", xlabel="Room Type"),
        lambda: plot_scatter(
            df['number_of_reviews'], df['availability_365'],
            "Reviews vs Availability", "Reviews", "Availability (365 days)"),
        lambda: plot_histogram(
            df['price'], "Price Distribution (with Benchmark)", "Price",
            color='lightblue', benchmark=benchmark_price),
        lambda: plot_scatter(
            df['number_of_reviews'], df['price'],
            "Reviews vs Price", "Number of Reviews", "Price"),
        lambda: plot_scatter(
            df['availability_365'], df['price'],
            "Availability vs Price", "Availability", "Price"),
        lambda: plot_price_by_group(
            df, 'room_type', "Price by Room Type", "Room Type", ylabel="Price"),
    ]
    return [PlotSpec(name, draw) for name, draw in zip(PLOT_FILES, draws, strict=True)]


def render_eda_plots(
    df: pd.DataFrame,
    subsets: Mapping[str, pd.DataFrame],
    benchmark_price: float,
    show: bool = False
) -> list[str]:
    """
    Draw every exploratory chart, showing each if requested.

    Returns:
        Titles of the charts drawn, in order
    """
    close_open_figures()
    drawn = []
    for spec in eda_plot_specs(df, subsets, benchmark_price):
        fig = spec.draw()
        if show:
            plt.show()
        plt.close(fig)
        drawn.append(spec.name)
    return drawn


def export_plots(
    df: pd.DataFrame,
    subsets: Mapping[str, pd.DataFrame],
    benchmark_price: float,
    output_dir: Union[str, Path]
) -> list[Path]:
    """
    Re-draw the exported charts to PNG files in output_dir.

    The directory is created if missing; existing files are overwritten.

    Returns:
        Paths of the written files, in export order
    """
    close_open_figures()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for spec in export_plot_specs(df, subsets, benchmark_price):
        path = output_dir / spec.name
        fig = spec.draw()
        try:
            fig.savefig(path, dpi=FIGURE_DPI)
        finally:
            plt.close(fig)
        written.append(path)
        logger.debug(f"Saved {path}")
    return written
