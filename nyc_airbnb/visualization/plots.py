"""
Visualization functions for the listings EDA and hypothesis questions.

Every function draws one chart on a new figure and returns the figure, so
callers decide whether to show it, save it, or close it.
"""

import logging
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from typing import Mapping, Optional

from ..config import FIGURE_SIZE

logger = logging.getLogger(__name__)


def _new_figure(figsize=FIGURE_SIZE):
    fig, ax = plt.subplots(figsize=figsize)
    return fig, ax


def close_open_figures() -> None:
    """Close any figures left over from an earlier run (best effort)."""
    try:
        plt.close('all')
    except Exception as exc:
        logger.debug(f"Ignoring failure while closing figures: {exc}")


def plot_category_counts(
    values: pd.Series,
    title: str,
    xlabel: str,
    color: str = 'skyblue',
    ylabel: str = 'Count'
) -> plt.Figure:
    """
    Bar chart of listing counts per label.

    Args:
        values: Categorical or text column
        title: Title for the plot
        xlabel: Axis label for the categories
        color: Bar fill colour
    """
    counts = pd.Series(values).value_counts(sort=False)
    counts = counts[counts > 0].sort_index()

    fig, ax = _new_figure()
    ax.bar(counts.index.astype(str), counts.values, color=color, edgecolor='black')
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.tick_params(axis='x', labelsize=8)
    fig.tight_layout()
    return fig


def plot_histogram(
    values,
    title: str,
    xlabel: str,
    color: str = 'skyblue',
    benchmark: Optional[float] = None
) -> plt.Figure:
    """
    Histogram with Sturges binning.

    Args:
        values: Numeric values
        title: Title for the plot
        xlabel: Axis label
        color: Bar fill colour
        benchmark: If given, draw a red vertical line at this value
    """
    fig, ax = _new_figure()
    ax.hist(np.asarray(values, dtype=float), bins='sturges', color=color, edgecolor='black')
    if benchmark is not None:
        ax.axvline(benchmark, color='red', linewidth=2)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel('Frequency')
    fig.tight_layout()
    return fig


def plot_boxplot(
    data,
    title: str,
    ylabel: str,
    xlabel: Optional[str] = None,
    color: Optional[str] = None
) -> plt.Figure:
    """
    Boxplot of one series, or side-by-side boxplots of named groups.

    Args:
        data: Values, or a mapping of group label -> values
        title: Title for the plot
        ylabel: Axis label for the values
        xlabel: Axis label for the groups
        color: Box fill colour
    """
    if isinstance(data, Mapping):
        labels = list(data.keys())
        series = [np.asarray(v, dtype=float) for v in data.values()]
    else:
        labels = None
        series = [np.asarray(data, dtype=float)]

    fig, ax = _new_figure()
    box = ax.boxplot(series, patch_artist=color is not None)
    if labels is not None:
        ax.set_xticks(range(1, len(labels) + 1))
        ax.set_xticklabels(labels)
    else:
        ax.set_xticks([])
    if color is not None:
        for patch in box['boxes']:
            patch.set_facecolor(color)
            patch.set_edgecolor('black')
    ax.set_title(title)
    ax.set_ylabel(ylabel)
    if xlabel:
        ax.set_xlabel(xlabel)
    fig.tight_layout()
    return fig


def plot_scatter(
    x,
    y,
    title: str,
    xlabel: str,
    ylabel: str,
    color: str = 'black',
    marker_size: float = 10
) -> plt.Figure:
    """Scatter plot of two numeric columns."""
    fig, ax = _new_figure()
    ax.scatter(x, y, s=marker_size, color=color, alpha=0.6)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_locations(df: pd.DataFrame, title: str, color: str = 'skyblue') -> plt.Figure:
    """Longitude vs latitude scatter of listings."""
    return plot_scatter(
        df['longitude'], df['latitude'],
        title=title, xlabel='Longitude', ylabel='Latitude', color=color, marker_size=4
    )


def plot_price_by_group(
    df: pd.DataFrame,
    group_col: str,
    title: str,
    xlabel: str,
    ylabel: str = 'Price (USD)'
) -> plt.Figure:
    """Price boxplots for every observed level of a categorical column."""
    fig, ax = _new_figure()
    order = [str(level) for level in sorted(df[group_col].dropna().unique())]
    sns.boxplot(
        x=df[group_col].astype(str), y=df['price'], order=order,
        color='lightgray', ax=ax
    )
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    fig.tight_layout()
    return fig
