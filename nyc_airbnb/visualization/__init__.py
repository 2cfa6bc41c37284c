"""EDA charts and PNG export."""
from .plots import (
    close_open_figures,
    plot_category_counts,
    plot_histogram,
    plot_boxplot,
    plot_scatter,
    plot_locations,
    plot_price_by_group,
)
from .export import PlotSpec, eda_plot_specs, export_plot_specs, render_eda_plots, export_plots
