"""
Configuration for the NYC Airbnb 2019 analysis.

Contains the input path, the expected listings schema, the benchmark price
used by the one-sample test, and the plot export constants.
"""

from pathlib import Path


PROJECT_ROOT = Path(__file__).parent.parent


# =============================================================================
# INPUT / OUTPUT
# =============================================================================

# 2019 NYC Airbnb open data (Kaggle)
DATA_PATH = PROJECT_ROOT / "data" / "AB_NYC_2019.csv"

# Exported PNGs land here (created if missing)
OUTPUT_DIR = Path("images")


# =============================================================================
# SCHEMA
# =============================================================================

RAW_TABLE = "listings_raw"
CLEAN_TABLE = "listings"

# Columns the analysis cannot run without (after name normalization)
REQUIRED_COLUMNS = [
    "neighbourhood_group",
    "neighbourhood",
    "latitude",
    "longitude",
    "room_type",
    "price",
    "minimum_nights",
    "number_of_reviews",
    "last_review",
    "availability_365",
]

# Strict casts applied at load; a malformed value aborts the load
NUMERIC_COLUMN_TYPES = {
    "id": "BIGINT",
    "host_id": "BIGINT",
    "latitude": "DOUBLE",
    "longitude": "DOUBLE",
    "price": "DOUBLE",
    "minimum_nights": "INTEGER",
    "number_of_reviews": "INTEGER",
    "reviews_per_month": "DOUBLE",
    "calculated_host_listings_count": "INTEGER",
    "availability_365": "INTEGER",
}

CATEGORICAL_COLUMNS = ["neighbourhood_group", "room_type"]
DATE_COLUMNS = ["last_review"]


# =============================================================================
# ROOM TYPES / BOROUGHS
# =============================================================================

ENTIRE_HOME = "Entire home/apt"
PRIVATE_ROOM = "Private room"
SHARED_ROOM = "Shared room"

# label -> DuckDB view name
ROOM_TYPE_VIEWS = {
    ENTIRE_HOME: "entire_home",
    PRIVATE_ROOM: "private_room",
    SHARED_ROOM: "shared_room",
}

MANHATTAN = "Manhattan"
BROOKLYN = "Brooklyn"


# =============================================================================
# HYPOTHESIS TESTS
# =============================================================================

BENCHMARK_PRICE = 150.0
CONFIDENCE_LEVEL = 0.95
SIGNIFICANCE_LEVEL = 0.05


# =============================================================================
# PLOTS
# =============================================================================

FIGURE_SIZE = (7, 5)  # inches
FIGURE_DPI = 120

PLOT_FILES = [
    "neighbourhood_distribution.png",
    "room_type_distribution.png",
    "price_histogram.png",
    "price_boxplot.png",
    "location_scatter.png",
    "entire_home_hist.png",
    "private_room_box.png",
    "shared_room_scatter.png",
    "manhattan_brooklyn_box.png",
    "entire_vs_private_box.png",
    "reviews_availability_scatter.png",
    "benchmark_hist.png",
    "reviews_price_scatter.png",
    "availability_price_scatter.png",
    "room_type_anova.png",
]

# Per room type colours used by the subset plots
ROOM_TYPE_COLORS = {
    ENTIRE_HOME: {"hist": "salmon", "box": "salmon", "scatter": "salmon"},
    PRIVATE_ROOM: {"hist": "lightgreen", "box": "lightgreen", "scatter": "green"},
    SHARED_ROOM: {"hist": "orange", "box": "orange", "scatter": "orange"},
}
