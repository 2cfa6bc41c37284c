"""Data loading and validation utilities."""
from .loader import (
    clean_names,
    init_db,
    get_clean_connection,
    create_room_type_views,
    load_listings,
    load_room_type_subsets,
    count_rows,
)
from .validator import CleaningConfig, DataCleaner, Rule, SchemaError, check_data_quality
