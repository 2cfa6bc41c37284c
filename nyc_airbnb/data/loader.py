"""
Data loading utilities for the listings analysis.

Loads the listings CSV into DuckDB with normalized column names and strict
numeric types, and reads the cleaned table and its room-type views back into
pandas.
"""

import re
import duckdb
import logging
import pandas as pd
from pathlib import Path
from typing import Optional, Union

from ..config import (
    CATEGORICAL_COLUMNS,
    CLEAN_TABLE,
    DATA_PATH,
    DATE_COLUMNS,
    NUMERIC_COLUMN_TYPES,
    RAW_TABLE,
    ROOM_TYPE_VIEWS,
)
from .validator import CleaningConfig, DataCleaner, check_schema

logger = logging.getLogger(__name__)

# Replacements applied before snake-casing
_NAME_REPLACEMENTS = {
    "'": "",
    '"': "",
    "%": "_percent_",
    "#": "_number_",
}


def _snake_case(name: str) -> str:
    for old, new in _NAME_REPLACEMENTS.items():
        name = name.replace(old, new)
    # camelCase / PascalCase boundaries
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()
    if not name:
        return "x"
    if name[0].isdigit():
        name = f"x{name}"
    return name


def clean_names(columns) -> list[str]:
    """
    Normalize column names to unique snake_case.

    Examples:
        'Room Type' -> 'room_type'
        'minimumNights' -> 'minimum_nights'
        '% Booked' -> 'percent_booked'
        ['price', 'Price'] -> ['price', 'price_2']
    """
    cleaned = []
    seen = {}
    for col in columns:
        name = _snake_case(str(col))
        seen[name] = seen.get(name, 0) + 1
        if seen[name] > 1:
            name = f"{name}_{seen[name]}"
        cleaned.append(name)
    return cleaned


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _sql_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _select_expression(source: str, target: str) -> str:
    """
    Typed, renamed select item for one raw CSV column.

    Empty fields are missing only in numeric and date columns; an empty
    text field (a blank listing or host name) is kept as ''.
    """
    col = _quote(source)
    sql_type = NUMERIC_COLUMN_TYPES.get(target)
    if sql_type:
        return f"CAST(NULLIF(TRIM({col}), '') AS {sql_type}) AS {_quote(target)}"
    if target in DATE_COLUMNS:
        return f"NULLIF(TRIM({col}), '') AS {_quote(target)}"
    return f"COALESCE({col}, '') AS {_quote(target)}"


def init_db(
    csv_path: Optional[Union[str, Path]] = None,
    db_path: str = ":memory:",
    verbose: bool = False
) -> duckdb.DuckDBPyConnection:
    """
    Load the raw listings CSV into DuckDB as the raw table.

    Column names are normalized with clean_names(); known numeric columns are
    cast strictly so a non-numeric price or availability aborts the load.
    Every other column stays text. Empty numeric or date fields load as
    NULL, empty text fields as ''.

    Args:
        csv_path: Listings CSV. Defaults to config.DATA_PATH.
        db_path: DuckDB database path (in-memory by default)
        verbose: Print load statistics

    Returns:
        Connection with the raw table loaded

    Raises:
        FileNotFoundError: if the CSV does not exist
        SchemaError: if required columns are missing
    """
    file_path = Path(csv_path) if csv_path is not None else DATA_PATH
    if not file_path.exists():
        raise FileNotFoundError(f"Listings CSV not found at {file_path}")

    con = duckdb.connect(database=db_path, read_only=False)
    try:
        con.execute(f"""
            CREATE TEMP TABLE temp_{RAW_TABLE} AS
            SELECT * FROM read_csv({_sql_string(str(file_path))}, header=true, all_varchar=true)
        """)

        original = [row[0] for row in con.execute(f"DESCRIBE temp_{RAW_TABLE}").fetchall()]
        renamed = clean_names(original)
        check_schema(renamed)

        select_list = [_select_expression(source, target) for source, target in zip(original, renamed)]
        con.execute(f"""
            CREATE OR REPLACE TABLE {RAW_TABLE} AS
            SELECT {', '.join(select_list)}
            FROM temp_{RAW_TABLE}
        """)
        con.execute(f"DROP TABLE temp_{RAW_TABLE}")
    except Exception:
        con.close()
        raise

    if verbose:
        n_rows = count_rows(con, RAW_TABLE)
        logger.info(f"Loaded {file_path.name} into table '{RAW_TABLE}': {n_rows:,} rows, {len(renamed)} columns")

    return con


def get_clean_connection(
    csv_path: Optional[Union[str, Path]] = None,
    config: Optional[CleaningConfig] = None
) -> duckdb.DuckDBPyConnection:
    """
    Initialize database with standard cleaning rules applied.

    Args:
        csv_path: Listings CSV. Defaults to config.DATA_PATH.
        config: Cleaning configuration. Defaults reproduce the 2019 analysis.

    Returns:
        Connection with both the raw and the clean table
    """
    config = config or CleaningConfig()
    con = init_db(csv_path, verbose=config.verbose)
    return DataCleaner(config).clean(con)


def count_rows(con: duckdb.DuckDBPyConnection, table: str) -> int:
    return con.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def create_room_type_views(
    con: duckdb.DuckDBPyConnection,
    table: str = CLEAN_TABLE
) -> dict[str, str]:
    """
    Create one view per room type over the clean table.

    Views are re-evaluated on every query, so they always reflect the
    current contents of the clean table.

    Returns:
        Mapping of room type label -> view name
    """
    for label, view in ROOM_TYPE_VIEWS.items():
        con.execute(f"""
            CREATE OR REPLACE VIEW {view} AS
            SELECT * FROM {table} WHERE room_type = {_sql_string(label)}
        """)
    return dict(ROOM_TYPE_VIEWS)


def load_listings(con: duckdb.DuckDBPyConnection, table: str = CLEAN_TABLE) -> pd.DataFrame:
    """
    Fetch a listings table or view as a DataFrame.

    Borough and room type become categoricals; DATE columns arrive from
    DuckDB as datetime64.
    """
    df = con.execute(f"SELECT * FROM {table}").fetchdf()
    for col in CATEGORICAL_COLUMNS:
        if col in df.columns:
            df[col] = df[col].astype("category")
    return df


def load_room_type_subsets(con: duckdb.DuckDBPyConnection) -> dict[str, pd.DataFrame]:
    """Fetch each room-type view, creating the views if needed."""
    views = create_room_type_views(con)
    return {label: load_listings(con, view) for label, view in views.items()}
