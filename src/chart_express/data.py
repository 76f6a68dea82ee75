"""Normalization of chart inputs into readable tables.

Anything the shorthand API accepts as `data` passes through `to_table`:
in-memory inputs become pandas DataFrames, remote URLs stay as
`altair.UrlData` so the renderer fetches them lazily.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import altair as alt
import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from chart_express.errors import FieldNotFoundError, UnsupportedDataError

logger = logging.getLogger(__name__)

Table = Union[pd.DataFrame, alt.UrlData]

_READERS = {
    ".csv": lambda path: pd.read_csv(path),
    ".tsv": lambda path: pd.read_csv(path, sep="\t"),
    ".json": lambda path: pd.read_json(path),
    ".jsonl": lambda path: pd.read_json(path, lines=True),
}


def is_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a local CSV/TSV/JSON/JSONL file into a DataFrame.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnsupportedDataError: If the suffix has no reader.
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedDataError(
            f"Unsupported data file type: {path.suffix or '<none>'}",
            {"path": str(path), "supported": sorted(_READERS)},
        )
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    frame = reader(path)
    logger.debug("Read %d rows from %s", len(frame), path)
    return frame


def _from_rows(rows: List[Any]) -> pd.DataFrame:
    if not rows:
        raise UnsupportedDataError("Cannot chart an empty list of rows")
    if not all(isinstance(row, dict) for row in rows):
        raise UnsupportedDataError("Row lists must contain only dictionaries")
    return pd.DataFrame(rows)


def _from_columns(columns: Dict[str, Any]) -> pd.DataFrame:
    if not columns:
        raise UnsupportedDataError("Cannot chart an empty column mapping")
    for name, values in columns.items():
        if isinstance(values, (str, bytes)) or not hasattr(values, "__len__"):
            raise UnsupportedDataError(
                f"Column '{name}' must be a sequence of values", {"column": name}
            )
    try:
        return pd.DataFrame(columns)
    except ValueError as e:
        lengths = {str(name): len(values) for name, values in columns.items()}
        raise UnsupportedDataError(
            f"Columns cannot form a table: {e}", {"lengths": lengths}
        ) from e


def to_table(data: Any) -> Table:
    """Normalize supported inputs into a DataFrame or URL data reference.

    Args:
        data: DataFrame, list of row dicts, dict of columns, local file path,
            http(s) URL, or an existing `alt.UrlData`.

    Returns:
        A pandas DataFrame or `alt.UrlData`.

    Raises:
        UnsupportedDataError: If the input shape cannot be charted.
    """
    if isinstance(data, pd.DataFrame):
        if len(data.columns) == 0:
            raise UnsupportedDataError("DataFrame has no columns")
        return data
    if isinstance(data, alt.UrlData):
        return data
    if is_url(data):
        return alt.UrlData(url=data)
    if isinstance(data, (str, Path)):
        return read_table(data)
    if isinstance(data, list):
        return _from_rows(data)
    if isinstance(data, dict):
        return _from_columns(data)

    raise UnsupportedDataError(
        f"Unsupported data type: {type(data).__name__}", {"type": type(data).__name__}
    )


def tidy_matrix(
    matrix: pd.DataFrame,
    row_name: str = "row",
    column_name: str = "column",
    value_name: str = "value",
) -> pd.DataFrame:
    """Melt a square matrix (e.g. a correlation matrix) into long form.

    The row order of the result follows the matrix: all columns of the first
    row, then all columns of the second row, and so on.
    """
    if not isinstance(matrix, pd.DataFrame):
        raise UnsupportedDataError("tidy_matrix expects a DataFrame")
    if list(map(str, matrix.index)) != list(map(str, matrix.columns)):
        raise UnsupportedDataError(
            "Matrix must be square with matching index and column labels",
            {"index": list(map(str, matrix.index)), "columns": list(map(str, matrix.columns))},
        )

    wide = matrix.copy()
    wide.index = [str(label) for label in wide.index]
    wide.columns = [str(label) for label in wide.columns]
    long = (
        wide.rename_axis(index=row_name)
        .reset_index()
        .melt(id_vars=row_name, var_name=column_name, value_name=value_name)
    )
    order = {label: position for position, label in enumerate(wide.index)}
    long["_order"] = long[row_name].map(order)
    long = long.sort_values(["_order"], kind="stable").drop(columns="_order")
    return long.reset_index(drop=True)


def column_extent(frame: pd.DataFrame, field: str) -> Tuple[float, float]:
    """Return the (min, max) of a numeric column for shared scale domains.

    Missing and infinite values are ignored. A constant column is padded by
    0.5 on each side so the domain is never empty.
    """
    if field not in frame.columns:
        raise FieldNotFoundError(f"Field '{field}' not found in data", {"field": field})
    series = frame[field]
    if not is_numeric_dtype(series) or is_bool_dtype(series):
        raise UnsupportedDataError(
            f"Field '{field}' must be numeric to compute an extent", {"field": field}
        )
    values = series.to_numpy(dtype=float, na_value=np.nan)
    values = values[np.isfinite(values)]
    if values.size == 0:
        raise UnsupportedDataError(f"Field '{field}' has no finite values", {"field": field})

    low, high = float(values.min()), float(values.max())
    if low == high:
        return low - 0.5, high + 0.5
    return low, high
