"""Example datasets used throughout the tutorial.

`scores` is defined literally here; `fuels` and `iris` come from the
locally bundled copies in `vega_datasets`, so no network access is needed.
Every loader returns a fresh DataFrame.
"""

from __future__ import annotations

from typing import Callable, Dict, List

import pandas as pd
from vega_datasets import data as vega_data

from chart_express.data import tidy_matrix
from chart_express.errors import UnknownDatasetError

IRIS_MEASURES = ["sepalLength", "sepalWidth", "petalLength", "petalWidth"]

# (category, group, score)
_SCORES = [
    ("A", "x", 28),
    ("A", "y", 55),
    ("A", "z", 43),
    ("B", "x", 91),
    ("B", "y", 81),
    ("B", "z", 53),
    ("C", "x", 19),
    ("C", "y", 87),
    ("C", "z", 52),
    ("D", "x", 48),
    ("D", "y", 24),
    ("D", "z", 49),
    ("E", "x", 87),
    ("E", "y", 66),
    ("E", "z", 17),
]


def scores() -> pd.DataFrame:
    """Categorical score table: one score per (category, group) cell."""
    return pd.DataFrame(_SCORES, columns=["category", "group", "score"])


def fuels() -> pd.DataFrame:
    """Iowa net electricity generation by fuel source and year."""
    return vega_data.iowa_electricity()


def iris() -> pd.DataFrame:
    """Fisher's iris measurements with species labels."""
    return vega_data.iris()


def iris_correlation() -> pd.DataFrame:
    """Precomputed Pearson correlation of the iris measures, in long form."""
    matrix = iris()[IRIS_MEASURES].corr()
    return tidy_matrix(matrix, row_name="row", column_name="column", value_name="correlation")


_LOADERS: Dict[str, Callable[[], pd.DataFrame]] = {
    "scores": scores,
    "fuels": fuels,
    "iris": iris,
    "iris_correlation": iris_correlation,
}


def names() -> List[str]:
    return list(_LOADERS)


def load(name: str) -> pd.DataFrame:
    """Load a dataset by name.

    Raises:
        UnknownDatasetError: If the name is not registered.
    """
    try:
        loader = _LOADERS[name]
    except KeyError:
        raise UnknownDatasetError(
            f"Unknown dataset '{name}'. Available: {names()}", {"name": name}
        ) from None
    return loader()
