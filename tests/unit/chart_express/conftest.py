"""Shared fixtures for chart_express unit tests."""

import pandas as pd
import pytest

from chart_express import config as config_module
from chart_express import datasets
from chart_express.config import ExpressConfig


@pytest.fixture(autouse=True)
def _reset_active_config():
    """Restore the active config after each test."""
    previous = config_module.get_config()
    yield
    config_module.set_config(previous)


@pytest.fixture
def small_config() -> ExpressConfig:
    return ExpressConfig(width=200, height=150, marginal_size=40, spacing=4, maxbins=10)


@pytest.fixture
def iris() -> pd.DataFrame:
    return datasets.iris()


@pytest.fixture
def scores() -> pd.DataFrame:
    return datasets.scores()


@pytest.fixture
def points() -> pd.DataFrame:
    """Small mixed-type frame."""
    return pd.DataFrame(
        {
            "a": [1.0, 2.5, 3.0, 4.5],
            "b": [10, 20, 15, 30],
            "label": ["x", "y", "x", "z"],
            "when": pd.to_datetime(["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04"]),
        }
    )
