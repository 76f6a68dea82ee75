"""Configuration schema for chart defaults."""

from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

import altair as alt
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHART_EXPRESS_"


class ConfigPreset(str, Enum):
    """Predefined sizing presets."""

    DEFAULT = "default"
    COMPACT = "compact"
    PRESENTATION = "presentation"


class ExpressConfig(BaseModel):
    """Defaults applied by the shorthand API and the specialized helpers."""

    width: int = Field(default=400, ge=50, description="Default chart width in pixels")
    height: int = Field(default=300, ge=50, description="Default chart height in pixels")
    marginal_size: int = Field(
        default=60,
        ge=10,
        description="Thickness of jointplot marginal histograms in pixels",
    )
    spacing: int = Field(
        default=5,
        ge=0,
        description="Spacing between concatenated jointplot panels",
    )
    maxbins: int = Field(
        default=20, ge=2, le=200, description="Default maximum bins for binned charts"
    )
    color_scheme: str = Field(
        default="viridis", description="Vega color scheme for continuous color scales"
    )
    histogram_opacity: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Bar opacity for overlapping (colored) histograms",
    )
    annotation_format: str = Field(
        default=".2f", description="d3 number format for heatmap annotations"
    )
    max_rows: Optional[int] = Field(
        default=5000,
        ge=1,
        description="Row limit for inline data (None disables the limit)",
    )

    @model_validator(mode="after")
    def validate_marginals(self) -> "ExpressConfig":
        """Ensure marginal panels are thinner than the central chart."""
        if self.marginal_size >= min(self.width, self.height):
            raise ValueError("marginal_size must be smaller than both width and height")
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ExpressConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Parsed ExpressConfig instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the YAML is invalid.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.model_validate(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "ExpressConfig":
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the JSON is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "ExpressConfig":
        """Load configuration from a YAML or JSON file based on its suffix."""
        path = Path(path)
        if path.suffix == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "ExpressConfig":
        """Build configuration from CHART_EXPRESS_* environment variables.

        A `.env` file is loaded first: `dotenv_path`, or the nearest one at or
        above the working directory. Variables already set in the process
        environment win over the file.
        """
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)

        data: dict[str, object] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            if name == "max_rows" and raw.strip().lower() in ("", "none"):
                data[name] = None
            else:
                data[name] = raw.strip()

        return cls.model_validate(data)

    @classmethod
    def preset(cls, name: str | ConfigPreset) -> "ExpressConfig":
        """Get a built-in configuration preset.

        Raises:
            ValueError: If the preset name is unknown.
        """
        if isinstance(name, str):
            try:
                name = ConfigPreset(name.lower())
            except ValueError:
                valid = [p.value for p in ConfigPreset]
                raise ValueError(f"Unknown preset '{name}'. Valid presets: {valid}")

        presets = {
            ConfigPreset.DEFAULT: cls(),
            ConfigPreset.COMPACT: cls(width=250, height=180, marginal_size=40, maxbins=15),
            ConfigPreset.PRESENTATION: cls(
                width=640, height=480, marginal_size=90, spacing=8, maxbins=30
            ),
        }

        return presets[name]

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)


_active_config = ExpressConfig()


def get_config() -> ExpressConfig:
    """Return the configuration used when call sites pass no explicit config."""
    return _active_config


def set_config(config: ExpressConfig) -> ExpressConfig:
    """Replace the active configuration and return the previous one.

    The inline-data row limit is applied to altair's data transformer.
    """
    global _active_config
    previous = _active_config
    _active_config = config
    alt.data_transformers.enable("default", max_rows=config.max_rows)
    logger.debug("Active chart config set: %s", config.model_dump())
    return previous


@contextmanager
def use_config(config: ExpressConfig) -> Iterator[ExpressConfig]:
    """Temporarily activate a configuration."""
    previous = set_config(config)
    try:
        yield config
    finally:
        set_config(previous)


def resolve_config(config: Optional[ExpressConfig] = None) -> ExpressConfig:
    return config if config is not None else get_config()
