"""Shorthand chart construction on top of altair (Vega-Lite).

This package turns terse field/mark descriptions into full altair chart
specifications, and provides specialized plot helpers that expand into
multi-view specs.

Design Notes:
-------------
Shorthand API:
  - `chart(data, mark, **channels)` plus named wrappers (scatter, line, bar,
    hist, ...). Channel values are field shorthand ("field", "field:Q",
    "mean(field)", "count()"); missing types are inferred from DataFrames.
  - Per-channel options go in `opts={"x": {...}}`, mark properties in
    `mark_opts`.

Specialized helpers:
  - heatmap (optionally annotated, two layers), density_heatmap (2D bins),
    jointplot (vconcat of a top marginal and hconcat(center, right marginal)).

Limitations:
  - Rendering, layout and schema validation are delegated to altair.
  - Type inference needs in-memory data; URL data requires explicit types.
"""

from chart_express.charts import (
    area,
    bar,
    boxplot,
    chart,
    hist,
    line,
    point,
    rule,
    scatter,
    text,
    tick,
)
from chart_express.config import ExpressConfig, get_config, set_config, use_config
from chart_express.data import tidy_matrix, to_table
from chart_express.errors import ChartExpressError, ErrorCode
from chart_express.render import save_chart, to_spec
from chart_express.specialized import density_heatmap, heatmap, jointplot

__version__ = "0.1.0"

__all__ = [
    "ChartExpressError",
    "ErrorCode",
    "ExpressConfig",
    "area",
    "bar",
    "boxplot",
    "chart",
    "density_heatmap",
    "get_config",
    "heatmap",
    "hist",
    "jointplot",
    "line",
    "point",
    "rule",
    "save_chart",
    "scatter",
    "set_config",
    "text",
    "tick",
    "tidy_matrix",
    "to_spec",
    "to_table",
    "use_config",
]
