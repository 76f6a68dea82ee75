"""Specialized plot helpers.

Each helper expands a short description into a multi-part chart:

  - heatmap: rect layer, optionally layered with value annotations.
  - density_heatmap: rect mark over a 2D binning with aggregated color.
  - jointplot: central chart with marginal histograms on top and right,
    assembled as vconcat(top, hconcat(center, right)).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

import altair as alt
import pandas as pd

from chart_express.charts import ChannelOptions, chart
from chart_express.config import ExpressConfig, resolve_config
from chart_express.data import column_extent, to_table
from chart_express.errors import InvalidOptionError
from chart_express.fields import FieldRef, FieldType, resolve_field

logger = logging.getLogger(__name__)

JOINTPLOT_KINDS = ("scatter", "density_heatmap")

Bins = Union[int, Tuple[int, int], None]


def _channel_opts(opts: ChannelOptions) -> Dict[str, Dict[str, Any]]:
    return {name: dict(values) for name, values in dict(opts or {}).items()}


def _split_bins(bins: Bins, default: int) -> Tuple[int, int]:
    if bins is None:
        return default, default
    if isinstance(bins, int):
        return bins, bins
    if isinstance(bins, tuple) and len(bins) == 2:
        return int(bins[0]), int(bins[1])
    raise InvalidOptionError("bins must be an int or an (x, y) pair", {"bins": repr(bins)})


def _annotation_midpoint(table: Any, ref: FieldRef) -> Optional[float]:
    if not isinstance(table, pd.DataFrame) or ref.field_type != FieldType.QUANTITATIVE:
        return None
    low, high = column_extent(table, ref.field)
    return (low + high) / 2


def heatmap(
    data: Any,
    x: Any,
    y: Any,
    color: str,
    *,
    annotate: bool = False,
    fmt: Optional[str] = None,
    scheme: Optional[str] = None,
    opts: ChannelOptions = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    title: Optional[str] = None,
    config: Optional[ExpressConfig] = None,
) -> Union[alt.Chart, alt.LayerChart]:
    """Heatmap of `color` over the `x`/`y` grid.

    With `annotate=True` the cell values are printed on top of the rects; the
    label color switches from white to black at the midpoint of the value
    range so labels stay readable on dark and light cells.
    """
    cfg = resolve_config(config)
    table = to_table(data)
    channel_opts = _channel_opts(opts)
    channel_opts["color"] = {
        "scale": alt.Scale(scheme=scheme or cfg.color_scheme),
        **channel_opts.get("color", {}),
    }

    rects = chart(
        table,
        "rect",
        x=x,
        y=y,
        color=color,
        opts=channel_opts,
        width=width,
        height=height,
        config=cfg,
    )
    if not annotate:
        return rects.properties(title=title) if title is not None else rects

    ref = resolve_field(color, table)
    if ref.aggregate is not None or ref.field is None:
        raise InvalidOptionError(
            "Annotated heatmaps need a plain color field, not an aggregate",
            {"color": color},
        )

    midpoint = _annotation_midpoint(table, ref)
    if midpoint is None:
        label_color: Any = {"value": "black"}
    else:
        label_color = alt.condition(
            f"datum[{json.dumps(ref.field)}] < {midpoint!r}",
            alt.value("white"),
            alt.value("black"),
        )

    position_opts = {name: channel_opts[name] for name in ("x", "y") if name in channel_opts}
    labels = chart(
        table,
        "text",
        x=x,
        y=y,
        text={**ref.to_channel_kwargs(), "format": fmt or cfg.annotation_format},
        color=label_color,
        opts=position_opts,
        mark_opts={"baseline": "middle"},
        width=width,
        height=height,
        config=cfg,
    )

    layered = alt.layer(rects, labels)
    logger.debug("Built annotated heatmap of %s (midpoint=%s)", ref.field, midpoint)
    return layered.properties(title=title) if title is not None else layered


def density_heatmap(
    data: Any,
    x: Any,
    y: Any,
    *,
    bins: Bins = None,
    color: Any = "count()",
    scheme: Optional[str] = None,
    opts: ChannelOptions = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    title: Optional[str] = None,
    config: Optional[ExpressConfig] = None,
) -> alt.Chart:
    """2D histogram: both axes binned, cells colored by `color` (count by default)."""
    cfg = resolve_config(config)
    x_bins, y_bins = _split_bins(bins, cfg.maxbins)
    channel_opts = _channel_opts(opts)
    channel_opts["x"] = {"bin": alt.Bin(maxbins=x_bins), **channel_opts.get("x", {})}
    channel_opts["y"] = {"bin": alt.Bin(maxbins=y_bins), **channel_opts.get("y", {})}
    channel_opts["color"] = {
        "scale": alt.Scale(scheme=scheme or cfg.color_scheme),
        **channel_opts.get("color", {}),
    }

    return chart(
        data,
        "rect",
        x=x,
        y=y,
        color=color,
        opts=channel_opts,
        width=width,
        height=height,
        title=title,
        config=cfg,
    )


@dataclass(frozen=True)
class JointplotLayout:
    """Panel sizes of a jointplot, in pixels."""

    width: int
    height: int
    marginal_size: int
    spacing: int

    @property
    def top(self) -> Tuple[int, int]:
        return self.width, self.marginal_size

    @property
    def right(self) -> Tuple[int, int]:
        return self.marginal_size, self.height

    @property
    def total_width(self) -> int:
        return self.width + self.spacing + self.marginal_size

    @property
    def total_height(self) -> int:
        return self.marginal_size + self.spacing + self.height


def jointplot_layout(
    width: Optional[int] = None,
    height: Optional[int] = None,
    marginal_size: Optional[int] = None,
    spacing: Optional[int] = None,
    config: Optional[ExpressConfig] = None,
) -> JointplotLayout:
    """Resolve jointplot panel sizes against the config defaults."""
    cfg = resolve_config(config)
    layout = JointplotLayout(
        width=width if width is not None else cfg.width,
        height=height if height is not None else cfg.height,
        marginal_size=marginal_size if marginal_size is not None else cfg.marginal_size,
        spacing=spacing if spacing is not None else cfg.spacing,
    )
    if layout.marginal_size <= 0 or layout.spacing < 0:
        raise InvalidOptionError(
            "marginal_size must be positive and spacing non-negative",
            {"marginal_size": layout.marginal_size, "spacing": layout.spacing},
        )
    if layout.marginal_size >= min(layout.width, layout.height):
        raise InvalidOptionError(
            "marginal_size must be smaller than the central chart",
            {"marginal_size": layout.marginal_size, "width": layout.width, "height": layout.height},
        )
    return layout


def _marginal_field(text: Any, table: Any) -> FieldRef:
    if not isinstance(text, str):
        raise InvalidOptionError("jointplot fields must be shorthand strings", {"field": repr(text)})
    ref = resolve_field(text, table)
    if ref.aggregate is not None or ref.field_type != FieldType.QUANTITATIVE:
        raise InvalidOptionError(
            f"jointplot needs quantitative, non-aggregated fields; got '{text}'",
            {"field": text},
        )
    return ref


def jointplot(
    data: Any,
    x: str,
    y: str,
    *,
    color: Any = None,
    kind: str = "scatter",
    bins: Bins = None,
    marginal_size: Optional[int] = None,
    spacing: Optional[int] = None,
    opts: ChannelOptions = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    title: Optional[str] = None,
    config: Optional[ExpressConfig] = None,
) -> alt.VConcatChart:
    """Central chart of `x` vs `y` with marginal histograms.

    Args:
        kind: "scatter" or "density_heatmap" for the central panel.
        bins: Max bins for the marginals (and the central 2D bins).
        marginal_size: Thickness of the marginal histograms.
        spacing: Gap between the panels.
        opts: Per-channel options for the central chart.

    Returns:
        `vconcat(top_hist, hconcat(center, right_hist))`.
    """
    if kind not in JOINTPLOT_KINDS:
        raise InvalidOptionError(
            f"Unknown jointplot kind '{kind}'", {"kind": kind, "valid": list(JOINTPLOT_KINDS)}
        )
    if kind == "density_heatmap" and color is not None:
        raise InvalidOptionError("density_heatmap jointplots are colored by count; drop color")

    cfg = resolve_config(config)
    layout = jointplot_layout(width, height, marginal_size, spacing, cfg)
    table = to_table(data)
    x_ref = _marginal_field(x, table)
    y_ref = _marginal_field(y, table)
    x_bins, y_bins = _split_bins(bins, cfg.maxbins)

    # Shared extents keep the marginal bins aligned with the central axes.
    x_bin = alt.Bin(maxbins=x_bins)
    y_bin = alt.Bin(maxbins=y_bins)
    x_scale: Dict[str, Any] = {"scale": alt.Scale(zero=False)}
    y_scale: Dict[str, Any] = {"scale": alt.Scale(zero=False)}
    if isinstance(table, pd.DataFrame):
        x_extent = list(column_extent(table, x_ref.field))
        y_extent = list(column_extent(table, y_ref.field))
        x_bin = alt.Bin(maxbins=x_bins, extent=x_extent)
        y_bin = alt.Bin(maxbins=y_bins, extent=y_extent)
        x_scale = {"scale": alt.Scale(domain=x_extent)}
        y_scale = {"scale": alt.Scale(domain=y_extent)}

    center_opts = _channel_opts(opts)
    if kind == "scatter":
        center_opts["x"] = {**x_scale, **center_opts.get("x", {})}
        center_opts["y"] = {**y_scale, **center_opts.get("y", {})}
        center = chart(
            table,
            "point",
            x=x_ref.shorthand,
            y=y_ref.shorthand,
            color=color,
            opts=center_opts,
            width=layout.width,
            height=layout.height,
            config=cfg,
        )
    else:
        center_opts["x"] = {"bin": x_bin, **center_opts.get("x", {})}
        center_opts["y"] = {"bin": y_bin, **center_opts.get("y", {})}
        center_opts["color"] = {
            "scale": alt.Scale(scheme=cfg.color_scheme),
            **center_opts.get("color", {}),
        }
        center = chart(
            table,
            "rect",
            x=x_ref.shorthand,
            y=y_ref.shorthand,
            color="count()",
            opts=center_opts,
            width=layout.width,
            height=layout.height,
            config=cfg,
        )

    hidden_axis = alt.Axis(labels=False, ticks=False, domain=False, title=None)
    count_opts: Dict[str, Any] = {"title": None}
    marginal_mark: Dict[str, Any] = {}
    if color is not None:
        count_opts["stack"] = None
        marginal_mark = {"opacity": cfg.histogram_opacity, "binSpacing": 0}

    top = chart(
        table,
        "bar",
        x=x_ref.shorthand,
        y="count()",
        color=color,
        opts={"x": {"bin": x_bin, "axis": hidden_axis}, "y": count_opts},
        mark_opts=marginal_mark,
        width=layout.top[0],
        height=layout.top[1],
        config=cfg,
    )
    right = chart(
        table,
        "bar",
        x="count()",
        y=y_ref.shorthand,
        color=color,
        opts={"x": count_opts, "y": {"bin": y_bin, "axis": hidden_axis}},
        mark_opts=marginal_mark,
        width=layout.right[0],
        height=layout.right[1],
        config=cfg,
    )

    joint = alt.vconcat(
        top,
        alt.hconcat(center, right, spacing=layout.spacing),
        spacing=layout.spacing,
    )
    logger.debug(
        "Built %s jointplot of %s vs %s (%dx%d)",
        kind,
        x_ref.field,
        y_ref.field,
        layout.total_width,
        layout.total_height,
    )
    return joint.properties(title=title) if title is not None else joint

