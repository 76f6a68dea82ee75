"""Shorthand chart constructors.

Each function takes the data plus field shorthand per channel and returns a
plain `altair.Chart`, so the result can be refined further with the full
altair API (`.properties`, `.interactive`, layering with `+`, ...).

    >>> scatter(iris, x="sepalLength", y="sepalWidth", color="species")
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import altair as alt

from chart_express.config import ExpressConfig, resolve_config
from chart_express.data import to_table
from chart_express.encoding import build_encoding
from chart_express.errors import InvalidOptionError

logger = logging.getLogger(__name__)

MARKS = frozenset(
    {
        "arc",
        "area",
        "bar",
        "boxplot",
        "circle",
        "line",
        "point",
        "rect",
        "rule",
        "square",
        "text",
        "tick",
        "trail",
    }
)

ChannelOptions = Optional[Mapping[str, Mapping[str, Any]]]


def chart(
    data: Any,
    mark: str,
    *,
    opts: ChannelOptions = None,
    mark_opts: Optional[Mapping[str, Any]] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    title: Optional[str] = None,
    config: Optional[ExpressConfig] = None,
    **channels: Any,
) -> alt.Chart:
    """Build a single-view chart from a mark name and channel shorthand.

    Args:
        data: Anything `chart_express.data.to_table` accepts.
        mark: Vega-Lite mark type ("point", "line", "bar", ...).
        opts: Per-channel options, e.g. `{"x": {"title": "Length"}}`.
        mark_opts: Mark properties, e.g. `{"opacity": 0.5}`.
        width: Chart width; defaults to the active config.
        height: Chart height; defaults to the active config.
        title: Optional chart title.
        config: Explicit config overriding the active one.
        **channels: Encoding channels (x, y, color, size, tooltip, ...).

    Returns:
        The encoded `altair.Chart`.
    """
    if mark not in MARKS:
        raise InvalidOptionError(
            f"Unknown mark '{mark}'", {"mark": mark, "valid": sorted(MARKS)}
        )

    cfg = resolve_config(config)
    table = to_table(data)
    encoding = build_encoding(table, channels, opts)

    marked = getattr(alt.Chart(table), f"mark_{mark}")(**dict(mark_opts or {}))
    properties: dict[str, Any] = {
        "width": width if width is not None else cfg.width,
        "height": height if height is not None else cfg.height,
    }
    if title is not None:
        properties["title"] = title

    logger.debug("Built %s chart with channels %s", mark, sorted(encoding))
    return marked.encode(**encoding).properties(**properties)


def scatter(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    """Scatter plot (point mark)."""
    return chart(data, "point", x=x, y=y, color=color, **kwargs)


def point(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "point", x=x, y=y, color=color, **kwargs)


def line(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "line", x=x, y=y, color=color, **kwargs)


def area(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "area", x=x, y=y, color=color, **kwargs)


def bar(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "bar", x=x, y=y, color=color, **kwargs)


def tick(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "tick", x=x, y=y, color=color, **kwargs)


def rule(data: Any, x: Any = None, y: Any = None, color: Any = None, **kwargs: Any) -> alt.Chart:
    return chart(data, "rule", x=x, y=y, color=color, **kwargs)


def text(
    data: Any, x: Any = None, y: Any = None, text: Any = None, **kwargs: Any
) -> alt.Chart:
    return chart(data, "text", x=x, y=y, text=text, **kwargs)


def boxplot(
    data: Any,
    x: Any = None,
    y: Any = None,
    color: Any = None,
    extent: Any = 1.5,
    **kwargs: Any,
) -> alt.Chart:
    """Box plot; `extent` is the whisker range in IQRs or "min-max"."""
    mark_opts = {"extent": extent, **dict(kwargs.pop("mark_opts", None) or {})}
    return chart(data, "boxplot", x=x, y=y, color=color, mark_opts=mark_opts, **kwargs)


def hist(
    data: Any,
    x: Any,
    color: Any = None,
    *,
    bins: Optional[int] = None,
    opts: ChannelOptions = None,
    mark_opts: Optional[Mapping[str, Any]] = None,
    config: Optional[ExpressConfig] = None,
    **kwargs: Any,
) -> alt.Chart:
    """Histogram of `x` with record counts on `y`.

    Colored histograms are drawn unstacked and translucent so the groups
    overlap rather than pile up.
    """
    cfg = resolve_config(config)
    channel_opts = {name: dict(values) for name, values in dict(opts or {}).items()}
    channel_opts["x"] = {"bin": alt.Bin(maxbins=bins or cfg.maxbins), **channel_opts.get("x", {})}

    merged_mark_opts = dict(mark_opts or {})
    if color is not None:
        channel_opts["y"] = {"stack": None, **channel_opts.get("y", {})}
        merged_mark_opts = {"opacity": cfg.histogram_opacity, "binSpacing": 0, **merged_mark_opts}

    return chart(
        data,
        "bar",
        x=x,
        y=kwargs.pop("y", "count()"),
        color=color,
        opts=channel_opts,
        mark_opts=merged_mark_opts,
        config=cfg,
        **kwargs,
    )
