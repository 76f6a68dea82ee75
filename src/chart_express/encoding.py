"""Translate shorthand channel arguments into altair encoding channels."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import altair as alt
from altair.utils.schemapi import SchemaBase

from chart_express.errors import InvalidOptionError
from chart_express.fields import resolve_field

logger = logging.getLogger(__name__)

CHANNELS: Dict[str, type] = {
    "x": alt.X,
    "y": alt.Y,
    "x2": alt.X2,
    "y2": alt.Y2,
    "color": alt.Color,
    "fill": alt.Fill,
    "stroke": alt.Stroke,
    "opacity": alt.Opacity,
    "size": alt.Size,
    "shape": alt.Shape,
    "text": alt.Text,
    "tooltip": alt.Tooltip,
    "detail": alt.Detail,
    "row": alt.Row,
    "column": alt.Column,
    "facet": alt.Facet,
    "theta": alt.Theta,
    "order": alt.Order,
}

# Secondary position channels inherit the type of their primary channel.
_UNTYPED_CHANNELS = frozenset({"x2", "y2"})


def _channel_class(channel: str) -> type:
    try:
        return CHANNELS[channel]
    except KeyError:
        raise InvalidOptionError(
            f"Unknown encoding channel '{channel}'",
            {"channel": channel, "valid": sorted(CHANNELS)},
        ) from None


def _apply_options(channel_obj: Any, options: Mapping[str, Any]) -> Any:
    updated = channel_obj.copy(deep=True)
    for key, value in options.items():
        setattr(updated, key, value)
    return updated


def _field_kwargs(channel: str, kwargs: Dict[str, Any], data: Any) -> Dict[str, Any]:
    """Fill field/aggregate/type from shorthand held in a `field` entry."""
    field = kwargs.get("field")
    if isinstance(field, str) and "type" not in kwargs and "aggregate" not in kwargs:
        ref = resolve_field(field, data)
        kwargs = {**kwargs, **ref.to_channel_kwargs()}
    if channel in _UNTYPED_CHANNELS:
        kwargs.pop("type", None)
    return kwargs


def encode_channel(
    channel: str,
    value: Any,
    data: Any,
    options: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Build one encoding channel.

    Args:
        channel: Channel name such as "x" or "color".
        value: Shorthand string, dict of channel properties, constant value, or
            an altair channel object.
        data: The normalized chart data, used for type inference.
        options: Extra channel properties (title, scale, axis, bin, ...).

    Returns:
        An altair channel object, or a value definition for constants.
    """
    cls = _channel_class(channel)
    options = dict(options or {})

    if isinstance(value, list):
        if options:
            raise InvalidOptionError(
                f"Options cannot be applied to a list of '{channel}' fields",
                {"channel": channel},
            )
        return [encode_channel(channel, item, data) for item in value]

    if isinstance(value, SchemaBase):
        return _apply_options(value, options) if options else value

    if isinstance(value, str):
        ref = resolve_field(value, data)
        kwargs = _field_kwargs(channel, {**ref.to_channel_kwargs(), **options}, data)
        logger.debug("Encoding %s as %s", channel, ref.shorthand)
        return cls(**kwargs)

    if isinstance(value, Mapping):
        kwargs = {**value, **options}
        if "value" in kwargs and "field" not in kwargs and "aggregate" not in kwargs:
            constant = kwargs.pop("value")
            return alt.value(constant, **kwargs)
        if "field" not in kwargs and "aggregate" not in kwargs:
            raise InvalidOptionError(
                f"Channel '{channel}' mapping needs a 'field', 'aggregate' or 'value'",
                {"channel": channel},
            )
        return cls(**_field_kwargs(channel, kwargs, data))

    # Bare numbers/booleans are constant values.
    return alt.value(value, **options)


def build_encoding(
    data: Any,
    channels: Mapping[str, Any],
    opts: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build all non-None channels, merging per-channel options from `opts`."""
    opts = dict(opts or {})
    encoded = {name: value for name, value in channels.items() if value is not None}

    orphaned = sorted(set(opts) - set(encoded))
    if orphaned:
        raise InvalidOptionError(
            f"Options given for channels that are not encoded: {', '.join(orphaned)}",
            {"channels": orphaned},
        )

    return {
        name: encode_channel(name, value, data, opts.get(name))
        for name, value in encoded.items()
    }
