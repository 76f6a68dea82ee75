"""Validation and export of built charts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from altair.utils.data import MaxRowsError
from altair.utils.schemapi import SchemaValidationError

from chart_express.errors import ChartValidationError, UnsupportedFormatError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = (".json", ".html")

_COMPOSITIONS = ("layer", "vconcat", "hconcat", "concat")


def to_spec(chart: Any) -> Dict[str, Any]:
    """Return the Vega-Lite dict for a chart, validated against the schema.

    Raises:
        ChartValidationError: If the chart does not validate or has too many
            inline rows.
    """
    try:
        return chart.to_dict()
    except SchemaValidationError as e:
        raise ChartValidationError(f"Chart failed schema validation: {e}") from e
    except MaxRowsError as e:
        raise ChartValidationError(
            f"Chart data exceeds the inline row limit: {e}",
            {"hint": "raise max_rows in the config or pass a URL"},
        ) from e


def save_chart(chart: Any, path: Union[str, Path]) -> Path:
    """Write a chart as a Vega-Lite JSON spec or a standalone HTML page."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in EXPORT_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported export format '{suffix or '<none>'}'",
            {"path": str(path), "supported": list(EXPORT_FORMATS)},
        )

    spec = to_spec(chart)
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".json":
        with open(path, "w") as f:
            json.dump(spec, f, indent=2)
    else:
        chart.save(str(path))

    logger.info("Wrote %s", path)
    return path


def _collect_marks(spec: Any, marks: List[str]) -> int:
    """Append the marks of every leaf view and return the number of leaves."""
    if not isinstance(spec, dict):
        raise UnsupportedFormatError(
            f"Expected a Vega-Lite view object, got {type(spec).__name__}",
            {"type": type(spec).__name__},
        )
    for key in _COMPOSITIONS:
        if key in spec:
            if not isinstance(spec[key], list):
                raise UnsupportedFormatError(
                    f"'{key}' must be a list of views", {"key": key}
                )
            return sum(_collect_marks(child, marks) for child in spec[key])
    if "spec" in spec:
        return _collect_marks(spec["spec"], marks)

    mark = spec.get("mark")
    if isinstance(mark, dict):
        mark = mark.get("type")
    if mark is not None:
        marks.append(mark)
    return 1


def spec_summary(spec: Any) -> Dict[str, Any]:
    """Describe a Vega-Lite spec: composition kind, leaf marks and view count.

    Raises:
        UnsupportedFormatError: If `spec` is not a Vega-Lite object.
    """
    marks: List[str] = []
    views = _collect_marks(spec, marks)

    kind = next((key for key in _COMPOSITIONS if key in spec), None)
    if kind is None:
        kind = "facet" if "facet" in spec or "spec" in spec else "single"
    return {"kind": kind, "marks": marks, "views": views}
