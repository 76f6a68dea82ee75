"""Field shorthand parsing and field type inference."""

import difflib
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd
from pandas.api.types import (
    CategoricalDtype,
    is_bool_dtype,
    is_datetime64_any_dtype,
    is_numeric_dtype,
)

from chart_express.errors import (
    FieldNotFoundError,
    InvalidShorthandError,
    MissingFieldTypeError,
)


class FieldType(Enum):
    """Enumeration of Vega-Lite field types."""

    QUANTITATIVE = "quantitative"
    ORDINAL = "ordinal"
    NOMINAL = "nominal"
    TEMPORAL = "temporal"

    @property
    def code(self) -> str:
        return self.value[0].upper()

    @classmethod
    def parse(cls, token: str) -> "FieldType":
        """Parse a one-letter code (`Q`) or full name (`quantitative`)."""
        normalized = token.strip().lower()
        for member in cls:
            if normalized in (member.value, member.code.lower()):
                return member
        raise InvalidShorthandError(
            f"Unknown field type '{token}'", {"valid": [m.code for m in cls]}
        )


AGGREGATES = frozenset(
    {
        "argmax",
        "argmin",
        "average",
        "ci0",
        "ci1",
        "count",
        "distinct",
        "max",
        "mean",
        "median",
        "min",
        "missing",
        "product",
        "q1",
        "q3",
        "stderr",
        "stdev",
        "stdevp",
        "sum",
        "valid",
        "values",
        "variance",
        "variancep",
    }
)

# Aggregates whose result is a value of the column itself.
TYPE_PRESERVING_AGGREGATES = frozenset({"argmax", "argmin", "max", "min"})

_SHORTHAND_PATTERN = re.compile(
    r"^(?:(?P<aggregate>[A-Za-z_][A-Za-z0-9_]*)\((?P<inner>[^()]*)\)|(?P<field>[^:()]+))"
    r"(?::(?P<type>[A-Za-z]+))?$"
)


@dataclass(frozen=True)
class FieldRef:
    """A parsed field reference such as `sum(net_generation):Q`."""

    field: Optional[str]
    aggregate: Optional[str] = None
    field_type: Optional[FieldType] = None

    @property
    def shorthand(self) -> str:
        if self.aggregate:
            text = f"{self.aggregate}({self.field or ''})"
        else:
            text = self.field or ""
        if self.field_type is not None:
            text = f"{text}:{self.field_type.code}"
        return text

    def with_type(self, field_type: FieldType) -> "FieldRef":
        return FieldRef(field=self.field, aggregate=self.aggregate, field_type=field_type)

    def to_channel_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for an altair channel class."""
        kwargs: Dict[str, Any] = {}
        if self.field is not None:
            kwargs["field"] = self.field
        if self.aggregate is not None:
            kwargs["aggregate"] = self.aggregate
        if self.field_type is not None:
            kwargs["type"] = self.field_type.value
        return kwargs


@dataclass
class FieldSpec:
    """Specification for a single field in the dataset."""

    name: str
    field_type: FieldType


def parse_shorthand(text: str) -> FieldRef:
    """Parse encoding shorthand into a FieldRef.

    Supported forms: `field`, `field:Q`, `mean(field)`, `mean(field):Q` and
    `count()`.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidShorthandError("Field shorthand must be a non-empty string")

    match = _SHORTHAND_PATTERN.match(text.strip())
    if match is None:
        raise InvalidShorthandError(f"Cannot parse field shorthand '{text}'", {"text": text})

    type_token = match.group("type")
    field_type = FieldType.parse(type_token) if type_token else None

    aggregate = match.group("aggregate")
    if aggregate is None:
        return FieldRef(field=match.group("field").strip(), field_type=field_type)

    aggregate = aggregate.lower()
    if aggregate not in AGGREGATES:
        raise InvalidShorthandError(
            f"Unknown aggregate '{aggregate}'", {"text": text, "valid": sorted(AGGREGATES)}
        )

    inner = match.group("inner").strip()
    if aggregate == "count":
        # count() counts records; a field argument is ignored by Vega-Lite.
        return FieldRef(
            field=inner or None,
            aggregate="count",
            field_type=field_type or FieldType.QUANTITATIVE,
        )
    if not inner:
        raise InvalidShorthandError(f"Aggregate '{aggregate}' needs a field", {"text": text})
    return FieldRef(field=inner, aggregate=aggregate, field_type=field_type)


def _is_temporal(value: Any) -> bool:
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return True
    if not isinstance(value, str):
        return False
    # YYYY-MM-DD with optional time, as typically produced by SQL and JSON exports
    iso_date_pattern = r"^\d{4}-\d{2}-\d{2}([ T]\d{2}:\d{2}(:\d{2}(\.\d+)?)?)?Z?$"
    return bool(re.match(iso_date_pattern, value))


def infer_field_type(series: pd.Series, sample_size: int = 100) -> FieldType:
    """Infer the Vega-Lite type of a column."""
    dtype = series.dtype
    if isinstance(dtype, CategoricalDtype):
        return FieldType.ORDINAL if dtype.ordered else FieldType.NOMINAL
    if is_bool_dtype(dtype):
        return FieldType.NOMINAL
    if is_numeric_dtype(dtype):
        return FieldType.QUANTITATIVE
    if is_datetime64_any_dtype(dtype):
        return FieldType.TEMPORAL

    sample = series.dropna().head(sample_size)
    if sample.empty:
        # Default to nominal if all values are missing
        return FieldType.NOMINAL
    if all(_is_temporal(value) for value in sample):
        return FieldType.TEMPORAL
    return FieldType.NOMINAL


def infer_fields(frame: pd.DataFrame, sample_size: int = 100) -> List[FieldSpec]:
    """Infer field names and types for every column of a DataFrame."""
    return [
        FieldSpec(name=str(name), field_type=infer_field_type(frame[name], sample_size))
        for name in frame.columns
    ]


def resolve_field(text: str, data: Any) -> FieldRef:
    """Parse shorthand and fill in the field type from the data.

    Aggregated fields are quantitative, except min/max/argmin/argmax over a
    DataFrame column, which keep the column's inferred type.

    Raises:
        FieldNotFoundError: If the field is not a column of a DataFrame.
        MissingFieldTypeError: If the type is omitted for URL data.
    """
    ref = parse_shorthand(text)
    if ref.field is None:
        return ref

    if isinstance(data, pd.DataFrame):
        columns = [str(c) for c in data.columns]
        if ref.field not in columns:
            suggestions = difflib.get_close_matches(ref.field, columns, n=3)
            message = f"Field '{ref.field}' not found in data"
            if suggestions:
                message += f" (did you mean {', '.join(repr(s) for s in suggestions)}?)"
            raise FieldNotFoundError(
                message, {"field": ref.field, "columns": columns, "suggestions": suggestions}
            )
        if ref.field_type is not None:
            return ref
        if ref.aggregate is not None and ref.aggregate not in TYPE_PRESERVING_AGGREGATES:
            return ref.with_type(FieldType.QUANTITATIVE)
        column = data[data.columns[columns.index(ref.field)]]
        return ref.with_type(infer_field_type(column))

    if ref.field_type is not None:
        return ref
    if ref.aggregate is not None:
        return ref.with_type(FieldType.QUANTITATIVE)
    raise MissingFieldTypeError(
        f"Field '{ref.field}' needs an explicit type (e.g. '{ref.field}:Q') "
        "because the data is not available locally",
        {"field": ref.field},
    )
