import unittest

import pandas as pd
import pytest

from chart_express.errors import (
    FieldNotFoundError,
    InvalidShorthandError,
    MissingFieldTypeError,
)
from chart_express.fields import (
    FieldRef,
    FieldType,
    infer_field_type,
    infer_fields,
    parse_shorthand,
    resolve_field,
)


class TestParseShorthand(unittest.TestCase):
    """Unit tests for field shorthand parsing."""

    def test_plain_field(self):
        ref = parse_shorthand("sepalLength")
        self.assertEqual(ref, FieldRef(field="sepalLength"))

    def test_typed_field(self):
        ref = parse_shorthand("year:T")
        self.assertEqual(ref.field, "year")
        self.assertEqual(ref.field_type, FieldType.TEMPORAL)

    def test_full_type_name(self):
        ref = parse_shorthand("category:nominal")
        self.assertEqual(ref.field_type, FieldType.NOMINAL)

    def test_aggregate(self):
        ref = parse_shorthand("mean(score):Q")
        self.assertEqual(ref.aggregate, "mean")
        self.assertEqual(ref.field, "score")
        self.assertEqual(ref.field_type, FieldType.QUANTITATIVE)

    def test_count_has_no_field(self):
        ref = parse_shorthand("count()")
        self.assertIsNone(ref.field)
        self.assertEqual(ref.aggregate, "count")
        self.assertEqual(ref.field_type, FieldType.QUANTITATIVE)
        self.assertEqual(ref.to_channel_kwargs(), {"aggregate": "count", "type": "quantitative"})

    def test_field_with_spaces(self):
        ref = parse_shorthand("net generation")
        self.assertEqual(ref.field, "net generation")

    def test_shorthand_round_trip_text(self):
        self.assertEqual(parse_shorthand("sum(x):Q").shorthand, "sum(x):Q")
        self.assertEqual(parse_shorthand("count()").shorthand, "count():Q")

    def test_invalid_inputs(self):
        for text in ["", "   ", "x:Z", "nosuchagg(x)", "mean()", "a(b", None]:
            with self.assertRaises(InvalidShorthandError, msg=repr(text)):
                parse_shorthand(text)


class TestInference(unittest.TestCase):
    """Unit tests for column type inference."""

    def test_numeric(self):
        self.assertEqual(infer_field_type(pd.Series([1, 2.5, 3])), FieldType.QUANTITATIVE)

    def test_bool_is_nominal(self):
        self.assertEqual(infer_field_type(pd.Series([True, False])), FieldType.NOMINAL)

    def test_datetime_dtype(self):
        series = pd.Series(pd.to_datetime(["2024-01-01", "2024-02-01"]))
        self.assertEqual(infer_field_type(series), FieldType.TEMPORAL)

    def test_iso_strings(self):
        series = pd.Series(["2023-01-01", "2023-01-02T10:00:00"])
        self.assertEqual(infer_field_type(series), FieldType.TEMPORAL)

    def test_ordered_categorical(self):
        series = pd.Series(pd.Categorical(["lo", "hi"], categories=["lo", "hi"], ordered=True))
        self.assertEqual(infer_field_type(series), FieldType.ORDINAL)

    def test_mixed_values_are_nominal(self):
        # Mixed numeric and strings in one column -> nominal
        self.assertEqual(infer_field_type(pd.Series([10, "string"])), FieldType.NOMINAL)

    def test_numeric_strings_are_nominal(self):
        self.assertEqual(infer_field_type(pd.Series(["10.5", "3"])), FieldType.NOMINAL)

    def test_all_missing_is_nominal(self):
        self.assertEqual(infer_field_type(pd.Series([None, None])), FieldType.NOMINAL)

    def test_infer_fields(self):
        frame = pd.DataFrame({"a": [1, 2], "b": ["x", "y"]})
        fields = infer_fields(frame)
        self.assertEqual([f.name for f in fields], ["a", "b"])
        self.assertEqual(
            [f.field_type for f in fields], [FieldType.QUANTITATIVE, FieldType.NOMINAL]
        )


class TestResolveField:
    def test_fills_type_from_frame(self, points):
        assert resolve_field("a", points).field_type == FieldType.QUANTITATIVE
        assert resolve_field("label", points).field_type == FieldType.NOMINAL
        assert resolve_field("when", points).field_type == FieldType.TEMPORAL

    def test_explicit_type_wins(self, points):
        assert resolve_field("b:O", points).field_type == FieldType.ORDINAL

    def test_aggregate_of_nominal_is_quantitative(self, points):
        ref = resolve_field("distinct(label)", points)
        assert ref.field_type == FieldType.QUANTITATIVE

    def test_min_max_keep_column_type(self, points):
        assert resolve_field("max(when)", points).field_type == FieldType.TEMPORAL
        assert resolve_field("argmin(label)", points).field_type == FieldType.NOMINAL
        assert resolve_field("min(a)", points).field_type == FieldType.QUANTITATIVE
        assert resolve_field("max(when):O", points).field_type == FieldType.ORDINAL

    def test_missing_field_suggests_close_matches(self, iris):
        with pytest.raises(FieldNotFoundError) as exc:
            resolve_field("sepal_length", iris)
        assert "sepalLength" in exc.value.details["suggestions"]
        assert "did you mean" in str(exc.value)

    def test_url_data_needs_explicit_type(self):
        with pytest.raises(MissingFieldTypeError):
            resolve_field("price", None)

    def test_url_data_with_type(self):
        ref = resolve_field("price:Q", None)
        assert ref.field_type == FieldType.QUANTITATIVE

    def test_count_needs_no_data(self):
        assert resolve_field("count()", None).aggregate == "count"
