import altair as alt
import pytest

from chart_express.encoding import CHANNELS, build_encoding, encode_channel
from chart_express.errors import FieldNotFoundError, InvalidOptionError


class TestEncodeChannel:
    def test_shorthand_string(self, points):
        channel = encode_channel("x", "a", points)
        assert isinstance(channel, alt.X)
        assert channel.to_dict() == {"field": "a", "type": "quantitative"}

    def test_options_are_merged(self, points):
        channel = encode_channel("y", "mean(b)", points, {"title": "Mean b"})
        assert channel.to_dict() == {
            "field": "b",
            "aggregate": "mean",
            "type": "quantitative",
            "title": "Mean b",
        }

    def test_mapping(self, points):
        channel = encode_channel("color", {"field": "label", "legend": None}, points)
        assert channel.to_dict() == {"field": "label", "type": "nominal", "legend": None}

    def test_mapping_field_shorthand(self, points):
        channel = encode_channel("x", {"field": "b:O"}, points)
        assert channel.to_dict() == {"field": "b", "type": "ordinal"}

    def test_mapping_with_explicit_type_is_kept(self, points):
        channel = encode_channel("x", {"field": "b", "type": "nominal"}, points)
        assert channel.to_dict() == {"field": "b", "type": "nominal"}

    def test_value_mapping(self, points):
        assert encode_channel("color", {"value": "red"}, points) == {"value": "red"}

    def test_constant(self, points):
        assert encode_channel("opacity", 0.4, points) == {"value": 0.4}

    def test_secondary_channel_has_no_type(self, points):
        assert encode_channel("x2", "a", points).to_dict() == {"field": "a"}

    def test_channel_object_passthrough(self, points):
        original = alt.X("a:Q")
        assert encode_channel("x", original, points) is original

    def test_channel_object_with_options_is_copied(self, points):
        original = alt.X("a:Q")
        updated = encode_channel("x", original, points, {"title": "A"})
        assert updated is not original
        assert updated.to_dict()["title"] == "A"
        assert "title" not in original.to_dict()

    def test_tooltip_list(self, points):
        tooltips = encode_channel("tooltip", ["a", "label"], points)
        assert [t.to_dict() for t in tooltips] == [
            {"field": "a", "type": "quantitative"},
            {"field": "label", "type": "nominal"},
        ]

    def test_list_with_options_rejected(self, points):
        with pytest.raises(InvalidOptionError):
            encode_channel("tooltip", ["a"], points, {"title": "x"})

    def test_unknown_channel(self, points):
        with pytest.raises(InvalidOptionError, match="Unknown encoding channel"):
            encode_channel("z", "a", points)

    def test_mapping_without_field(self, points):
        with pytest.raises(InvalidOptionError):
            encode_channel("x", {"title": "untitled"}, points)

    def test_missing_field(self, points):
        with pytest.raises(FieldNotFoundError):
            encode_channel("x", "missing", points)


class TestBuildEncoding:
    def test_skips_none(self, points):
        encoding = build_encoding(points, {"x": "a", "y": "b", "color": None})
        assert sorted(encoding) == ["x", "y"]

    def test_per_channel_options(self, points):
        encoding = build_encoding(
            points, {"x": "a", "y": "b"}, {"x": {"axis": {"format": "%"}}}
        )
        assert encoding["x"].to_dict()["axis"] == {"format": "%"}
        assert "axis" not in encoding["y"].to_dict()

    def test_options_for_missing_channel(self, points):
        with pytest.raises(InvalidOptionError, match="color"):
            build_encoding(points, {"x": "a"}, {"color": {"legend": None}})

    def test_channel_registry(self):
        assert CHANNELS["x"] is alt.X
        assert CHANNELS["tooltip"] is alt.Tooltip
