import json

import pytest

from chart_express import charts, specialized
from chart_express.config import ExpressConfig, use_config
from chart_express.errors import ChartValidationError, UnsupportedFormatError
from chart_express.render import save_chart, spec_summary, to_spec


class TestToSpec:
    def test_returns_vega_lite_dict(self, scores):
        spec = to_spec(charts.bar(scores, x="category", y="mean(score)"))
        assert spec["$schema"].startswith("https://vega.github.io/schema/vega-lite/")
        assert spec["mark"] == "bar"

    def test_row_limit_becomes_validation_error(self, iris):
        with use_config(ExpressConfig(max_rows=10)):
            chart = charts.scatter(iris, x="sepalLength", y="sepalWidth")
            with pytest.raises(ChartValidationError) as exc_info:
                to_spec(chart)
        assert "max_rows" in exc_info.value.details["hint"]

    def test_unlimited_rows(self, iris):
        with use_config(ExpressConfig(max_rows=None)):
            spec = to_spec(charts.scatter(iris, x="sepalLength", y="sepalWidth"))
        assert spec["mark"] == "point"


class TestSaveChart:
    def test_json(self, tmp_path, scores):
        path = save_chart(charts.bar(scores, x="category", y="score"), tmp_path / "bar.json")
        assert path == tmp_path / "bar.json"
        with open(path) as f:
            spec = json.load(f)
        assert spec["mark"] == "bar"

    def test_html(self, tmp_path, scores):
        path = save_chart(charts.bar(scores, x="category", y="score"), tmp_path / "bar.html")
        content = path.read_text()
        assert "<html" in content
        assert "vega" in content

    def test_creates_parent_directories(self, tmp_path, scores):
        path = save_chart(
            charts.bar(scores, x="category", y="score"), tmp_path / "nested" / "bar.json"
        )
        assert path.exists()

    def test_unsupported_suffix(self, tmp_path, scores):
        with pytest.raises(UnsupportedFormatError):
            save_chart(charts.bar(scores, x="category", y="score"), tmp_path / "bar.png")
        assert not (tmp_path / "bar.png").exists()


class TestSpecSummary:
    def test_single_view(self):
        assert spec_summary({"mark": "point"}) == {"kind": "single", "marks": ["point"], "views": 1}

    def test_mark_definition(self):
        summary = spec_summary({"mark": {"type": "bar", "opacity": 0.5}})
        assert summary["marks"] == ["bar"]

    def test_layer(self, scores):
        spec = to_spec(
            specialized.heatmap(scores, x="category", y="group", color="score", annotate=True)
        )
        assert spec_summary(spec) == {"kind": "layer", "marks": ["rect", "text"], "views": 2}

    def test_nested_concat(self, iris):
        spec = to_spec(specialized.jointplot(iris, x="sepalLength", y="sepalWidth"))
        assert spec_summary(spec) == {
            "kind": "vconcat",
            "marks": ["bar", "point", "bar"],
            "views": 3,
        }

    def test_facet(self):
        spec = {"facet": {"field": "species"}, "spec": {"mark": "point"}}
        assert spec_summary(spec) == {"kind": "facet", "marks": ["point"], "views": 1}

    @pytest.mark.parametrize(
        "spec",
        [[1, 2], "point", {"layer": [{"mark": "rect"}, 3]}, {"vconcat": "top"}],
    )
    def test_rejects_non_objects(self, spec):
        with pytest.raises(UnsupportedFormatError):
            spec_summary(spec)
