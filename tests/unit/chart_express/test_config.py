import json

import altair as alt
import pytest
from pydantic import ValidationError

from chart_express.config import (
    ConfigPreset,
    ExpressConfig,
    get_config,
    resolve_config,
    set_config,
    use_config,
)


def _unset_after_test(monkeypatch, name):
    """Start with `name` unset and remove whatever a .env load leaves behind."""
    monkeypatch.setenv(name, "")
    monkeypatch.delenv(name)


class TestExpressConfig:
    def test_defaults(self):
        cfg = ExpressConfig()
        assert (cfg.width, cfg.height) == (400, 300)
        assert cfg.marginal_size == 60
        assert cfg.maxbins == 20
        assert cfg.max_rows == 5000

    def test_marginal_must_be_smaller_than_chart(self):
        with pytest.raises(ValidationError, match="marginal_size"):
            ExpressConfig(width=100, height=80, marginal_size=80)

    def test_field_constraints(self):
        with pytest.raises(ValidationError):
            ExpressConfig(histogram_opacity=1.5)
        with pytest.raises(ValidationError):
            ExpressConfig(maxbins=1)

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "chart.yaml"
        path.write_text("width: 500\nheight: 250\ncolor_scheme: magma\n")
        cfg = ExpressConfig.from_yaml(path)
        assert cfg.width == 500
        assert cfg.color_scheme == "magma"
        assert cfg.marginal_size == 60

    def test_from_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert ExpressConfig.from_yaml(path) == ExpressConfig()

    def test_from_json(self, tmp_path):
        path = tmp_path / "chart.json"
        path.write_text(json.dumps({"maxbins": 40, "max_rows": None}))
        cfg = ExpressConfig.from_file(path)
        assert cfg.maxbins == 40
        assert cfg.max_rows is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExpressConfig.from_yaml(tmp_path / "missing.yaml")
        with pytest.raises(FileNotFoundError):
            ExpressConfig.from_json(tmp_path / "missing.json")

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CHART_EXPRESS_WIDTH", "320")
        monkeypatch.setenv("CHART_EXPRESS_MAX_ROWS", "none")
        cfg = ExpressConfig.from_env(dotenv_path=tmp_path / "absent.env")
        assert cfg.width == 320
        assert cfg.max_rows is None

    def test_from_dotenv_file(self, monkeypatch, tmp_path):
        dotenv = tmp_path / ".env"
        dotenv.write_text("CHART_EXPRESS_MAXBINS=12\n")
        _unset_after_test(monkeypatch, "CHART_EXPRESS_MAXBINS")
        cfg = ExpressConfig.from_env(dotenv_path=dotenv)
        assert cfg.maxbins == 12

    def test_dotenv_found_from_working_directory(self, monkeypatch, tmp_path):
        project = tmp_path / "project"
        nested = project / "charts"
        nested.mkdir(parents=True)
        (project / ".env").write_text("CHART_EXPRESS_WIDTH=321\n")
        _unset_after_test(monkeypatch, "CHART_EXPRESS_WIDTH")
        monkeypatch.chdir(nested)
        assert ExpressConfig.from_env().width == 321

    def test_process_env_wins_over_dotenv(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text("CHART_EXPRESS_WIDTH=321\n")
        monkeypatch.setenv("CHART_EXPRESS_WIDTH", "280")
        monkeypatch.chdir(tmp_path)
        assert ExpressConfig.from_env().width == 280

    def test_invalid_env_value(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CHART_EXPRESS_HEIGHT", "tall")
        with pytest.raises(ValidationError):
            ExpressConfig.from_env(dotenv_path=tmp_path / "absent.env")

    @pytest.mark.parametrize("name", [p.value for p in ConfigPreset])
    def test_presets_are_valid(self, name):
        assert isinstance(ExpressConfig.preset(name), ExpressConfig)

    def test_preset_case_insensitive(self):
        assert ExpressConfig.preset("COMPACT").width == 250

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            ExpressConfig.preset("huge")


class TestActiveConfig:
    def test_set_config_returns_previous(self, small_config):
        before = get_config()
        previous = set_config(small_config)
        assert previous is before
        assert get_config() is small_config

    def test_use_config_restores(self, small_config):
        before = get_config()
        with use_config(small_config) as active:
            assert get_config() is active
        assert get_config() is before

    def test_resolve_config_prefers_explicit(self, small_config):
        assert resolve_config(small_config) is small_config
        assert resolve_config(None) is get_config()

    def test_set_config_applies_row_limit(self):
        set_config(ExpressConfig(max_rows=3))
        assert alt.data_transformers.options.get("max_rows") == 3
