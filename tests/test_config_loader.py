"""Tests for the YAML configuration loader."""

from pathlib import Path

import pytest
import yaml

from ops.config_loader import DEFAULT_CONFIG_PATH, Config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "project_name": "Test",
                "input_files": {
                    "voter_csv": "data/presence.csv",
                    "trends_csv": "https://example.org/geoMap.csv",
                    "absolute_csv": str(tmp_path / "abs.csv"),
                },
                "columns": {"county": "Cod judet"},
                "visualization": {"dpi": 72},
            },
            allow_unicode=True,
        ),
        encoding="utf-8",
    )
    return path


class TestConfig:
    def test_values_from_file(self, config_file):
        config = Config(config_file)

        assert config.get("project_name") == "Test"
        assert config.get_visualization_setting("dpi") == 72

    def test_defaults_fill_gaps(self, config_file):
        config = Config(config_file)

        assert config.get_column_name("county") == "Cod judet"
        assert config.get_column_name("registered") == "Înscriși pe liste permanente"
        assert config.get_column_name("turned_out") == "LP"
        assert config.get_visualization_setting("default_candidate") == "victor_ponta"
        assert config.get_system_setting("request_timeout") == 30
        assert config.get("missing.key", "fallback") == "fallback"

    def test_get_columns(self, config_file):
        assert Config(config_file).get_columns() == {
            "county": "Cod judet",
            "registered": "Înscriși pe liste permanente",
            "turned_out": "LP",
        }

    def test_input_paths(self, config_file, tmp_path):
        config = Config(config_file)

        assert config.get_input_path("voter_csv") == config.project_root / "data/presence.csv"
        assert config.get_input_path("trends_csv") == "https://example.org/geoMap.csv"
        assert config.get_input_path("absolute_csv") == tmp_path / "abs.csv"

    def test_unknown_input_raises(self, config_file):
        with pytest.raises(ValueError, match="not found in config"):
            Config(config_file).get_input_path("nope")

    def test_overrides(self, config_file):
        config = Config(
            config_file,
            overrides={"visualization.dpi": 300, "input_files.voter_csv": "other.csv"},
        )

        assert config.get_visualization_setting("dpi") == 300
        assert config.get_input_path("voter_csv") == config.project_root / "other.csv"

    def test_defaults_are_not_shared(self, config_file):
        config = Config(config_file)
        domain = config.get_visualization_setting("turnout_domain")
        domain.append(99)

        assert Config.DEFAULTS["visualization"]["turnout_domain"] == [15, 35]

    def test_output_dir(self, config_file):
        config = Config(config_file)

        assert config.get_output_dir("charts") == config.project_root / "output/charts"
        with pytest.raises(ValueError):
            config.get_output_dir("maps")

    def test_validate_input_files(self, config_file, tmp_path):
        (tmp_path / "abs.csv").write_text("x", encoding="utf-8")

        results = Config(config_file).validate_input_files()

        assert results["trends_csv"] is True
        assert results["absolute_csv"] is True

    def test_env_var_lookup(self, config_file, monkeypatch):
        monkeypatch.setenv("PIPELINE_CONFIG_PATH", str(config_file))

        assert Config().config_path == Path(config_file).resolve()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(tmp_path / "nope.yaml")

    def test_bundled_config_loads(self):
        config = Config(DEFAULT_CONFIG_PATH)

        assert config.get_column_name("county") == "Judet"
        assert config.project_root == DEFAULT_CONFIG_PATH.parent.parent
