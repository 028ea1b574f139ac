"""Tests for centralized config loading."""

import logging

import pytest
from ragflow_graph.utils.config import (
    GraphSettings,
    clear_config_cache,
    load_config,
    load_graph_settings,
)


class TestConfigLoader:
    def setup_method(self):
        clear_config_cache()

    def test_load_from_explicit_path(self, tmp_path):
        cfg_file = tmp_path / "test_config.yaml"
        cfg_file.write_text("graph:\n  width: 640\n")
        result = load_config(str(cfg_file))
        assert result["graph"]["width"] == 640

    def test_load_missing_file_returns_empty(self, tmp_path):
        result = load_config(str(tmp_path / "nonexistent.yaml"))
        assert result == {}

    def test_invalid_yaml_returns_empty(self, tmp_path, caplog):
        cfg_file = tmp_path / "broken.yaml"
        cfg_file.write_text("graph: [unclosed\n")
        result = load_config(str(cfg_file))
        assert result == {}
        assert "Failed to load config" in caplog.text

    def test_explicit_path_reads_fresh(self, tmp_path):
        cfg_file = tmp_path / "test.yaml"
        cfg_file.write_text("key: value1")
        load_config(str(cfg_file))
        cfg_file.write_text("key: value2")
        assert load_config(str(cfg_file))["key"] == "value2"

    def test_auto_discover(self):
        # Should find configs/config.yaml from project root
        result = load_config()
        assert isinstance(result, dict)
        assert "graph" in result


class TestGraphSettings:
    def test_defaults(self):
        settings = GraphSettings()
        assert (settings.width, settings.height) == (800, 500)
        assert settings.charge_strength == -300
        assert settings.zoom_min == 0.5 and settings.zoom_max == 5

    def test_alpha_decay_reaches_min_in_300_ticks(self):
        settings = GraphSettings()
        assert settings.alpha_decay == pytest.approx(0.0228, abs=1e-4)
        assert (1 - settings.alpha_decay) ** 300 == pytest.approx(settings.alpha_min)

    def test_load_from_section(self):
        settings = load_graph_settings({"graph": {"width": 1024, "seed": 7}})
        assert settings.width == 1024
        assert settings.seed == 7
        assert settings.height == 500

    def test_missing_section_uses_defaults(self):
        assert load_graph_settings({}) == GraphSettings()

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = load_graph_settings({"graph": {"gravity": 9.8}})
        assert settings == GraphSettings()
        assert "gravity" in caplog.text

    def test_project_config_matches_defaults(self):
        clear_config_cache()
        assert load_graph_settings() == GraphSettings()
