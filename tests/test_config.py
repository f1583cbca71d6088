"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from salon_schedule.config import AppConfig, DefaultsConfig


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "business_id: biz-1\n"
            "timezone: Europe/Warsaw\n"
            "log_level: info\n"
            "data_file: salon.json\n"
            "defaults:\n"
            "  duration_minutes: 60\n"
            "api:\n"
            "  base_url: https://booking.example.com/\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.business_id == "biz-1"
        assert config.timezone == "Europe/Warsaw"
        assert config.log_level == "INFO"
        assert config.defaults.duration_minutes == 60
        assert config.defaults.slot_step_minutes == 30
        assert config.data_file == tmp_path / "salon.json"
        assert config.api.base_url == "https://booking.example.com"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("defaults: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)

    def test_unknown_timezone(self):
        with pytest.raises(ValueError):
            AppConfig(timezone="Mars/Olympus")

    def test_absolute_data_file_kept(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("data_file: /srv/salon.json\n", encoding="utf-8")

        assert AppConfig.load_from_yaml(config_path).data_file == Path("/srv/salon.json")


class TestDefaultsConfig:
    """Tests for DefaultsConfig validation."""

    def test_defaults_inside_tool_bounds(self):
        defaults = DefaultsConfig()

        assert defaults.duration_minutes == 30
        assert defaults.slot_limit == 24

    @pytest.mark.parametrize(
        "fields",
        [
            {"duration_minutes": 1},
            {"slot_limit": 500},
            {"min_gap_minutes": 5},
            {"gap_limit": 0},
            {"slot_step_minutes": 0},
            {"slot_step_minutes": 25},
        ],
    )
    def test_out_of_range_defaults_rejected(self, fields):
        with pytest.raises(ValueError):
            DefaultsConfig(**fields)
