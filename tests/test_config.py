# ABOUTME: Tests for the config utility module.
# ABOUTME: Validates date layouts, config defaults, YAML loading and persistence.

from datetime import datetime
from pathlib import Path

import pytest
import yaml

from photo_organizer.utils.config import (
    DEFAULT_CONFIG,
    Config,
    DateLayout,
    load_config,
    save_config,
)


class TestDateLayout:
    """Tests for formatting and recognising date folders."""

    def test_parse_known_values(self):
        assert DateLayout.parse("YYYY/MM") is DateLayout.MONTH
        assert DateLayout.parse("YYYY-MM-DD") is DateLayout.DAY

    def test_parse_unknown_value_raises(self):
        with pytest.raises(ValueError, match="Unknown layout"):
            DateLayout.parse("MM/YYYY")

    def test_month_subdirectory_is_zero_padded(self):
        assert DateLayout.MONTH.subdirectory(datetime(2023, 6, 5, 10, 30)) == "2023/06"

    def test_day_subdirectory(self):
        assert DateLayout.DAY.subdirectory(datetime(2023, 6, 5)) == "2023-06-05"

    def test_month_layout_dir_recognised(self):
        assert DateLayout.MONTH.is_layout_dir(Path("2023/06"))
        assert DateLayout.MONTH.is_layout_dir(Path("1999/12"))

    def test_month_layout_rejects_other_dirs(self):
        assert not DateLayout.MONTH.is_layout_dir(Path("."))
        assert not DateLayout.MONTH.is_layout_dir(Path("2023"))
        assert not DateLayout.MONTH.is_layout_dir(Path("2023/13"))
        assert not DateLayout.MONTH.is_layout_dir(Path("trip/2023/06"))
        assert not DateLayout.MONTH.is_layout_dir(Path("2023-06-05"))

    def test_day_layout_dir_recognised(self):
        assert DateLayout.DAY.is_layout_dir(Path("2023-06-05"))
        assert not DateLayout.DAY.is_layout_dir(Path("2023/06"))
        assert not DateLayout.DAY.is_layout_dir(Path("vacation"))


class TestConfig:
    """Tests for Config dataclass behavior."""

    def test_defaults(self):
        cfg = Config.from_dict(DEFAULT_CONFIG)
        assert cfg.layout is DateLayout.MONTH
        assert cfg.skip_organized is True
        assert cfg.report_dir is None

    def test_from_dict_fills_missing_keys(self):
        cfg = Config.from_dict({"layout": "YYYY-MM-DD"})
        assert cfg.layout is DateLayout.DAY
        assert cfg.skip_organized is True

    def test_from_dict_rejects_unknown_layout(self):
        with pytest.raises(ValueError):
            Config.from_dict({"layout": "weekly"})

    def test_report_dir_expands_user(self):
        cfg = Config.from_dict({"report_dir": "~/reports"})
        assert cfg.report_dir == Path.home() / "reports"

    def test_to_dict_matches_defaults(self):
        assert Config().to_dict() == DEFAULT_CONFIG


class TestLoadConfig:
    """Tests for loading config from YAML files."""

    def test_load_config_returns_defaults_when_no_file(self):
        cfg = load_config(Path("/nonexistent/path/config.yml"))
        assert cfg.layout is DateLayout.MONTH

    def test_load_config_from_yaml(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text(yaml.dump({"layout": "YYYY-MM-DD", "skip_organized": False}))
        cfg = load_config(config_file)
        assert cfg.layout is DateLayout.DAY
        assert cfg.skip_organized is False

    def test_load_empty_yaml_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("")
        assert load_config(config_file) == Config()


class TestSaveConfig:
    """Tests for persisting config to YAML."""

    def test_save_config_creates_file(self, tmp_path):
        config_file = tmp_path / "nested" / "config.yml"
        save_config(Config(), config_file)
        assert config_file.exists()

    def test_save_config_roundtrip(self, tmp_path):
        config_file = tmp_path / "config.yml"
        cfg = Config(layout=DateLayout.DAY, skip_organized=False, report_dir=tmp_path)
        save_config(cfg, config_file)
        assert load_config(config_file) == cfg
