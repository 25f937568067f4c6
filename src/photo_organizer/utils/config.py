# ABOUTME: Configuration management for the photo organizer.
# ABOUTME: Loads/saves YAML config, provides defaults, and defines date folder layouts.

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml


class DateLayout(Enum):
    """Granularity of the date-derived subdirectories under the root."""

    MONTH = "YYYY/MM"
    DAY = "YYYY-MM-DD"

    @classmethod
    def parse(cls, value: str) -> "DateLayout":
        for layout in cls:
            if layout.value == value:
                return layout
        choices = ", ".join(layout.value for layout in cls)
        raise ValueError(f"Unknown layout {value!r} (expected one of: {choices})")

    def subdirectory(self, when: datetime) -> str:
        """Format the relative subdirectory for a capture date."""
        if self is DateLayout.MONTH:
            return f"{when.year:04d}/{when.month:02d}"
        return f"{when.year:04d}-{when.month:02d}-{when.day:02d}"

    def is_layout_dir(self, relative_dir: Path) -> bool:
        """Check whether a directory relative to the root looks like one this layout creates."""
        parts = relative_dir.parts
        if self is DateLayout.MONTH:
            return (
                len(parts) == 2
                and re.fullmatch(r"\d{4}", parts[0]) is not None
                and re.fullmatch(r"(0[1-9]|1[0-2])", parts[1]) is not None
            )
        return len(parts) == 1 and re.fullmatch(r"\d{4}-\d{2}-\d{2}", parts[0]) is not None


DEFAULT_CONFIG = {
    "layout": DateLayout.MONTH.value,
    "skip_organized": True,
    "report_dir": None,
}


@dataclass
class Config:
    """Holds photo organizer settings."""

    layout: DateLayout = DateLayout.MONTH
    skip_organized: bool = True
    report_dir: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        merged = dict(DEFAULT_CONFIG)
        merged.update(data)
        report_dir = merged.get("report_dir")
        return cls(
            layout=DateLayout.parse(str(merged["layout"])),
            skip_organized=bool(merged["skip_organized"]),
            report_dir=Path(report_dir).expanduser() if report_dir else None,
        )

    def to_dict(self) -> dict:
        return {
            "layout": self.layout.value,
            "skip_organized": self.skip_organized,
            "report_dir": str(self.report_dir) if self.report_dir else None,
        }


def load_config(config_path: Path) -> Config:
    """Load config from YAML file, merging with defaults."""
    if not config_path.exists():
        return Config.from_dict(DEFAULT_CONFIG)

    with open(config_path, "r") as f:
        user_data = yaml.safe_load(f) or {}

    return Config.from_dict(user_data)


def save_config(config: Config, config_path: Path) -> None:
    """Save config to a YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False)
