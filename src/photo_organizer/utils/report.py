# ABOUTME: JSON run report for photo organizer runs.
# ABOUTME: Records the summary and each file's source, destination, date and error.

import json
import logging
from datetime import datetime
from pathlib import Path

from photo_organizer.progress import FileOutcome, RunSummary

logger = logging.getLogger(__name__)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def create_outcome_entry(outcome: FileOutcome) -> dict:
    """Create a report entry for a single attempted file."""
    capture = outcome.capture_date
    return {
        "source": str(outcome.source),
        "destination": str(outcome.destination) if outcome.destination else None,
        "capture_date": _isoformat(capture.value) if capture else None,
        "date_source": capture.source.value if capture else None,
        "error": outcome.error,
    }


def build_report(summary: RunSummary) -> dict:
    return {
        "root": str(summary.root),
        "state": summary.state.value,
        "processed": summary.processed,
        "errors": summary.errors,
        "total": summary.total,
        "cancelled": summary.cancelled,
        "fatal_error": summary.fatal_error,
        "started_at": _isoformat(summary.started_at),
        "finished_at": _isoformat(summary.finished_at),
        "outcomes": [create_outcome_entry(o) for o in summary.outcomes],
    }


def save_report(summary: RunSummary, path: Path) -> None:
    """Persist the run report to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_report(summary), f, indent=2, ensure_ascii=False)
    logger.info("Run report written to %s", path)


def load_report(path: Path) -> dict:
    """Load a run report from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def default_report_name(summary: RunSummary) -> str:
    stamp = (summary.started_at or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"photo_organizer_{stamp}.json"
