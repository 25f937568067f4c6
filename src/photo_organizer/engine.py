# ABOUTME: Organize engine that scans a root folder and moves photos into dated subfolders.
# ABOUTME: Runs one cancellable run at a time on a worker thread and reports progress to a sink.

import logging
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

from photo_organizer.errors import MoveError, PlanningError, RunInProgressError, ScanError
from photo_organizer.pipeline.date_resolver import DateResolver
from photo_organizer.pipeline.destination_planner import DestinationPlanner
from photo_organizer.pipeline.format_classifier import is_supported_image
from photo_organizer.progress import (
    FileOutcome,
    NullSink,
    ProgressEvent,
    ProgressSink,
    RunState,
    RunSummary,
)
from photo_organizer.utils.config import Config
from photo_organizer.utils.filesystem import LocalFilesystem

logger = logging.getLogger(__name__)


class OrganizeEngine:
    """Moves every image under a root directory into root/<date subfolder>/.

    Only one run may be active per engine. A run goes
    IDLE -> SCANNING -> PROCESSING -> COMPLETED | CANCELLED | FATAL_ERROR.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        filesystem: Optional[LocalFilesystem] = None,
        resolver: Optional[DateResolver] = None,
        planner: Optional[DestinationPlanner] = None,
    ):
        self.config = config or Config()
        self.filesystem = filesystem or LocalFilesystem()
        self.resolver = resolver or DateResolver(filesystem=self.filesystem)
        self.planner = planner or DestinationPlanner(self.config.layout, self.filesystem)
        self.last_summary: Optional[RunSummary] = None

        self._state = RunState.IDLE
        self._active = False
        self._lock = threading.Lock()
        self._cancel_requested = threading.Event()
        self._worker: Optional[threading.Thread] = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Ask the active run to stop before its next file."""
        self._cancel_requested.set()

    def organize(self, root: Path, sink: Optional[ProgressSink] = None) -> RunSummary:
        """Run a whole organize pass on the calling thread."""
        sink = sink or NullSink()
        self._claim()
        try:
            summary = self._run_safely(Path(root), sink)
        finally:
            self._release()
        sink.on_finished(summary)
        return summary

    def start(self, root: Path, sink: Optional[ProgressSink] = None) -> threading.Thread:
        """Start a run on a background worker thread and return immediately."""
        sink = sink or NullSink()
        self._claim()
        worker = threading.Thread(
            target=self._work,
            args=(Path(root), sink),
            name="photo-organizer-worker",
            daemon=True,
        )
        self._worker = worker
        worker.start()
        return worker

    def wait(self, timeout: Optional[float] = None) -> Optional[RunSummary]:
        """Wait for the background run; returns its summary, or None on timeout."""
        if self._worker is not None:
            self._worker.join(timeout)
            if self._worker.is_alive():
                return None
        return self.last_summary

    def _work(self, root: Path, sink: ProgressSink) -> None:
        try:
            summary = self._run_safely(root, sink)
        finally:
            self._release()
        sink.on_finished(summary)

    def _claim(self) -> None:
        with self._lock:
            if self._active:
                raise RunInProgressError("An organize run is already in progress")
            self._active = True
            self._cancel_requested.clear()

    def _release(self) -> None:
        with self._lock:
            self._active = False

    def _run_safely(self, root: Path, sink: ProgressSink) -> RunSummary:
        try:
            return self._run(root, sink)
        except Exception as e:
            logger.exception("Organize run over %s aborted", root)
            return self._finish(
                RunSummary(root=root, state=RunState.FATAL_ERROR, fatal_error=str(e))
            )

    def _run(self, root: Path, sink: ProgressSink) -> RunSummary:
        started_at = datetime.now()
        self._state = RunState.SCANNING
        logger.info("Scanning %s for images", root)

        try:
            candidates = self._scan(root)
        except ScanError as e:
            logger.error("Error scanning directory %s: %s", root, e)
            sink.on_progress(ProgressEvent(0, 0, f"Error scanning directory: {e}"))
            return self._finish(
                RunSummary(
                    root=root,
                    state=RunState.FATAL_ERROR,
                    fatal_error=str(e),
                    started_at=started_at,
                )
            )

        total = len(candidates)
        if total == 0:
            logger.info("No image files found in %s", root)
            sink.on_progress(ProgressEvent(0, 0, "No image files found"))
            return self._finish(
                RunSummary(root=root, state=RunState.COMPLETED, started_at=started_at)
            )

        sink.on_progress(ProgressEvent(0, total, f"Found {total} image files"))
        self._state = RunState.PROCESSING

        processed = 0
        errors = 0
        outcomes = []
        state = RunState.COMPLETED

        for index, source in enumerate(candidates):
            if self._cancel_requested.is_set():
                logger.info("Cancelled after %d of %d files", index, total)
                state = RunState.CANCELLED
                break

            outcome = self._process(root, source)
            outcomes.append(outcome)
            if outcome.ok:
                processed += 1
                subfolder = self.planner.subdirectory(outcome.capture_date.value)
                message = f"Processed: {source.name} → {subfolder}"
            else:
                errors += 1
                message = f"Failed: {source.name}: {outcome.error}"
            sink.on_progress(ProgressEvent(index + 1, total, message))

        logger.info(
            "Organization %s: %d processed, %d errors",
            "cancelled" if state is RunState.CANCELLED else "complete",
            processed,
            errors,
        )
        return self._finish(
            RunSummary(
                root=root,
                state=state,
                processed=processed,
                errors=errors,
                total=total,
                outcomes=tuple(outcomes),
                started_at=started_at,
            )
        )

    def _scan(self, root: Path) -> list[Path]:
        """Collect supported images under root, skipping already-organized ones."""
        candidates = []
        for path in self.filesystem.list_tree(root):
            if not is_supported_image(path):
                continue
            if self.config.skip_organized and self.config.layout.is_layout_dir(
                path.parent.relative_to(root)
            ):
                logger.debug("Already organized: %s", path)
                continue
            logger.debug("Found image: %s", path)
            candidates.append(path)
        return candidates

    def _process(self, root: Path, source: Path) -> FileOutcome:
        capture = None
        dest = None
        try:
            capture = self.resolver.resolve(source)
            dest = self.planner.plan(root, capture.value, source.name, source=source)
            if dest == source:
                logger.info("Already in place: %s", source)
            else:
                self.filesystem.move_file(source, dest)
                logger.info("Moved: %s -> %s", source, dest)
        except (PlanningError, MoveError) as e:
            logger.error("Failed to organize %s: %s", source, e)
            return FileOutcome(source, dest, capture, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error organizing %s", source)
            return FileOutcome(source, dest, capture, error=str(e))
        return FileOutcome(source, dest, capture)

    def _finish(self, summary: RunSummary) -> RunSummary:
        summary = replace(summary, finished_at=datetime.now())
        self._state = summary.state
        self.last_summary = summary
        return summary
