# ABOUTME: Progress events, run summaries and the sinks that receive them.
# ABOUTME: ProgressChannel hands events from the worker thread to a front end via a queue.

import queue
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Protocol, Union

from photo_organizer.pipeline.date_resolver import CaptureDate


class RunState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class ProgressEvent:
    current: int
    total: int
    message: str


@dataclass(frozen=True)
class FileOutcome:
    """What happened to one candidate file."""

    source: Path
    destination: Optional[Path] = None
    capture_date: Optional[CaptureDate] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunSummary:
    """Immutable result of one organize run."""

    root: Path
    state: RunState
    processed: int = 0
    errors: int = 0
    total: int = 0
    fatal_error: Optional[str] = None
    outcomes: tuple = field(default_factory=tuple)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def cancelled(self) -> bool:
        return self.state is RunState.CANCELLED


class ProgressSink(Protocol):
    """Receives progress from the organize engine, in production order."""

    def on_progress(self, event: ProgressEvent) -> None: ...

    def on_finished(self, summary: RunSummary) -> None: ...


class NullSink:
    def on_progress(self, event: ProgressEvent) -> None:
        pass

    def on_finished(self, summary: RunSummary) -> None:
        pass


class ProgressChannel:
    """Buffered FIFO sink drained by the presentation thread.

    The worker calls on_progress/on_finished; the consumer iterates events()
    until the run summary arrives, after which `summary` is set.
    """

    def __init__(self, poll_interval: float = 0.1):
        self._queue: "queue.Queue[Union[ProgressEvent, RunSummary]]" = queue.Queue()
        self.poll_interval = poll_interval
        self.summary: Optional[RunSummary] = None

    def on_progress(self, event: ProgressEvent) -> None:
        self._queue.put(event)

    def on_finished(self, summary: RunSummary) -> None:
        self._queue.put(summary)

    def events(self) -> Iterator[ProgressEvent]:
        while self.summary is None:
            try:
                item = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            if isinstance(item, RunSummary):
                self.summary = item
                return
            yield item
