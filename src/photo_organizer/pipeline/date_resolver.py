# ABOUTME: Resolves a best-effort capture date for a photo through ordered probes.
# ABOUTME: Prefers EXIF date tags, then filesystem creation time, then modified time.

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from photo_organizer.errors import MetadataUnreadable
from photo_organizer.utils.filesystem import LocalFilesystem
from photo_organizer.utils.metadata import MetadataTag, TagKind, read_metadata

logger = logging.getLogger(__name__)

EXIF_DATE_FORMATS = ("%Y:%m:%d %H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y:%m:%d")


class DateSource(Enum):
    """Where a capture date came from."""

    DATE_TIME_ORIGINAL = "date_time_original"
    DATE_TIME = "date_time"
    DATE_TIME_DIGITIZED = "date_time_digitized"
    CREATION_TIME = "creation_time"
    MODIFIED_TIME = "modified_time"


_TAG_SOURCES = {
    TagKind.DATE_TIME_ORIGINAL: DateSource.DATE_TIME_ORIGINAL,
    TagKind.DATE_TIME: DateSource.DATE_TIME,
    TagKind.DATE_TIME_DIGITIZED: DateSource.DATE_TIME_DIGITIZED,
}


@dataclass(frozen=True)
class CaptureDate:
    value: datetime
    source: DateSource


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an EXIF date string such as '2023:06:15 10:30:00'.

    Returns None for empty, placeholder ('0000:00:00 00:00:00') or otherwise
    malformed values.
    """
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    text = value.strip("\x00").strip()
    if not text:
        return None
    # Drop sub-second or timezone tails ("2023:06:15 10:30:00.123", "...+02:00")
    text = text[:19]
    for fmt in EXIF_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


class DateResolver:
    """Picks one capture date per file; never raises to its caller."""

    def __init__(
        self,
        metadata_reader: Callable[[Path], list[MetadataTag]] = read_metadata,
        filesystem: Optional[LocalFilesystem] = None,
    ):
        self.metadata_reader = metadata_reader
        self.filesystem = filesystem or LocalFilesystem()
        self.probes: list[Callable[[Path], Optional[CaptureDate]]] = [
            self.from_metadata,
            self.from_creation_time,
        ]

    def resolve(self, path: Path) -> CaptureDate:
        for probe in self.probes:
            found = probe(path)
            if found is not None:
                return found
        return self.from_modified_time(path)

    def from_metadata(self, path: Path) -> Optional[CaptureDate]:
        """First parseable tag by kind priority; tag kind outranks section order."""
        try:
            tags = self.metadata_reader(path)
        except MetadataUnreadable as e:
            logger.warning("Could not read metadata from %s: %s", path.name, e)
            return None

        for kind in TagKind:
            for tag in tags:
                if tag.kind is not kind:
                    continue
                parsed = parse_exif_datetime(tag.value)
                if parsed is not None:
                    return CaptureDate(parsed, _TAG_SOURCES[kind])
                logger.debug("Ignoring unparseable %s %r in %s", kind.name, tag.value, path.name)
        return None

    def from_creation_time(self, path: Path) -> Optional[CaptureDate]:
        try:
            created = self.filesystem.get_creation_time(path)
        except (OSError, ValueError, OverflowError) as e:
            logger.debug("Creation time unavailable for %s: %s", path.name, e)
            return None
        if created is None:
            return None
        return CaptureDate(created, DateSource.CREATION_TIME)

    def from_modified_time(self, path: Path) -> CaptureDate:
        try:
            return CaptureDate(self.filesystem.get_modified_time(path), DateSource.MODIFIED_TIME)
        except (OSError, ValueError, OverflowError) as e:
            logger.warning("Could not read modified time of %s: %s", path.name, e)
            return CaptureDate(datetime.fromtimestamp(0), DateSource.MODIFIED_TIME)
