# ABOUTME: Reads embedded capture-date tags from image files via Pillow.
# ABOUTME: Collects DateTimeOriginal/DateTime/DateTimeDigitized from every EXIF section.

import logging
import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from PIL import Image
from pillow_heif import register_heif_opener

from photo_organizer.errors import MetadataUnreadable

logger = logging.getLogger(__name__)

register_heif_opener()

# EXIF sub-IFD pointer; DateTimeOriginal/DateTimeDigitized usually live here.
EXIF_IFD_POINTER = 0x8769


class TagKind(Enum):
    """Date tags in resolution priority order."""

    DATE_TIME_ORIGINAL = 0x9003
    DATE_TIME = 0x0132
    DATE_TIME_DIGITIZED = 0x9004


@dataclass(frozen=True)
class MetadataTag:
    """A raw date tag value found in one metadata section."""

    kind: TagKind
    value: Any
    section: str


def read_metadata(path: Path) -> list[MetadataTag]:
    """Return every date tag found in the file's EXIF sections.

    Sections are visited in file order (IFD0, then the EXIF sub-IFD); values
    are returned unparsed. Raises MetadataUnreadable when the file cannot be
    opened as an image or its EXIF block is corrupt.
    """
    try:
        with Image.open(path) as im:
            exif = im.getexif()
            sections = [("IFD0", dict(exif))]
            sub_ifd = exif.get_ifd(EXIF_IFD_POINTER)
            if sub_ifd:
                sections.append(("Exif", dict(sub_ifd)))
    except (OSError, ValueError, SyntaxError, struct.error, Image.DecompressionBombError) as e:
        raise MetadataUnreadable(f"{path.name}: {e}") from e

    tags = []
    for section_name, entries in sections:
        for kind in TagKind:
            if kind.value in entries:
                tags.append(MetadataTag(kind=kind, value=entries[kind.value], section=section_name))
    logger.debug("Found %d date tags in %s", len(tags), path)
    return tags
