# ABOUTME: Shared pytest fixtures for building photo workspaces.
# ABOUTME: Creates real JPEGs with Pillow and pins file modification times.

import os
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image

from photo_organizer.utils.filesystem import LocalFilesystem
from photo_organizer.utils.metadata import EXIF_IFD_POINTER


class NoBirthTimeFilesystem(LocalFilesystem):
    """Local filesystem that reports no creation time, as on Linux."""

    def get_creation_time(self, path):
        return None


@pytest.fixture
def fs():
    return NoBirthTimeFilesystem()


@pytest.fixture
def make_photo():
    """Factory: make_photo(path, modified=None, exif_date=None, exif_ifd=None, data=None) -> Path.

    JPEG paths get a real 8x8 image, with an IFD0 DateTime when exif_date is
    given and an EXIF sub-IFD built from exif_ifd (tag id -> value). Other
    paths get `data` or a few placeholder bytes.
    """

    def _make(path: Path, modified: datetime | None = None, exif_date: str | None = None,
              exif_ifd: dict | None = None, data: bytes | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if data is not None:
            path.write_bytes(data)
        elif path.suffix.lower() in (".jpg", ".jpeg"):
            img = Image.new("RGB", (8, 8), "red")
            if exif_date or exif_ifd:
                exif = Image.Exif()
                if exif_date:
                    exif[0x0132] = exif_date
                if exif_ifd:
                    exif[EXIF_IFD_POINTER] = dict(exif_ifd)
                img.save(path, format="JPEG", exif=exif)
            else:
                img.save(path, format="JPEG")
        else:
            path.write_bytes(b"not really an image")
        if modified:
            ts = modified.timestamp()
            os.utime(path, (ts, ts))
        return path

    return _make
