# ABOUTME: Local filesystem access used by the organize engine and date resolver.
# ABOUTME: Wraps OS errors into ScanError/PlanningError/MoveError at the boundary.

import os
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from photo_organizer.errors import MoveError, PlanningError, ScanError


def _raise_scan_error(exc: OSError) -> None:
    raise ScanError(f"Cannot read {exc.filename}: {exc.strerror or exc}") from exc


class LocalFilesystem:
    """Filesystem operations on the local disk."""

    def list_tree(self, root: Path) -> Iterator[Path]:
        """Yield every regular file under root, recursively, in sorted order.

        Raises ScanError when root is missing, is not a directory, or any
        directory in the tree cannot be listed.
        """
        if not root.exists():
            raise ScanError(f"Directory does not exist: {root}")
        if not root.is_dir():
            raise ScanError(f"Not a directory: {root}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_scan_error):
            dirnames.sort()
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if path.is_file():
                    yield path

    def create_dirs(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PlanningError(f"Cannot create directory {path}: {e}") from e

    def path_exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def move_file(self, src: Path, dst: Path) -> None:
        """Move src to dst with a single rename; never overwrites dst."""
        if self.path_exists(dst):
            raise MoveError(f"Destination already exists: {dst}")
        try:
            os.rename(src, dst)
        except OSError as e:
            raise MoveError(f"Cannot move {src} to {dst}: {e}") from e

    def get_creation_time(self, path: Path) -> Optional[datetime]:
        """Return the file's birth time, or None where the platform has none.

        On Windows st_ctime is the creation time; elsewhere it is the inode
        change time, so only st_birthtime is trusted.
        """
        st = os.stat(path)
        birth = getattr(st, "st_birthtime", None)
        if birth is None and os.name == "nt":
            birth = st.st_ctime
        if birth is None:
            return None
        return datetime.fromtimestamp(birth)

    def get_modified_time(self, path: Path) -> datetime:
        return datetime.fromtimestamp(os.stat(path).st_mtime)
