# ABOUTME: Computes the dated, non-colliding destination path for a photo.
# ABOUTME: Creates the date subfolder and adds a _N counter suffix on name clashes.

import itertools
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from photo_organizer.utils.config import DateLayout
from photo_organizer.utils.filesystem import LocalFilesystem


def with_counter(name: str, counter: int) -> str:
    """Insert _counter before the last extension, or append it when there is none."""
    dot = name.rfind(".")
    if dot <= 0:
        return f"{name}_{counter}"
    return f"{name[:dot]}_{counter}{name[dot:]}"


def candidate_names(name: str) -> Iterator[str]:
    """Yield name, name_1, name_2, ... without end."""
    yield name
    for counter in itertools.count(1):
        yield with_counter(name, counter)


class DestinationPlanner:
    """Plans where a photo should be moved under the root directory."""

    def __init__(
        self,
        layout: DateLayout = DateLayout.MONTH,
        filesystem: Optional[LocalFilesystem] = None,
    ):
        self.layout = layout
        self.filesystem = filesystem or LocalFilesystem()

    def subdirectory(self, when: datetime) -> str:
        return self.layout.subdirectory(when)

    def plan(
        self,
        root: Path,
        when: datetime,
        original_name: str,
        source: Optional[Path] = None,
    ) -> Path:
        """Return root/<date subfolder>/<free file name>.

        If `source` already sits at a candidate path, that path is returned
        as-is. Raises PlanningError if the subfolder cannot be created.
        """
        dest_dir = root / self.subdirectory(when)
        self.filesystem.create_dirs(dest_dir)

        for name in candidate_names(original_name):
            dest = dest_dir / name
            if dest == source or not self.filesystem.path_exists(dest):
                return dest
