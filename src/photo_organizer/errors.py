# ABOUTME: Exception hierarchy for the photo organizer.
# ABOUTME: Separates recoverable per-file failures from fatal scan failures.


class PhotoOrganizerError(Exception):
    """Base class for all photo organizer errors."""


class MetadataUnreadable(PhotoOrganizerError):
    """Embedded metadata could not be read from a file."""


class PlanningError(PhotoOrganizerError):
    """A destination could not be prepared for a file."""


class MoveError(PhotoOrganizerError):
    """A file could not be moved to its destination."""


class ScanError(PhotoOrganizerError):
    """The root directory tree could not be enumerated."""


class RunInProgressError(PhotoOrganizerError):
    """A run was requested while another run is still active."""
