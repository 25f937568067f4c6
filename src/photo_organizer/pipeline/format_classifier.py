# ABOUTME: Decides whether a path is a supported image by its file extension.
# ABOUTME: Covers common raster formats plus common camera raw formats.

from pathlib import Path

SUPPORTED_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".webp", ".heic",
    ".cr2", ".nef", ".arw", ".raw", ".rw2", ".orf", ".raf", ".srw", ".dng",
})


def is_supported_image(path: Path) -> bool:
    """Check if a file is a recognized image type (case-insensitive)."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS
