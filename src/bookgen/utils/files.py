"""File helpers."""

import shutil
from pathlib import Path

from bookgen.errors import ImageCopyError


def copy_file(dst: Path, src: Path) -> None:
    """Copy src to dst, creating dst's directory.

    Raises:
        ImageCopyError: If the copy fails
    """
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
    except OSError as e:
        raise ImageCopyError(src, dst, str(e)) from e


def format_bytes(size: int) -> str:
    """Human readable byte count (e.g. 1.5 kB)."""
    if size < 1000:
        return f"{size} B"
    value = size / 1000
    for unit in ("kB", "MB"):
        if value < 1000:
            return f"{value:.1f} {unit}"
        value /= 1000
    return f"{value:.1f} GB"
