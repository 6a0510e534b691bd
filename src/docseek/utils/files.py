"""Utility helpers for working with files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from docseek.config import SNAPSHOT_NAME
from docseek.exceptions import ScanError

LOGGER = logging.getLogger(__name__)


def normalize_extension(filetype: str) -> str:
    """Return the extension as a lowercase suffix with a leading dot."""
    return "." + filetype.strip().lstrip(".").lower()


def iter_paths_by_extension(
    directory: Path, filetype: str, *, exclude: str = SNAPSHOT_NAME
) -> Iterator[Path]:
    """Yield files directly inside ``directory`` whose suffix matches ``filetype``.

    Subdirectories are not descended into. The file named ``exclude`` (the
    index snapshot) is never yielded.
    """
    suffix = normalize_extension(filetype)
    try:
        children = sorted(Path(directory).iterdir())
    except OSError as exc:
        LOGGER.error("Failed to list %s: %s", directory, exc)
        raise ScanError(f"Couldn't read directory {directory}: {exc}", directory=Path(directory)) from exc

    for child in children:
        if child.name == exclude:
            continue
        if child.is_file() and child.suffix.lower() == suffix:
            yield child
