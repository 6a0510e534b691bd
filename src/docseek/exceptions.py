"""Exception hierarchy for DocSeek.

Every failure the core can detect is fatal for the current run: the CLI
reports the message and exits. Numeric degeneracies while ranking are not
errors and never reach this module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional


class DocSeekError(Exception):
    """Base exception for all DocSeek errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DocSeekError):
    """Raised when settings are invalid."""


class ScanError(DocSeekError):
    """Raised when a directory cannot be listed."""

    def __init__(
        self,
        message: str,
        directory: Optional[Path] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.directory = directory


class DocumentReadError(DocSeekError):
    """Raised when a document's text cannot be extracted."""

    def __init__(
        self,
        message: str,
        filepath: Optional[Path] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.filepath = filepath


class SnapshotError(DocSeekError):
    """Raised when the index snapshot cannot be read, parsed or written."""

    def __init__(
        self,
        message: str,
        filepath: Optional[Path] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.filepath = filepath
