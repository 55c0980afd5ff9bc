"""Errors raised while reading local content exports."""

from __future__ import annotations

from pathlib import Path


class ContentReadError(ValueError):
    """Raised when a stored file that must hold valid JSON cannot be decoded.

    This points at a corrupted export. It is never converted into an empty
    item; the request that hit it fails.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Malformed content file {path}: {reason}")
        self.path = path
        self.reason = reason
