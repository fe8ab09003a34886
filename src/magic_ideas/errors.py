"""Error types raised at the file boundary.

The organization engine itself never raises for bad data; these errors
only come out of the loaders and are turned into exit codes by the CLI.
"""

from __future__ import annotations


class MagicIdeasError(Exception):
    """Base error for magic-ideas."""


class LibraryLoadError(MagicIdeasError):
    """A library or usage file could not be read or has the wrong shape."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
