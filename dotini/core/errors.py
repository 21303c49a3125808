"""Exception types raised by dotini."""

from __future__ import annotations

from typing import Optional


class DotiniError(Exception):
    """Base class for all dotini errors."""


class SourceUnreadable(DotiniError):
    """A configuration source could not be read or parsed.

    Attributes:
        resource: Base name of the offending resource (e.g. ``app.ini``).
    """

    def __init__(self, resource: str, detail: Optional[str] = None):
        self.resource = resource
        self.detail = detail
        message = f"Configuration file {resource} cannot be loaded"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ManifestError(DotiniError, ValueError):
    """The dotini.yaml manifest is not valid."""
