from __future__ import annotations

from pathlib import Path
from typing import Optional


class WinstrapError(RuntimeError):
    pass


class ConfigError(WinstrapError):
    """Configuration could not be read or is invalid. Fatal for the run."""


class LinkError(WinstrapError):
    """Per-entry link failure. Returned in outcomes, never fatal."""

    def __init__(
        self,
        message: str,
        *,
        destination: Optional[Path] = None,
        source: Optional[Path] = None,
    ) -> None:
        super().__init__(message)
        self.destination = destination
        self.source = source


class SourceMissing(LinkError):
    pass


class RemovalFailed(LinkError):
    pass


class ParentDirectoryCreationFailed(LinkError):
    pass


class LinkCreationFailed(LinkError):
    pass


class DestinationIsSource(LinkError):
    pass
