from __future__ import annotations

from pathlib import Path
from typing import Optional


class SiteError(Exception):
    """Base class for every failure that stops a site build."""

    def __init__(self, message: str, source: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message


class ConfigError(SiteError):
    pass


class TemplateInitError(SiteError):
    pass


class MetadataError(SiteError):
    pass


class RenderError(SiteError):
    pass


class IoError(SiteError):
    pass
