"""
Exception types for distilqa.

LoadError is raised while assembling a pipeline from files on disk,
ConfigError when a request or a model configuration is unusable.
"""

from __future__ import annotations

from pathlib import Path


class DistilQAError(Exception):
    """Base class for every error raised by distilqa."""


class LoadError(DistilQAError):
    """A vocabulary, configuration or weight file is missing, malformed or inconsistent."""

    def __init__(self, message: str, *, resource: str | Path | None = None) -> None:
        self.resource = str(resource) if resource is not None else None
        if self.resource is not None:
            message = f"{message} [{self.resource}]"
        super().__init__(message)


class ConfigError(DistilQAError, ValueError):
    """Invalid prediction parameters or a degenerate model configuration."""
