"""
Exception hierarchy for the edges of the extraction pipeline.

The projection core never raises: an unsatisfiable subtree is reported as
absence. These exceptions cover the inputs around it (schema descriptions and
Document AI responses) and carry structured context for logging.
"""

from __future__ import annotations

from typing import Any


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.source = source
        self.details = details or {}
        super().__init__(message)


class SchemaError(ExtractionError):
    """A schema description could not be turned into schema nodes."""

    def __init__(self, message: str, *, path: str = "$", **kwargs: Any) -> None:
        self.path = path
        super().__init__(message, **kwargs)


class DocumentLoadError(ExtractionError):
    """A Document AI response could not be read or parsed."""
