"""Failure kinds raised along the marking pipeline.

Outbound failures (``TransportError``, ``ServiceError``) live in
``llm_gateway``; everything else is defined here. None of these carry an HTTP
status: ``grading.assembly.error_response`` is the only place that maps a
failure onto the caller-facing contract.
"""
from __future__ import annotations

from typing import Any, List, Literal, Optional, Sequence

SchemaErrorKind = Literal["unparseable", "contract-violation"]


class MarkingError(RuntimeError):  # Base pipeline error
    pass


class ConfigurationError(MarkingError):
    """A required setting (the outbound credential) is missing."""


class ValidationError(MarkingError):
    """The inbound submission is malformed or incomplete."""

    def __init__(self, message: str, *, missing: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.missing: List[str] = list(missing)


class NoOutputError(MarkingError):
    """The service answered successfully but carried no textual payload."""

    def __init__(self, envelope: Any):
        super().__init__("No text returned from model.")
        self.envelope = envelope


class SchemaError(MarkingError):
    """Extracted text could not be parsed or broke the output contract."""

    def __init__(self, kind: SchemaErrorKind, *, raw: str, field: Optional[str] = None, reason: str = ""):
        detail = kind if field is None else f"{kind}: {field}"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail)
        self.kind = kind
        self.raw = raw
        self.field = field
        self.reason = reason


__all__ = [
    "ConfigurationError",
    "MarkingError",
    "NoOutputError",
    "SchemaError",
    "SchemaErrorKind",
    "ValidationError",
]
