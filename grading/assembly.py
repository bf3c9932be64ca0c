"""Final payload assembly and the caller-facing error envelope."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from llm_gateway import LlmGatewayError, ServiceError, TransportError
from stations.models import Station

from .errors import ConfigurationError, MarkingError, NoOutputError, SchemaError, ValidationError
from .types import AssessmentResult, Submission, feedback_key

UNEXPECTED_ERROR = "Unexpected error while marking."


def station_block(station: Station) -> Dict[str, Any]:
    return {
        "id": station.id,
        "title": station.title,
        "description": station.description,
        "timings": station.timings.model_dump(),
        "questions": [
            {"id": question.id, "label": question.label, "prompt": question.prompt}
            for question in station.questions
        ],
    }


def assemble(result: AssessmentResult, station: Station, submission: Optional[Submission] = None) -> Dict[str, Any]:
    """Merge generated marks with the station's fixed reference answers.

    Reference answers are copied from the catalog under ``model_<qid>_bullets``
    and ``model_<qid>_full`` so callers never depend on the station id.
    """

    payload: Dict[str, Any] = {
        "station": station_block(station),
        "candidate": (submission.candidate_name if submission else "") or "Candidate",
    }
    payload.update(result.scores)
    payload["overall"] = result.overall
    for question in station.questions:
        payload[feedback_key(question.id)] = result.feedback[question.id]
    for question in station.questions:
        payload[f"model_{question.id}_bullets"] = list(question.reference.bullets)
        payload[f"model_{question.id}_full"] = question.reference.full
    return payload


def _body(error: str, details: Any = None, raw: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    if raw is not None:
        body["raw"] = raw
    return body


def error_response(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """Translate a pipeline failure into ``(status_code, json_body)``."""

    if isinstance(exc, ValidationError):
        details = {"missing": exc.missing} if exc.missing else None
        return 400, _body(exc.message, details)
    if isinstance(exc, ConfigurationError):
        return 500, _body(str(exc))
    if isinstance(exc, TransportError):
        return 500, _body("Generation request failed (network/runtime).", exc.detail)
    if isinstance(exc, ServiceError):
        status = exc.status_code if exc.status_code >= 400 else 500
        return status, _body("Generation service request failed.", exc.body)
    if isinstance(exc, NoOutputError):
        return 500, _body("No text returned from model.", exc.envelope)
    if isinstance(exc, SchemaError):
        details: Dict[str, Any] = {"kind": exc.kind}
        if exc.field is not None:
            details["field"] = exc.field
        if exc.reason:
            details["reason"] = exc.reason
        message = "Invalid model JSON" if exc.kind == "unparseable" else "Model output violated the marking contract"
        return 500, _body(message, details, exc.raw)
    if isinstance(exc, (MarkingError, LlmGatewayError)):
        return 500, _body(str(exc))
    return 500, _body(UNEXPECTED_ERROR, exc.__class__.__name__)


__all__ = ["UNEXPECTED_ERROR", "assemble", "error_response", "station_block"]
