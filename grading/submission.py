"""Inbound request normalization and validation."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple, Union

from stations.models import Station

from .errors import ValidationError
from .types import Submission

# Logical field -> accepted key paths, highest precedence first. Dotted paths
# address nested objects. The first alias carrying a non-empty value wins.
ALIASES: Dict[str, Tuple[str, ...]] = {
    "stationId": ("stationId", "station_id", "station"),
    "candidateName": ("candidateName", "candidate_name", "name"),
    "answers.main": ("answers.main", "aMain", "answer", "candidate_answer", "candidateAnswer"),
    "answers.f1": ("answers.f1", "a1", "answers.fu1"),
    "answers.f2": ("answers.f2", "a2", "answers.fu2"),
    "answers.f3": ("answers.f3", "a3", "answers.fu3"),
    "customPrompts.main": ("customPrompts.main", "custom_prompts.main", "qMain"),
    "customPrompts.f1": ("customPrompts.f1", "custom_prompts.f1", "q1"),
    "customPrompts.f2": ("customPrompts.f2", "custom_prompts.f2", "q2"),
    "customPrompts.f3": ("customPrompts.f3", "custom_prompts.f3", "q3"),
}

_MISSING = object()


def parse_body(raw: Union[bytes, str, None]) -> Dict[str, Any]:
    """Decode a raw request body into a JSON object."""

    if raw is None:
        return {}
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValidationError("Invalid JSON body.") from exc
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid JSON body.") from exc
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body.")
    return data


def _lookup(body: Dict[str, Any], path: str) -> Any:
    node: Any = body
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _clean(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def resolve(body: Dict[str, Any], field: str) -> Tuple[str, bool]:
    """Return ``(value, declared)`` for a logical field.

    ``declared`` is true when any alias key is present in the body, even if
    every present alias is blank.
    """

    declared = False
    for path in ALIASES[field]:
        value = _lookup(body, path)
        if value is _MISSING or value is None:
            continue
        declared = True
        cleaned = _clean(value)
        if cleaned:
            return cleaned, True
    return "", declared


def resolve_station_id(body: Dict[str, Any], default: str) -> str:
    value, _ = resolve(body, "stationId")
    return value or default


def normalize(body: Dict[str, Any], station: Station, *, require_all: bool = False) -> Submission:
    """Build a Submission for ``station`` or raise ``ValidationError``."""

    answers: Dict[str, str] = {}
    prompts: Dict[str, str] = {}
    missing: List[str] = []

    for question in station.questions:
        qid = question.id
        answer, _ = resolve(body, f"answers.{qid}")
        answers[qid] = answer
        if not answer and (qid == "main" or require_all):
            missing.append(f"answers.{qid}")

        prompt, declared = resolve(body, f"customPrompts.{qid}")
        if declared:
            if prompt:
                prompts[qid] = prompt
            else:
                missing.append(f"customPrompts.{qid}")

    if missing:
        raise ValidationError(_missing_message(missing, require_all), missing=missing)

    candidate, _ = resolve(body, "candidateName")
    return Submission(
        station_id=station.id,
        candidate_name=candidate,
        answers=answers,
        custom_prompts=prompts,
    )


def _missing_message(missing: List[str], require_all: bool) -> str:
    if require_all and any(name.startswith("answers.") for name in missing):
        return "Please fill in ALL answer boxes before generating feedback. Missing: " + ", ".join(missing)
    return "Missing required field(s): " + ", ".join(missing)


__all__ = ["ALIASES", "normalize", "parse_body", "resolve", "resolve_station_id"]
