"""Parse, repair and validate generated assessment text."""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Optional

from .errors import SchemaError
from .types import AssessmentResult, Number, OutputContract

logger = logging.getLogger(__name__)


def parse_payload(raw: str) -> Any:
    """Strict JSON parse, falling back to the outermost ``{...}`` substring."""

    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        pass
    start, end = raw.find("{"), raw.rfind("}")
    if start == -1 or end <= start:
        raise SchemaError("unparseable", raw=raw, reason="no JSON object found")
    try:
        parsed = json.loads(raw[start : end + 1])
    except json.JSONDecodeError as exc:
        raise SchemaError("unparseable", raw=raw, reason=exc.msg) from exc
    except (ValueError, RecursionError) as exc:  # oversized integer literals, runaway nesting
        raise SchemaError("unparseable", raw=raw, reason=exc.__class__.__name__) from exc
    logger.info("Recovered JSON object from wrapped model output (%d chars dropped)", len(raw) - (end - start + 1))
    return parsed


def _number(data: Dict[str, Any], key: str, low: int, high: int, raw: str) -> Number:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError("contract-violation", raw=raw, field=key, reason="not a number")
    if not math.isfinite(value):
        raise SchemaError("contract-violation", raw=raw, field=key, reason="not finite")
    if value < low or value > high:
        raise SchemaError("contract-violation", raw=raw, field=key, reason=f"{value} outside {low}..{high}")
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_overall(scores: Dict[str, Number], contract: OutputContract) -> int:
    """Map the domain-score sum linearly onto the overall range."""

    count = len(contract.domains)
    sum_min = contract.domain_min * count
    sum_max = contract.domain_max * count
    total = sum(scores[domain] for domain in contract.domains)
    span = contract.overall_max - contract.overall_min
    return _round_half_up(contract.overall_min + (total - sum_min) * span / (sum_max - sum_min))


def validate_result(raw: str, contract: OutputContract) -> AssessmentResult:
    """Turn extracted model text into an AssessmentResult.

    Out-of-range scores are rejected, never clamped.
    """

    data = parse_payload(raw)
    if not isinstance(data, dict):
        raise SchemaError("contract-violation", raw=raw, field="<root>", reason="expected a JSON object")

    for key in contract.required_keys:
        if key not in data:
            raise SchemaError("contract-violation", raw=raw, field=key, reason="missing")

    scores = {
        domain: _number(data, domain, contract.domain_min, contract.domain_max, raw)
        for domain in contract.domains
    }

    feedback: Dict[str, str] = {}
    for qid, key in zip(contract.question_ids, contract.feedback_keys):
        text = data[key]
        if not isinstance(text, str) or not text.strip():
            raise SchemaError("contract-violation", raw=raw, field=key, reason="expected non-empty text")
        feedback[qid] = text.strip()

    reported: Optional[Number] = None
    if contract.overall_required:
        reported = _number(data, "overall", contract.overall_min, contract.overall_max, raw)
        overall: Number = reported
    else:
        candidate = data.get("overall")
        if isinstance(candidate, (int, float)) and not isinstance(candidate, bool):
            reported = candidate
        overall = scaled_overall(scores, contract)
        if reported is not None and reported != overall:
            logger.info("Replacing model-reported overall %s with derived %s", reported, overall)

    return AssessmentResult(scores=scores, overall=overall, feedback=feedback, reported_overall=reported)


__all__ = ["parse_payload", "scaled_overall", "validate_result"]
