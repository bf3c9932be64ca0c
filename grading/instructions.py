from __future__ import annotations  # Deterministic instruction and schema compiler

from typing import Any, Dict, List

from config.scoring import ScoringConfig
from stations.models import Station

from .types import NO_ANSWER, GradingRequest, OutputContract, Submission

SYSTEM_PROMPT = "\n".join(
    [
        "You are a UK medical school MMI examiner marking one station under a fixed rubric.",
        "Mark only what the candidate actually wrote; never invent content on their behalf.",
        "Do not write model answers. They are supplied to the candidate separately.",
        "Return STRICT JSON only (no markdown, no extra text).",
    ]
)


def build_contract(station: Station, scoring: ScoringConfig) -> OutputContract:
    return OutputContract(
        domains=tuple(scoring.domains),
        domain_min=scoring.domain_min,
        domain_max=scoring.domain_max,
        overall_min=scoring.overall_min,
        overall_max=scoring.overall_max,
        overall_mode=scoring.overall_mode,
        question_ids=station.question_ids,
    )


def build_output_schema(contract: OutputContract) -> Dict[str, Any]:
    """JSON schema mirroring the textual contract, for schema-constrained modes."""

    properties: Dict[str, Any] = {}
    for domain in contract.domains:
        properties[domain] = {
            "type": "number",
            "minimum": contract.domain_min,
            "maximum": contract.domain_max,
        }
    if contract.overall_required:
        properties["overall"] = {
            "type": "number",
            "minimum": contract.overall_min,
            "maximum": contract.overall_max,
        }
    for key in contract.feedback_keys:
        properties[key] = {"type": "string"}
    return {
        "type": "object",
        "properties": properties,
        "required": list(contract.required_keys),
        "additionalProperties": False,
    }


def _contract_block(contract: OutputContract) -> List[str]:
    lines = ["{"]
    keys = contract.required_keys
    for index, key in enumerate(keys):
        kind = '"string"' if key.startswith("feedback_") else "number"
        comma = "," if index < len(keys) - 1 else ""
        lines.append(f'  "{key}": {kind}{comma}')
    lines.append("}")
    return lines


def _overall_rule(contract: OutputContract) -> str:
    span = f"{contract.overall_min}–{contract.overall_max}"
    if contract.overall_required:
        return (
            f"overall ({span}): the sum of the domain scores scaled onto {span}, "
            "rounded to the nearest whole number"
        )
    return f"no overall score: it is calculated from your domain scores onto {span}"


def compile_request(submission: Submission, station: Station, scoring: ScoringConfig) -> GradingRequest:
    """Render the grading instruction for one submission.

    Identical inputs always yield byte-identical prompts. Follow-ups left
    blank are rendered with an explicit marker so every question is graded.
    """

    contract = build_contract(station, scoring)
    candidate = submission.candidate_name or "Candidate"
    labels = ", ".join(question.label for question in station.questions)
    timings = station.timings

    lines: List[str] = [
        "Station:",
        f"Title: {station.title}",
        f"Timings: Reading {timings.reading}, Response {timings.response}, Follow-ups {timings.followups}",
        f"Description: {station.description}",
        "",
        "Questions:",
    ]
    for question in station.questions:
        prompt = submission.custom_prompts.get(question.id, question.prompt)
        lines.append(f"{question.label}: {prompt}")

    lines.extend(["", f"Candidate ({candidate}) answers:"])
    for question in station.questions:
        lines.append(f"{question.label} ANSWER:")
        lines.append(submission.answer(question.id) or NO_ANSWER)
        lines.append("")

    span = f"{contract.domain_min}–{contract.domain_max}"
    lines.append(f"Mark using {len(contract.domains)} domains scored {span} each:")
    lines.extend(f"- {domain}" for domain in contract.domains)

    targets = scoring.word_targets
    lines.extend(
        [
            "",
            "Give:",
            f"1) domain scores ({span} each)",
            f"2) {_overall_rule(contract)}",
            f"3) feedback for each question separately ({labels}). Keep each section concise and actionable.",
            f"Feedback length: about {targets.main} words for MAIN and {targets.followup} words for each follow-up.",
            f'If an answer reads "{NO_ANSWER}", mark it as unanswered and say so in its feedback.',
            "",
            "Return STRICT JSON only (no markdown, no extra text) in this exact schema:",
        ]
    )
    lines.extend(_contract_block(contract))

    return GradingRequest(
        station_id=station.id,
        system_prompt=SYSTEM_PROMPT,
        user_prompt="\n".join(lines),
        contract=contract,
        output_schema=build_output_schema(contract),
    )


__all__ = ["SYSTEM_PROMPT", "build_contract", "build_output_schema", "compile_request"]
