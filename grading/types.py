"""Shared type definitions for the marking pipeline."""
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from config.scoring import OverallMode

Number = Union[int, float]

NO_ANSWER = "(no answer provided)"


class Submission(BaseModel):
    station_id: str
    candidate_name: str = ""
    answers: Dict[str, str] = Field(default_factory=dict)
    custom_prompts: Dict[str, str] = Field(default_factory=dict)

    def answer(self, question_id: str) -> str:
        return self.answers.get(question_id, "")


class OutputContract(BaseModel):
    model_config = ConfigDict(frozen=True)

    domains: Tuple[str, ...]
    domain_min: int
    domain_max: int
    overall_min: int
    overall_max: int
    overall_mode: OverallMode
    question_ids: Tuple[str, ...]

    @property
    def overall_required(self) -> bool:
        return self.overall_mode == "model-reported"

    @property
    def feedback_keys(self) -> Tuple[str, ...]:
        return tuple(feedback_key(qid) for qid in self.question_ids)

    @property
    def required_keys(self) -> Tuple[str, ...]:
        keys: List[str] = list(self.domains)
        if self.overall_required:
            keys.append("overall")
        keys.extend(self.feedback_keys)
        return tuple(keys)


class GradingRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    station_id: str
    system_prompt: str
    user_prompt: str
    contract: OutputContract
    output_schema: Dict[str, Any]
    schema_name: str = "station_assessment"

    @property
    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]


class AssessmentResult(BaseModel):
    scores: Dict[str, Number]
    overall: Number
    feedback: Dict[str, str]
    reported_overall: Optional[Number] = None


def feedback_key(question_id: str) -> str:
    return f"feedback_{question_id}"


__all__ = [
    "AssessmentResult",
    "GradingRequest",
    "NO_ANSWER",
    "Number",
    "OutputContract",
    "Submission",
    "feedback_key",
]
