"""Immutable station definitions loaded from the catalog file."""
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QUESTION_IDS = ("main", "f1", "f2", "f3")


class Timings(BaseModel):
    model_config = ConfigDict(frozen=True)

    reading: str
    response: str
    followups: str


class LengthPolicy(BaseModel):  # Target length for the fixed reference answers
    model_config = ConfigDict(frozen=True)

    max_bullets: int = Field(default=8, ge=1)
    full_words: str = "120-250"


class ReferenceAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    bullets: Tuple[str, ...] = Field(min_length=1)
    full: str = Field(min_length=1)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    prompt: str = Field(min_length=1)
    reference: ReferenceAnswer
    length_policy: LengthPolicy = Field(default_factory=LengthPolicy)

    @field_validator("id")
    @classmethod
    def _known_id(cls, value: str) -> str:
        if value not in QUESTION_IDS:
            raise ValueError(f"question id must be one of {', '.join(QUESTION_IDS)}")
        return value

    @model_validator(mode="after")
    def _bullets_within_policy(self) -> "Question":
        if len(self.reference.bullets) > self.length_policy.max_bullets:
            raise ValueError(
                f"question {self.id} has {len(self.reference.bullets)} bullets; "
                f"limit is {self.length_policy.max_bullets}"
            )
        return self


class Station(BaseModel):
    """A fixed interview scenario and its reference answers.

    Question order is the order used everywhere downstream: in the compiled
    instruction, in the output contract and in the final payload.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    description: str
    timings: Timings
    questions: Tuple[Question, ...] = Field(min_length=1, max_length=4)

    @model_validator(mode="after")
    def _question_layout(self) -> "Station":
        ids = [question.id for question in self.questions]
        if ids[0] != "main":
            raise ValueError(f"station {self.id}: first question must be 'main'")
        if len(set(ids)) != len(ids):
            raise ValueError(f"station {self.id}: duplicate question ids")
        if ids != sorted(ids, key=QUESTION_IDS.index):
            raise ValueError(f"station {self.id}: questions must be ordered main, f1, f2, f3")
        return self

    @property
    def question_ids(self) -> Tuple[str, ...]:
        return tuple(question.id for question in self.questions)

    def question(self, question_id: str) -> Question:
        for question in self.questions:
            if question.id == question_id:
                return question
        raise KeyError(question_id)


__all__ = ["LengthPolicy", "QUESTION_IDS", "Question", "ReferenceAnswer", "Station", "Timings"]
