from __future__ import annotations  # Scoring policy shared by the compiler and validator

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OverallMode = Literal["model-reported", "sum-scaled"]

DEFAULT_DOMAINS = ("empathy", "communication", "ethics", "insight")

# Top-level keys and key prefixes the assembled payload already uses.
RESERVED_KEYS = ("overall", "station", "candidate")
RESERVED_PREFIXES = ("feedback_", "model_")


class WordTargets(BaseModel):  # Feedback length targets per question class
    model_config = ConfigDict(frozen=True)

    main: str = "60-100"
    followup: str = "30-60"


class ScoringConfig(BaseModel):  # Score bounds and overall derivation policy
    model_config = ConfigDict(frozen=True)

    domains: List[str] = Field(default_factory=lambda: list(DEFAULT_DOMAINS), min_length=1)
    domain_min: int = 0
    domain_max: int = 10
    overall_min: int = 0
    overall_max: int = 10
    overall_mode: OverallMode = "sum-scaled"
    word_targets: WordTargets = Field(default_factory=WordTargets)

    @field_validator("domains")
    @classmethod
    def _unique_domains(cls, value: List[str]) -> List[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("domain names must be non-empty")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("domain names must be unique")
        for item in cleaned:
            if item in RESERVED_KEYS or item.startswith(RESERVED_PREFIXES):
                raise ValueError(f"domain name '{item}' collides with a result key")
        return cleaned

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "ScoringConfig":
        if self.domain_min >= self.domain_max:
            raise ValueError("domain_min must be below domain_max")
        if self.overall_min >= self.overall_max:
            raise ValueError("overall_min must be below overall_max")
        return self

    @property
    def sum_min(self) -> int:
        return self.domain_min * len(self.domains)

    @property
    def sum_max(self) -> int:
        return self.domain_max * len(self.domains)


__all__ = ["DEFAULT_DOMAINS", "RESERVED_KEYS", "RESERVED_PREFIXES", "OverallMode", "ScoringConfig", "WordTargets"]
