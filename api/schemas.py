"""Pydantic schemas for the marking API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MarkReq(BaseModel):  # Documented request shape; historical aliases are also accepted
    stationId: Optional[str] = None
    candidateName: Optional[str] = None
    answers: Dict[str, str] = Field(default_factory=dict)
    customPrompts: Optional[Dict[str, str]] = None


class ErrorResp(BaseModel):
    error: str
    details: Optional[Any] = None
    raw: Optional[str] = None


class QuestionSummary(BaseModel):
    id: str
    label: str
    prompt: str


class StationSummary(BaseModel):
    id: str
    title: str
    timings: Dict[str, str]
    questions: List[QuestionSummary] = Field(default_factory=list)
