"""Station marking: normalize, compile, generate, validate, assemble."""
from .errors import ConfigurationError, MarkingError, NoOutputError, SchemaError, ValidationError
from .types import AssessmentResult, GradingRequest, OutputContract, Submission

__all__ = [
    "AssessmentResult",
    "ConfigurationError",
    "GradingRequest",
    "MarkingError",
    "NoOutputError",
    "OutputContract",
    "SchemaError",
    "Submission",
    "ValidationError",
]
