"""Observability utilities for the marking pipeline."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
