"""Configuration package for the station marking service."""
from .routes import GenerationRoute, route_from_settings
from .scoring import DEFAULT_DOMAINS, OverallMode, ScoringConfig, WordTargets
from .settings import Settings, settings

__all__ = [
    "DEFAULT_DOMAINS",
    "GenerationRoute",
    "OverallMode",
    "ScoringConfig",
    "Settings",
    "WordTargets",
    "route_from_settings",
    "settings",
]
