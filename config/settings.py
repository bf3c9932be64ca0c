"""Application settings and configuration management."""
from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATIONS_PATH = Path(__file__).resolve().parents[1] / "stations" / "data" / "stations.yaml"


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    OPENAI_API_KEY: Optional[str] = None

    GENERATION_MODEL: str = "gpt-5-mini"
    GENERATION_BASE_URL: str = "https://api.openai.com/v1"
    GENERATION_ENDPOINT: str = "/responses"
    GENERATION_API_STYLE: Literal["responses", "chat"] = "responses"
    GENERATION_TIMEOUT_S: Optional[float] = Field(default=None, gt=0)
    GENERATION_USE_SCHEMA: bool = False

    STATIONS_PATH: str = str(DEFAULT_STATIONS_PATH)
    DEFAULT_STATION_ID: Optional[str] = None
    REQUIRE_ALL_ANSWERS: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)

    def api_key(self) -> Optional[str]:
        key = (self.OPENAI_API_KEY or "").strip()
        return key or None


settings = Settings()
