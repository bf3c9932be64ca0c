from __future__ import annotations  # Generation service route configuration

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from .settings import Settings


class GenerationRoute(BaseModel):  # Generation endpoint configuration
    name: str = "station_marking"
    base_url: str
    endpoint: str
    model: str
    api_style: Literal["responses", "chat"] = "responses"
    timeout_s: Optional[float] = Field(default=None, gt=0)
    use_schema: bool = False
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"


def route_from_settings(cfg: Settings) -> GenerationRoute:
    return GenerationRoute(
        base_url=cfg.GENERATION_BASE_URL,
        endpoint=cfg.GENERATION_ENDPOINT,
        model=cfg.GENERATION_MODEL,
        api_style=cfg.GENERATION_API_STYLE,
        timeout_s=cfg.GENERATION_TIMEOUT_S,
        use_schema=cfg.GENERATION_USE_SCHEMA,
    )


__all__ = ["GenerationRoute", "route_from_settings"]
