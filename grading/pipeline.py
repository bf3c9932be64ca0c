"""End-to-end marking pipeline.

normalize -> catalog lookup -> compile -> generate -> extract -> validate ->
assemble. Each stage either returns its value or raises a single typed
failure; ``handle`` is the only place those failures become a response.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from config.routes import route_from_settings
from config.scoring import ScoringConfig
from config.settings import Settings
from llm_gateway import GenerationClient, HttpClient, LlmGatewayError, extract_text, matching_strategy
from observability import log_event, span
from stations.catalog import StationCatalog, StationNotFound
from stations.models import Station

from .assembly import assemble, error_response
from .errors import ConfigurationError, MarkingError, NoOutputError, ValidationError
from .instructions import compile_request
from .submission import normalize, parse_body, resolve_station_id
from .types import GradingRequest
from .validation import validate_result

logger = logging.getLogger(__name__)


class Generator(Protocol):  # Anything that can run a compiled request
    def invoke(self, request: GradingRequest) -> Any: ...


class MarkingPipeline:
    """Stateless request handler; safe to share across concurrent requests."""

    def __init__(
        self,
        catalog: StationCatalog,
        client: Optional[Generator],
        *,
        api_key: Optional[str],
        scoring: Optional[ScoringConfig] = None,
        require_all_answers: bool = False,
        default_station_id: Optional[str] = None,
    ):
        self.catalog = catalog
        self.client = client
        self.api_key = api_key
        self.scoring = scoring or catalog.scoring
        self.require_all_answers = require_all_answers
        self.default_station_id = default_station_id or catalog.default_id

    def station_for(self, body: Dict[str, Any]) -> Station:
        station_id = resolve_station_id(body, self.default_station_id)
        try:
            return self.catalog.lookup(station_id)
        except StationNotFound as exc:
            raise ValidationError(f"Invalid stationId: {exc}") from exc

    def compile(self, body: Dict[str, Any]) -> GradingRequest:
        """Normalize and compile without calling the generation service."""

        station = self.station_for(body)
        submission = normalize(body, station, require_all=self.require_all_answers)
        return compile_request(submission, station, self.scoring)

    def run(
        self,
        body: Dict[str, Any],
        *,
        events: Optional[List[Dict[str, object]]] = None,
        request_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        events = events if events is not None else []
        request_id = request_id or uuid.uuid4().hex
        if not self.api_key or self.client is None:
            raise ConfigurationError("Missing OPENAI_API_KEY in environment variables.")

        station = self.station_for(body)
        with span(events, "normalize"):
            submission = normalize(body, station, require_all=self.require_all_answers)
        with span(events, "compile"):
            request = compile_request(submission, station, self.scoring)
        with span(events, "generate"):
            envelope = self.client.invoke(request)
        with span(events, "extract"):
            text = extract_text(envelope)
        if text is None:
            raise NoOutputError(envelope)
        log_event(
            "marking.extracted",
            request_id,
            station=station.id,
            stage="extract",
            strategy=matching_strategy(envelope),
            chars=len(text),
        )
        with span(events, "validate"):
            result = validate_result(text, request.contract)
        return assemble(result, station, submission)

    def handle(self, raw_body: Union[bytes, str, None]) -> Tuple[int, Dict[str, Any]]:
        """Run the pipeline on a raw body and always return a JSON-able response."""

        request_id = uuid.uuid4().hex
        events: List[Dict[str, object]] = []
        try:
            if not self.api_key or self.client is None:
                raise ConfigurationError("Missing OPENAI_API_KEY in environment variables.")
            body = parse_body(raw_body)
            payload = self.run(body, events=events, request_id=request_id)
        except Exception as exc:  # noqa: BLE001 - every failure becomes a JSON body
            if not isinstance(exc, (MarkingError, LlmGatewayError)):
                logger.exception("Unexpected marking failure request=%s", request_id)
            status, error_body = error_response(exc)
            log_event(
                "marking.failed",
                request_id,
                outcome="error",
                status=status,
                error=exc.__class__.__name__,
                message=error_body["error"],
                spans=events,
            )
            return status, error_body
        log_event(
            "marking.completed",
            request_id,
            outcome="ok",
            status=200,
            station=payload["station"]["id"],
            overall=payload["overall"],
            spans=events,
        )
        return 200, payload


def build_pipeline(cfg: Settings, catalog: StationCatalog, *, http: Optional[HttpClient] = None) -> MarkingPipeline:
    """Wire settings into a pipeline; the credential is read here, once per build."""

    api_key = cfg.api_key()
    client = GenerationClient(route_from_settings(cfg), api_key=api_key, client=http) if api_key else None
    return MarkingPipeline(
        catalog,
        client,
        api_key=api_key,
        require_all_answers=cfg.REQUIRE_ALL_ANSWERS,
        default_station_id=cfg.DEFAULT_STATION_ID,
    )


__all__ = ["Generator", "MarkingPipeline", "build_pipeline"]
