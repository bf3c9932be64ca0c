from __future__ import annotations  # Generation service request gateway

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

import httpx

from config.routes import GenerationRoute


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: Optional[float]) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class PromptRequest(Protocol):  # What the gateway needs from a compiled request
    @property
    def messages(self) -> List[Dict[str, str]]: ...

    @property
    def output_schema(self) -> Dict[str, Any]: ...

    @property
    def schema_name(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class TransportError(LlmGatewayError):
    """The outbound call could not be completed."""

    def __init__(self, detail: str):
        super().__init__(f"Generation request failed (network/runtime): {detail}")
        self.detail = detail


class ServiceError(LlmGatewayError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, body: Any):
        super().__init__(f"Generation service returned status {status_code}")
        self.status_code = status_code
        self.body = body


class GenerationClient:
    """Single-shot client for the text generation service.

    The client reports whether the call succeeded and hands back the decoded
    envelope untouched; locating the text inside it is ``envelope``'s job.
    """

    def __init__(self, route: GenerationRoute, *, api_key: str, client: Optional[HttpClient] = None):
        self.route = route
        self._api_key = api_key
        self._client = client

    def build_payload(self, request: PromptRequest) -> Dict[str, Any]:
        route = self.route
        messages = _normalize_messages(request.messages)
        payload: Dict[str, Any] = {"model": route.model}
        if route.api_style == "chat":
            payload["messages"] = messages
            if route.use_schema:
                payload["response_format"] = {
                    "type": "json_schema",
                    "json_schema": {"name": request.schema_name, "schema": request.output_schema, "strict": True},
                }
        else:
            payload["input"] = messages
            if route.use_schema:
                payload["text"] = {
                    "format": {
                        "type": "json_schema",
                        "name": request.schema_name,
                        "schema": request.output_schema,
                        "strict": True,
                    }
                }
        return payload

    def invoke(self, request: PromptRequest) -> Any:
        route = self.route
        payload = self.build_payload(request)
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {self._api_key}"}
        headers.update(route.extra_headers)
        preview = _preview(payload.get("input") or payload.get("messages") or [])
        if len(preview) > 120:
            preview = preview[:117] + "..."
        logger.info(
            "LLM request send route=%s model=%s style=%s schema=%s preview=%s",
            route.name,
            route.model,
            route.api_style,
            route.use_schema,
            preview,
        )
        try:
            response, close_cb = _post(route.url, payload, headers, route.timeout_s, self._client)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.error("LLM transport failure: %s", exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        try:
            body = _decode(response)
        finally:
            _close_safely(close_cb)
        if response.status_code >= 400:
            logger.error("LLM error status: %s", response.status_code)
            raise ServiceError(response.status_code, body)
        if not isinstance(body, (dict, list)):
            logger.error("LLM payload was not JSON")
            raise ServiceError(response.status_code, body)
        logger.info("LLM request done route=%s model=%s status=%s", route.name, route.model, response.status_code)
        return body


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: Optional[float], client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except BaseException:
        http_client.close()
        raise
    return response, http_client.close


def _decode(response: HttpResponse) -> Any:  # JSON body when possible, raw text otherwise
    try:
        return response.json()
    except ValueError:
        return response.text


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> List[Dict[str, str]]:  # Ensure message payload shape
    normalized: List[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # Build preview string for logging
    for message in messages:
        if message.get("role") == "system":
            continue
        text = message.get("content", "").strip()
        if text:
            return text.splitlines()[0]
    return ""
