"""Locate the generated text inside a response envelope.

The envelope shape differs between service versions and API styles, so
extraction is an ordered list of small strategies. The first one that yields
non-empty text wins; ``None`` means no payload was found.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

TEXT_PART_TYPES = frozenset({"output_text", "text"})

Strategy = Callable[[Any], Optional[str]]


def _non_empty(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _items(value: Any) -> Iterable[Any]:
    return value if isinstance(value, list) else ()


def from_output_items(envelope: Any) -> Optional[str]:  # output[].content[].text
    if not isinstance(envelope, dict):
        return None
    for item in _items(envelope.get("output")):
        if not isinstance(item, dict):
            continue
        for part in _items(item.get("content")):
            if not isinstance(part, dict) or part.get("type", "output_text") not in TEXT_PART_TYPES:
                continue
            text = _non_empty(part.get("text"))
            if text is not None:
                return text
    return None


def from_chat_choices(envelope: Any) -> Optional[str]:  # choices[].message.content
    if not isinstance(envelope, dict):
        return None
    for choice in _items(envelope.get("choices")):
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            continue
        content = message.get("content")
        text = _non_empty(content)
        if text is not None:
            return text
        for part in _items(content):
            if isinstance(part, dict) and part.get("type", "text") in TEXT_PART_TYPES:
                text = _non_empty(part.get("text"))
                if text is not None:
                    return text
    return None


def from_output_text(envelope: Any) -> Optional[str]:  # top-level convenience field
    if not isinstance(envelope, dict):
        return None
    return _non_empty(envelope.get("output_text"))


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("output_items", from_output_items),
    ("chat_choices", from_chat_choices),
    ("output_text", from_output_text),
)


def extract_text(envelope: Any, strategies: Sequence[Tuple[str, Strategy]] = STRATEGIES) -> Optional[str]:
    for _name, strategy in strategies:
        text = strategy(envelope)
        if text is not None:
            return text
    return None


def matching_strategy(envelope: Any, strategies: Sequence[Tuple[str, Strategy]] = STRATEGIES) -> Optional[str]:
    """Name of the strategy that would extract text, for logging."""

    for name, strategy in strategies:
        if strategy(envelope) is not None:
            return name
    return None


__all__ = [
    "STRATEGIES",
    "extract_text",
    "from_chat_choices",
    "from_output_items",
    "from_output_text",
    "matching_strategy",
]
