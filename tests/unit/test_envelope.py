import pytest

from llm_gateway.envelope import (
    extract_text,
    from_chat_choices,
    from_output_items,
    from_output_text,
    matching_strategy,
)

NESTED = {
    "output": [
        {"type": "reasoning", "summary": []},
        {"type": "message", "content": [{"type": "refusal", "refusal": "no"}, {"type": "output_text", "text": "{\"a\": 1}"}]},
    ]
}
CONVENIENCE = {"output": [], "output_text": "{\"b\": 2}"}
CHAT = {"choices": [{"index": 0, "message": {"role": "assistant", "content": "{\"c\": 3}"}}]}


def test_nested_message_parts():
    assert extract_text(NESTED) == "{\"a\": 1}"
    assert matching_strategy(NESTED) == "output_items"


def test_top_level_convenience_field():
    assert extract_text(CONVENIENCE) == "{\"b\": 2}"
    assert matching_strategy(CONVENIENCE) == "output_text"


@pytest.mark.parametrize(
    "envelope",
    [
        {},
        {"output": [{"type": "message", "content": [{"type": "output_text", "text": "   "}]}]},
        {"output": "not a list", "output_text": ""},
        {"output": [None, 3, {"content": None}]},
        [],
        "plain string",
        None,
    ],
)
def test_absent_when_no_text(envelope):
    assert extract_text(envelope) is None
    assert matching_strategy(envelope) is None


def test_structured_items_take_precedence_over_convenience_field():
    envelope = dict(NESTED, output_text="ignored")
    assert extract_text(envelope) == "{\"a\": 1}"


def test_chat_choices_string_and_parts():
    assert extract_text(CHAT) == "{\"c\": 3}"
    parts = {"choices": [{"message": {"content": [{"type": "text", "text": "part text"}]}}]}
    assert from_chat_choices(parts) == "part text"


def test_strategies_are_independent():
    assert from_output_items(CONVENIENCE) is None
    assert from_output_text(NESTED) is None
    assert from_chat_choices(NESTED) is None
