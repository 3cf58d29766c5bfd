import asyncio

import pytest

from braindump.errors import InputValidationError
from braindump.models import EventItem, ProcessOptions, TodoItem
from orchestration.pipeline import parse_options, process_text


def test_item_empty_title():
    with pytest.raises(Exception):
        TodoItem(title="")


def test_item_blank_title():
    with pytest.raises(Exception):
        EventItem(title="   ")


def test_item_title_too_long():
    with pytest.raises(Exception):
        TodoItem(title="x" * 141)


def test_item_unknown_priority():
    with pytest.raises(Exception):
        TodoItem(title="Pay rent", priority="medium")


@pytest.mark.parametrize(
    "options",
    [
        {},
        {"userId": ""},
        {"userId": "u1", "timezone": "Mars/Olympus_Mons"},
        {"userId": "u1", "maxItems": 0},
        {"userId": "u1", "maxItems": 21},
        {"userId": "u1", "nowISO": "next tuesday"},
    ],
)
def test_invalid_options_are_rejected(options):
    with pytest.raises(InputValidationError):
        parse_options(options)


def test_options_must_be_a_mapping():
    with pytest.raises(InputValidationError):
        parse_options(["userId", "u1"])


def test_validation_message_names_the_field():
    with pytest.raises(InputValidationError) as exc:
        parse_options({"userId": "u1", "maxItems": 99})
    assert "maxItems" in str(exc.value)


def test_options_instance_passes_through():
    opts = ProcessOptions(userId="u1")
    assert parse_options(opts) is opts


@pytest.mark.parametrize("text", [None, 42, b"buy milk", ["buy milk"]])
def test_non_string_input_is_rejected(text, options):
    with pytest.raises(InputValidationError):
        asyncio.run(process_text(text, options))


def test_input_error_is_a_value_error(options):
    with pytest.raises(ValueError):
        asyncio.run(process_text(42, options))


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t", "...", "12345"])
def test_empty_or_noise_input_returns_empty_result(run, text):
    result = run(text)
    assert result.items == []
    assert result.followups == []
    assert result.suggestion.inferred_type == "mixed"
    assert result.suggestion.confidence == 0.0


def test_very_long_input_is_capped(run):
    text = " ".join(f"Call person{i}." for i in range(60))
    result = run(text)
    assert len(result.items) == 20
