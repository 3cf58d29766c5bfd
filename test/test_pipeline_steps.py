import asyncio
import importlib
from datetime import datetime
from zoneinfo import ZoneInfo

from braindump.models import EventItem, TodoItem
from llm.llm_client import LLMClient

IST = ZoneInfo("Asia/Kolkata")


def test_step1_todo_with_day_reference(run) -> None:
    result = run("I need to buy milk, eggs and bread tomorrow")

    [todo] = result.items
    assert isinstance(todo, TodoItem)
    assert todo.title == "Buy milk, eggs and bread"
    assert "tomorrow" in todo.when_text
    assert todo.due == datetime(2024, 1, 16, 9, 0, tzinfo=IST)
    assert result.suggestion.inferred_type == "todo"
    assert result.followups == []


def test_step2_concrete_event(run) -> None:
    result = run("Meeting with Sarah at 3pm tomorrow")

    assert result.cleaned_text == "Meeting with Sarah at 3 pm tomorrow."
    [event] = result.items
    assert isinstance(event, EventItem)
    assert event.title == "Meeting with Sarah"
    assert event.start == datetime(2024, 1, 16, 15, 0, tzinfo=IST)
    assert event.fuzzy is False
    assert result.followups == []
    assert result.suggestion.inferred_type == "event"


def test_step3_journal_entry_yields_nothing(run) -> None:
    result = run("I feel really tired today, everything is overwhelming")

    assert result.items == []
    assert result.followups == []
    assert result.suggestion.inferred_type == "mixed"
    assert result.suggestion.confidence == 0


def test_step4_vague_todo(run) -> None:
    [todo] = run("Call the dentist sometime soon").items

    assert isinstance(todo, TodoItem)
    assert todo.title == "Call the dentist"
    assert todo.due is None
    assert "soon" in todo.when_text


def test_step5_reminder_without_time_asks_followup(run) -> None:
    result = run("Reminder tomorrow")

    [event] = result.items
    assert isinstance(event, EventItem)
    assert event.title == "Reminder"
    assert event.fuzzy is True
    assert result.followups == ["What time is 'tomorrow'?"]


def test_step6_items_are_capped_in_order(run) -> None:
    result = run("Buy milk. Call mom. Email Sarah. Book flights. Pay rent.", maxItems=2)

    assert [i.title for i in result.items] == ["Buy milk", "Call mom"]
    assert result.suggestion.confidence == 1.0


def test_step6_event_fan_out(run) -> None:
    result = run("Call Monday or Tuesday")

    assert [i.type for i in result.items] == ["event", "event"]
    assert [i.start.date().isoformat() for i in result.items] == ["2024-01-15", "2024-01-16"]
    assert len(result.followups) == 2


def test_step6_mixed_input(run) -> None:
    result = run("Buy milk. Meeting with Sarah at 3pm tomorrow.")

    assert [i.type for i in result.items] == ["todo", "event"]
    assert result.suggestion.inferred_type == "mixed"
    assert result.suggestion.confidence == 0.5


def test_step6_vague_week_never_gets_due(run) -> None:
    [todo] = run("Plan the offsite next week").items
    assert todo.due is None
    assert todo.title == "Plan the offsite"


def test_step6_project_id_is_echoed(run) -> None:
    [todo] = run("Buy milk", projectId="p-42").items
    assert todo.project_id == "p-42"


def test_step2_sync_cleaner_output_is_used(run) -> None:
    result = run("call mom five today", cleaner=lambda text: "Call mom at 5 pm today.")

    assert result.cleaned_text == "Call mom at 5 pm today."
    [event] = result.items
    assert event.start == datetime(2024, 1, 15, 17, 0, tzinfo=IST)


def test_step2_async_cleaner_is_awaited(run) -> None:
    async def cleaner(text: str) -> str:
        await asyncio.sleep(0)
        return text.upper()

    assert run("buy milk", cleaner=cleaner).cleaned_text == "BUY MILK."


def test_step2_failing_cleaner_falls_back(run) -> None:
    def boom(text: str) -> str:
        raise RuntimeError("cleaner down")

    result = run("buy milk", cleaner=boom)
    assert result.cleaned_text == "Buy milk."
    assert [i.title for i in result.items] == ["Buy milk"]


def test_step2_blank_cleaner_output_falls_back(run) -> None:
    assert run("buy milk", cleaner=lambda text: "   ").cleaned_text == "Buy milk."
    assert run("buy milk", cleaner=lambda text: None).cleaned_text == "Buy milk."


def test_step2_llm_client_as_cleaner(run, fake_provider_factory) -> None:
    provider = fake_provider_factory("Call mom at 5 pm today.")

    result = run("call mom at five today", cleaner=LLMClient(provider=provider))

    assert len(provider.calls) == 1
    assert result.cleaned_text == "Call mom at 5 pm today."
    [event] = result.items
    assert event.title == "Call mom"
    assert event.start == datetime(2024, 1, 15, 17, 0, tzinfo=IST)


def test_step4_failing_fragment_is_isolated(run, monkeypatch) -> None:
    pipeline_mod = importlib.import_module("orchestration.pipeline")
    real_classify = pipeline_mod.classify

    def flaky(fragment, candidates):
        if fragment.startswith("Call"):
            raise RuntimeError("classifier bug")
        return real_classify(fragment, candidates)

    monkeypatch.setattr(pipeline_mod, "classify", flaky, raising=True)

    result = run("Buy milk. Call mom. Pay rent.")
    assert [i.title for i in result.items] == ["Buy milk", "Pay rent"]


def test_step7_wire_format_uses_camel_case(run) -> None:
    wire = run("I need to buy milk, eggs and bread tomorrow", projectId="p-1").to_wire()

    assert set(wire) == {"cleaned_text", "items", "suggestion", "followups"}
    item = wire["items"][0]
    assert item["type"] == "todo"
    assert item["whenText"] == "tomorrow"
    assert item["projectId"] == "p-1"
    assert item["isDraft"] is True and item["isPrivate"] is True
    assert item["due"] == "2024-01-16T09:00:00+05:30"
    assert wire["suggestion"]["inferredType"] == "todo"


def test_step6_dated_fragments_become_events(run) -> None:
    result = run("Dentist March 5. Party on Saturday. Flight to Delhi on Jan 20. Interview on Friday.")

    assert [i.type for i in result.items] == ["event"] * 4
    assert [i.start.date().isoformat() for i in result.items] == [
        "2024-03-05", "2024-01-20", "2024-01-20", "2024-01-19",
    ]
    assert all(i.fuzzy for i in result.items)
    assert len(result.followups) == 4
    assert result.suggestion.inferred_type == "event"


def test_step6_bare_hour_event(run) -> None:
    [event] = run("Meeting with Sarah at 3 tomorrow").items

    assert event.title == "Meeting with Sarah"
    assert event.start == datetime(2024, 1, 16, 15, 0, tzinfo=IST)
    assert event.fuzzy is False


def test_step6_journal_clause_before_task_is_dropped(run) -> None:
    result = run("I read a good book yesterday and I need to call mom")

    assert "good. Book" not in result.cleaned_text
    assert [i.title for i in result.items] == ["Call mom"]
