from datetime import date, datetime
from zoneinfo import ZoneInfo

from dates.date_resolver import DateCandidate, resolve_dates

IST = ZoneInfo("Asia/Kolkata")


def _resolve(text, now):
    return resolve_dates(text, now, "Asia/Kolkata")


def test_uc3_clock_time_and_day_merge_into_one_concrete_candidate(now):
    [c] = _resolve("Meeting with Sarah at 3 pm tomorrow", now)
    assert c.start == datetime(2024, 1, 16, 15, 0, tzinfo=IST)
    assert c.fuzzy is False
    assert c.all_day is False
    assert c.when_text == "at 3 pm tomorrow"


def test_uc3_bare_day_defaults_to_morning_and_is_fuzzy(now):
    [c] = _resolve("Reminder tomorrow", now)
    assert c.start == datetime(2024, 1, 16, 9, 0, tzinfo=IST)
    assert c.fuzzy is True
    assert c.all_day is True


def test_uc3_vague_phrase_gives_dateless_candidate(now):
    assert _resolve("Call the dentist sometime soon", now) == [
        DateCandidate(start=None, end=None, all_day=None, when_text="sometime soon", fuzzy=True)
    ]
    [c] = _resolve("Clean the garage this weekend", now)
    assert c.start is None and c.when_text == "this weekend"


def test_uc3_no_temporal_words(now):
    assert _resolve("Take out the trash", now) == []


def test_uc3_two_weekdays_give_two_candidates(now):
    candidates = _resolve("Call Monday or Tuesday", now)
    assert [c.when_text for c in candidates] == ["Monday", "Tuesday"]
    assert [c.start.date() for c in candidates] == [date(2024, 1, 15), date(2024, 1, 16)]


def test_uc3_next_weekday_with_named_time(now):
    [c] = _resolve("Lunch next Friday at noon", now)
    assert c.start == datetime(2024, 1, 19, 12, 0, tzinfo=IST)
    assert c.when_text == "next Friday at noon"
    assert c.fuzzy is False


def test_uc3_relative_offset(now):
    [c] = _resolve("Check the oven in 2 hours", now)
    assert c.start == datetime(2024, 1, 15, 12, 0, tzinfo=IST)
    assert c.fuzzy is False


def test_uc3_time_range_on_month_day(now):
    [c] = _resolve("Workshop from 3 to 4 pm on March 5", now)
    assert c.start == datetime(2024, 3, 5, 15, 0, tzinfo=IST)
    assert c.end == datetime(2024, 3, 5, 16, 0, tzinfo=IST)
    assert c.when_text == "from 3 to 4 pm on March 5"


def test_uc3_duration_sets_end(now):
    [c] = _resolve("Gym tomorrow at 7 am for 45 minutes", now)
    assert c.start == datetime(2024, 1, 16, 7, 0, tzinfo=IST)
    assert c.end == datetime(2024, 1, 16, 7, 45, tzinfo=IST)


def test_uc3_past_month_day_rolls_to_next_year(now):
    [c] = _resolve("Renew passport January 10", now)
    assert c.start.date() == date(2025, 1, 10)


def test_uc3_iso_date_with_time(now):
    [c] = _resolve("Submit taxes 2024-02-01T14:30", now)
    assert c.start == datetime(2024, 2, 1, 14, 30, tzinfo=IST)
    assert c.fuzzy is False


def test_uc3_deadline_preposition_is_part_of_when_text(now):
    [c] = _resolve("Finish the report by Friday", now)
    assert c.when_text == "by Friday"
    assert c.start == datetime(2024, 1, 19, 9, 0, tzinfo=IST)


def test_uc3_tonight_is_evening_but_fuzzy(now):
    [c] = _resolve("Call grandma tonight", now)
    assert c.start.hour == 20
    assert c.fuzzy is True


def test_uc3_impossible_date_is_skipped(now):
    assert _resolve("Party on February 31", now) == []


def test_uc3_now_in_another_zone_is_converted(now):
    utc_now = now.astimezone(ZoneInfo("UTC"))
    [c] = resolve_dates("Standup tomorrow at 9:30", utc_now, IST)
    assert c.start == datetime(2024, 1, 16, 9, 30, tzinfo=IST)


def test_uc3_bare_hour_reads_as_working_day_clock(now):
    [c] = _resolve("Meeting with Sarah at 3 tomorrow", now)
    assert c.start == datetime(2024, 1, 16, 15, 0, tzinfo=IST)
    assert c.fuzzy is False
    assert c.when_text == "at 3 tomorrow"

    [morning] = _resolve("Standup around 10 on Friday", now)
    assert morning.start == datetime(2024, 1, 19, 10, 0, tzinfo=IST)


def test_uc3_bare_number_without_clock_context_is_not_a_time(now):
    assert _resolve("Buy 3 apples", now) == []
    assert _resolve("Read chapter 3 of the book", now) == []


def test_uc3_abbreviated_month(now):
    [c] = _resolve("Flight to Delhi on Jan 20", now)
    assert c.start == datetime(2024, 1, 20, 9, 0, tzinfo=IST)
    assert c.when_text == "on Jan 20"
    assert c.fuzzy is True
