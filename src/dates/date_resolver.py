from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional, Pattern, Tuple, Union
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta, MO, TU, WE, TH, FR, SA, SU

from braindump.errors import DateParseFailure
from braindump.lexicon import MONTH_PATTERN, VAGUE_TIME_RE, WEEKDAYS, WEEKDAY_PATTERN

logger = logging.getLogger(__name__)

# Day-only references ("tomorrow", "Friday") land at the start of the working day.
DEFAULT_DAY_HOUR = 9
PERIOD_HOURS = {"morning": 9, "afternoon": 14, "evening": 18, "night": 21, "tonight": 20}
# A bare "at 3" up to this hour is in the afternoon.
LAST_AFTERNOON_HOUR = 7

_WEEKDAY_ANCHORS = (MO, TU, WE, TH, FR, SA, SU)
_NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10, "half an": 0.5, "half a": 0.5,
}
_NUMBER = r"\d+|an?|one|two|three|four|five|six|seven|eight|nine|ten|half\s+an?"

# Slots a single expression can fill at most once; tokens sharing a slot start a new expression.
CALENDAR, WEEKDAY, CLOCK, PERIOD, OFFSET = "calendar", "weekday", "clock", "period", "offset"

_CONNECTOR_GAP_RE = re.compile(r"^[\s,]*(?:(?:at|on|the|@)\s*)?$", re.IGNORECASE)
_LEADING_PREPOSITION_RE = re.compile(r"\b(?:at|on|by|from|until|till|before)\s+$", re.IGNORECASE)
_DURATION_RE = re.compile(
    rf"\bfor\s+(?P<n>\d+(?:\.\d+)?|{_NUMBER})\s*(?P<unit>hours?|hrs?|h|minutes?|mins?|m)\b"
    r"(?:\s+(?:and\s+)?(?P<n2>\d+)\s*(?:minutes?|mins?|m)\b)?",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class DateCandidate:
    """One resolved (or deliberately unresolved) temporal expression in a fragment."""

    start: Optional[datetime]
    end: Optional[datetime]
    all_day: Optional[bool]
    when_text: Optional[str]
    fuzzy: bool

    @property
    def is_vague(self) -> bool:
        """No usable calendar date: someday, soon, next week and friends."""
        return self.start is None or bool(self.when_text and VAGUE_TIME_RE.search(self.when_text))


@dataclass
class _Token:
    start: int
    end: int
    values: Dict[str, object]
    slots: frozenset


@dataclass
class _Expression:
    tokens: List[_Token] = field(default_factory=list)

    @property
    def start(self) -> int:
        return self.tokens[0].start

    @property
    def end(self) -> int:
        return self.tokens[-1].end

    @property
    def slots(self) -> frozenset:
        return frozenset().union(*(t.slots for t in self.tokens))

    @property
    def values(self) -> Dict[str, object]:
        merged: Dict[str, object] = {}
        for token in self.tokens:
            merged.update(token.values)
        return merged


def _number(word: str) -> float:
    word = re.sub(r"\s+", " ", word.lower())
    if word in _NUMBER_WORDS:
        return _NUMBER_WORDS[word]
    return float(word)


def _clock_text(hour: str, minute: Optional[str], meridiem: Optional[str]) -> str:
    text = f"{int(hour)}:{minute or '00'}"
    return f"{text} {meridiem.lower()}" if meridiem else text


def _parse(text: str, default: datetime, fuzzy: bool = False) -> datetime:
    """Literal date/time text is read by dateutil; ``default`` fills what the text leaves out."""
    try:
        return date_parser.parse(text, default=default, fuzzy=fuzzy)
    except (ValueError, OverflowError) as e:
        raise DateParseFailure(f"cannot parse {text!r}: {e}") from e


# Each recognizer turns a regex match into token values; listed by priority.
TokenBuilder = Callable[["re.Match[str]"], Tuple[Dict[str, object], frozenset]]


def _iso_date(m):
    values = {"date_text": m.group(0), "explicit_year": True}
    if m.group(4):
        values["clock_text"] = m.group(0)
        return values, frozenset({CALENDAR, CLOCK})
    return values, frozenset({CALENDAR})


def _numeric_date(m):
    return {"date_text": m.group(0), "explicit_year": m.group(3) is not None}, frozenset({CALENDAR})


def _month_day(m):
    return {"date_text": m.group(0), "explicit_year": m.group("year") is not None}, frozenset({CALENDAR})


def _clock_range(m):
    end_meridiem = m.group("m2") or None
    start_meridiem = m.group("m1") or end_meridiem
    values = {
        "clock_text": _clock_text(m.group("h1"), m.group("min1"), start_meridiem),
        "clock_end_text": _clock_text(m.group("h2"), m.group("min2"), end_meridiem),
        "inherited_meridiem": m.group("m1") is None,
    }
    return values, frozenset({CLOCK})


def _clock(m):
    return {"clock_text": _clock_text(m.group("h"), m.group("min"), m.group("mer") or None)}, frozenset({CLOCK})


def _bare_hour(m):
    # "at 3": read on a working-day clock, 1-7 in the afternoon, 8-11 in the morning
    hour = int(m.group("h"))
    meridiem = "pm" if hour <= LAST_AFTERNOON_HOUR or hour == 12 else "am"
    return {"clock_text": _clock_text(m.group("h"), None, meridiem)}, frozenset({CLOCK})


def _named_clock(m):
    return {"clock_text": "00:00" if m.group(1).lower() == "midnight" else "12:00"}, frozenset({CLOCK})


def _day_after_tomorrow(m):
    return {"day_offset": 2}, frozenset({CALENDAR})


def _relative_day(m):
    word = m.group(1).lower()
    if word == "tonight":
        return {"day_offset": 0, "period": PERIOD_HOURS["tonight"]}, frozenset({CALENDAR, PERIOD})
    return {"day_offset": 0 if word == "today" else 1}, frozenset({CALENDAR})


def _weekday(m):
    index = WEEKDAYS.index(m.group("day").lower())
    modifier = (m.group("mod") or "").lower()
    return {"weekday": (index, modifier == "next")}, frozenset({WEEKDAY})


def _part_of_day(m):
    return {"period": PERIOD_HOURS[m.group(1).lower()]}, frozenset({PERIOD})


def _relative_offset(m):
    amount = _number(m.group("n"))
    unit = m.group("unit").lower()
    if unit.startswith(("d", "w")):
        days = int(amount * (7 if unit.startswith("w") else 1))
        return {"day_offset": days}, frozenset({CALENDAR})
    minutes = amount * (60 if unit.startswith("h") else 1)
    return {"offset": timedelta(minutes=minutes)}, frozenset({OFFSET})


_RECOGNIZERS: List[Tuple[Pattern[str], TokenBuilder]] = [
    (re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ](\d{1,2}):(\d{2})(?::\d{2})?)?\b"), _iso_date),
    (re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?\b"), _numeric_date),
    (re.compile(
        rf"\b(?P<month>{MONTH_PATTERN})\.?\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\b(?!\s*(?:am|pm|:))(?:,?\s+(?P<year>\d{{4}})\b)?",
        re.IGNORECASE,
    ), _month_day),
    (re.compile(
        rf"\b(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?(?P<month>{MONTH_PATTERN})\b\.?(?:,?\s+(?P<year>\d{{4}})\b)?",
        re.IGNORECASE,
    ), _month_day),
    (re.compile(
        r"\b(?:(?:from|between)\s+)?(?P<h1>\d{1,2})(?::(?P<min1>\d{2}))?\s*(?P<m1>am|pm)?"
        r"\s*(?:-|to|and|until|till)\s*(?P<h2>\d{1,2})(?::(?P<min2>\d{2}))?\s*(?P<m2>am|pm)\b",
        re.IGNORECASE,
    ), _clock_range),
    (re.compile(
        r"\b(?:(?:from|between)\s+)?(?P<h1>[01]?\d|2[0-3]):(?P<min1>[0-5]\d)(?P<m1>)"
        r"\s*(?:-|to|until|till)\s*(?P<h2>[01]?\d|2[0-3]):(?P<min2>[0-5]\d)(?P<m2>)\b",
    ), _clock_range),
    (re.compile(r"(?:\b(?:at|around)\s+|@\s*|\b)(?P<h>\d{1,2})(?::(?P<min>\d{2}))?\s*(?P<mer>am|pm)\b", re.IGNORECASE), _clock),
    (re.compile(r"(?:\b(?:at|around)\s+|@\s*|\b)(?P<h>[01]?\d|2[0-3]):(?P<min>[0-5]\d)(?P<mer>)\b"), _clock),
    (re.compile(
        r"(?:\b(?:at|around)\s+|@\s*)(?P<h>1[0-2]|0?[1-9])(?![\d:]|\.\d)"
        rf"(?=\s*(?:$|[,.;!?)])|\s+(?:tomorrow|today|tonight|on|this|next|for|with|and|then|in|at|{WEEKDAY_PATTERN})\b)",
        re.IGNORECASE,
    ), _bare_hour),
    (re.compile(r"\b(?:at\s+)?(noon|midday|midnight)\b", re.IGNORECASE), _named_clock),
    (re.compile(r"\b(?:the\s+)?day\s+after\s+tomorrow\b", re.IGNORECASE), _day_after_tomorrow),
    (re.compile(r"\b(today|tonight|tomorrow)\b", re.IGNORECASE), _relative_day),
    (re.compile(rf"\b(?:(?P<mod>next|this|coming|upcoming)\s+)?(?P<day>{WEEKDAY_PATTERN})\b", re.IGNORECASE), _weekday),
    (re.compile(r"(?<!\blast\s)\b(?:(?:in\s+the|this)\s+)?(morning|afternoon|evening|night)\b", re.IGNORECASE), _part_of_day),
    (re.compile(
        rf"\b(?:in|after)\s+(?P<n>{_NUMBER})\s+(?P<unit>minutes?|mins?|hours?|hrs?|days?|weeks?)\b",
        re.IGNORECASE,
    ), _relative_offset),
]


def _find_tokens(fragment: str) -> List[_Token]:
    tokens: List[_Token] = []
    for pattern, builder in _RECOGNIZERS:
        for m in pattern.finditer(fragment):
            if any(m.start() < t.end and t.start < m.end() for t in tokens):
                continue
            values, slots = builder(m)
            tokens.append(_Token(start=m.start(), end=m.end(), values=values, slots=slots))
    return sorted(tokens, key=lambda t: t.start)


def _group_expressions(fragment: str, tokens: List[_Token]) -> List[_Expression]:
    expressions: List[_Expression] = []
    for token in tokens:
        current = expressions[-1] if expressions else None
        if (
            current is not None
            and not (current.slots & token.slots)
            and OFFSET not in current.slots | token.slots
            and _CONNECTOR_GAP_RE.match(fragment[current.end:token.start])
        ):
            current.tokens.append(token)
        else:
            expressions.append(_Expression(tokens=[token]))
    return expressions


def _base_date(values: Dict[str, object], today: date) -> date:
    if "date_text" in values:
        day = _parse(values["date_text"], datetime.combine(today, time()), fuzzy=True).date()
        if not values["explicit_year"] and day < today:
            day += relativedelta(years=1)
        return day
    if "day_offset" in values:
        return today + timedelta(days=values["day_offset"])
    if "weekday" in values:
        index, strictly_after = values["weekday"]
        anchor = _WEEKDAY_ANCHORS[index](+1)
        if strictly_after:
            return today + relativedelta(days=+1, weekday=anchor)
        return today + relativedelta(weekday=anchor)
    return today


def _resolve_expression(expression: _Expression, now: datetime, zone: ZoneInfo) -> Tuple[datetime, Optional[datetime], bool]:
    """Return (start, end, has_explicit_time) for one grouped expression."""
    values = expression.values

    if "offset" in values:
        return (now + values["offset"]).replace(second=0, microsecond=0), None, True

    day = _base_date(values, now.date())
    midnight = datetime.combine(day, time())

    if "clock_text" in values:
        start = _parse(values["clock_text"], midnight).replace(tzinfo=zone)
        end = None
        if "clock_end_text" in values:
            end = _parse(values["clock_end_text"], midnight).replace(tzinfo=zone)
            if values.get("inherited_meridiem") and start > end and start.hour >= 12:
                # "11 to 1 pm": the start is in the morning
                start = start - timedelta(hours=12)
            if end <= start:
                end += timedelta(days=1)
        return start, end, True

    hour = values.get("period", DEFAULT_DAY_HOUR)
    return datetime.combine(day, time(hour, 0), tzinfo=zone), None, False


def _when_text(fragment: str, expression: _Expression) -> str:
    start = expression.start
    prefix = _LEADING_PREPOSITION_RE.search(fragment[:start])
    if prefix is not None:
        start = prefix.start()
    return fragment[start:expression.end].strip(" ,")


def _duration(fragment: str) -> Optional[timedelta]:
    m = _DURATION_RE.search(fragment)
    if m is None:
        return None
    amount = _number(m.group("n"))
    minutes = amount * (60 if m.group("unit").lower().startswith("h") else 1)
    if m.group("n2"):
        minutes += int(m.group("n2"))
    return timedelta(minutes=minutes)


def resolve_dates(fragment: str, now: datetime, timezone: Union[str, ZoneInfo]) -> List[DateCandidate]:
    """Find every date/time expression in ``fragment`` relative to ``now``.

    Returns candidates in text order. When nothing literal is found but the
    fragment has vague timing ("someday", "next week"), a single dateless fuzzy
    candidate carries that phrase instead.
    """
    zone = timezone if isinstance(timezone, ZoneInfo) else ZoneInfo(timezone)
    now = now.astimezone(zone)

    candidates: List[DateCandidate] = []
    for expression in _group_expressions(fragment, _find_tokens(fragment)):
        when_text = _when_text(fragment, expression)
        try:
            start, end, has_time = _resolve_expression(expression, now, zone)
        except DateParseFailure as e:
            logger.debug(f"Skipping unparseable date expression {when_text!r}: {e}")
            continue
        fuzzy = not has_time or VAGUE_TIME_RE.search(when_text) is not None
        candidates.append(DateCandidate(start=start, end=end, all_day=not has_time, when_text=when_text, fuzzy=fuzzy))

    duration = _duration(fragment)
    if duration is not None:
        for i, candidate in enumerate(candidates):
            if candidate.end is None and not candidate.all_day:
                candidates[i] = DateCandidate(
                    start=candidate.start,
                    end=candidate.start + duration,
                    all_day=False,
                    when_text=candidate.when_text,
                    fuzzy=candidate.fuzzy,
                )
                break

    if not candidates:
        vague = VAGUE_TIME_RE.search(fragment)
        if vague is not None:
            candidates.append(DateCandidate(start=None, end=None, all_day=None, when_text=vague.group(0), fuzzy=True))

    return candidates
