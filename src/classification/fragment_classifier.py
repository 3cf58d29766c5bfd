from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from braindump.lexicon import (
    ACTION_VERB_PATTERN,
    BY_DEADLINE_RE,
    EVENT_KEYWORD_RE,
    MONTH_PATTERN,
    WEEKDAY_PATTERN,
    has_vague_time,
)
from dates.date_resolver import DateCandidate

logger = logging.getLogger(__name__)


class FragmentKind(str, Enum):
    EVENT = "event"
    TODO = "todo"
    DROP = "drop"


_FEELING_OPENING_RE = re.compile(
    r"^\s*(?:i\s+feel|i\s+felt|i\s+am\s+(?:so\s+|really\s+|very\s+)?"
    r"(?:tired|exhausted|stressed|happy|sad|excited|worried|nervous|calm|peaceful|overwhelmed|grateful|anxious)"
    r"|i'm\s+(?:so\s+|really\s+|very\s+)?(?:tired|exhausted|stressed|happy|sad|excited|worried|nervous|overwhelmed|grateful|anxious)"
    r"|today\s+was|yesterday\s+was|tonight\s+was|this\s+morning\s+was)\b",
    re.IGNORECASE,
)
_REFLECTIVE_MARKER_RE = re.compile(
    r"\b(?:i\s+feel|i\s+felt|i\s+think|i\s+thought|i\s+realized?|i\s+learned|i\s+wonder|i\s+had|it\s+was"
    r"|today\s+was|yesterday|last\s+night|made\s+me|so\s+(?:proud|happy|sad|stressed|grateful)"
    r"|amazing|incredible|learned\s+so\s+much|journaling)\b",
    re.IGNORECASE,
)
_STRONG_TASK_OPENING_RE = re.compile(
    r"^\s*(?:i\s+(?:need|have|got)\s+to|call|complete|send|book|buy|schedule|email|remind\s+me)\b",
    re.IGNORECASE,
)
_FIRST_PERSON_RE = re.compile(r"\b(?:i|we|me|my|our)\b", re.IGNORECASE)
_PAST_NARRATIVE_RE = re.compile(
    r"\b(?:was|were|had|did|went|came|saw|heard|said|told|felt)\b.*\b(?:i|me|my|myself)\b"
    r"|\b(?:i|we)\s+(?:was|were|had|did|went|came|saw|heard|said|told|felt)\b",
    re.IGNORECASE,
)
# Relative days read as approximate timing unless a clock time comes with them.
_RELATIVE_DAY_RE = re.compile(r"\b(?:today|tonight|tomorrow)\b", re.IGNORECASE)

_DAY_OR_TIME_MARKER_RE = re.compile(
    rf"\d|\b(?:today|tonight|tomorrow|noon|midnight|morning|afternoon|evening|night|{WEEKDAY_PATTERN}|{MONTH_PATTERN})\b",
    re.IGNORECASE,
)
SHOPPING_LIST_RE = re.compile(
    r"\b(?:buy|purchase|get|pick\s+up|grab)\b\s+(?P<items>[^,]+(?:,\s*[^,]+){2,})",
    re.IGNORECASE,
)
_ACTIONABLE_OPENING_RE = re.compile(
    rf"^\s*(?:(?:i\s+(?:need|have|got|want)\s+to|i'll|i\s+will|i\s+should|i\s+must|need\s+to|have\s+to"
    rf"|remember\s+to|don't\s+forget\s+to|please|remind\s+me\s+to|todo:|task:|then)\s+)?"
    rf"(?:{ACTION_VERB_PATTERN}|go\s+for|check|contact|follow\s+up|research|plan|prep|draft|reply|renew|return|cancel|start|read|study|visit|meet|remind)\b",
    re.IGNORECASE,
)
_TASK_VERB_RE = re.compile(
    rf"\b(?:{ACTION_VERB_PATTERN}|check|contact|follow\s+up|research|draft|reply|renew|cancel|need\s+to|have\s+to)\b",
    re.IGNORECASE,
)


def looks_like_journal(text: str) -> bool:
    """Reflective or narrative prose that should never become an item."""
    if _FEELING_OPENING_RE.search(text):
        return True
    if _STRONG_TASK_OPENING_RE.search(text):
        return False
    if _REFLECTIVE_MARKER_RE.search(text):
        return True
    if len(text) > 200 and _FIRST_PERSON_RE.search(text):
        return True
    return len(text) > 40 and _PAST_NARRATIVE_RE.search(text) is not None


def _has_time_marker(candidate: DateCandidate) -> bool:
    if candidate.start is None:
        return False
    return not candidate.fuzzy or bool(candidate.when_text and _DAY_OR_TIME_MARKER_RE.search(candidate.when_text))


def _is_reflective(fragment: str, candidates: Sequence[DateCandidate]) -> bool:
    return looks_like_journal(fragment)


def _is_timed_event(fragment: str, candidates: Sequence[DateCandidate]) -> bool:
    return (
        EVENT_KEYWORD_RE.search(fragment) is not None
        and any(_has_time_marker(c) for c in candidates)
        and not BY_DEADLINE_RE.search(fragment)
        and not has_vague_time(fragment)
    )


def _is_dated(candidate: DateCandidate) -> bool:
    if candidate.start is None or candidate.is_vague:
        return False
    return not candidate.fuzzy or not _RELATIVE_DAY_RE.search(candidate.when_text or "")


def _has_concrete_time(fragment: str, candidates: Sequence[DateCandidate]) -> bool:
    return (
        any(_is_dated(c) for c in candidates)
        and not BY_DEADLINE_RE.search(fragment)
        and not has_vague_time(fragment)
    )


def _is_shopping_list(fragment: str, candidates: Sequence[DateCandidate]) -> bool:
    return SHOPPING_LIST_RE.search(fragment) is not None


def _is_actionable(fragment: str, candidates: Sequence[DateCandidate]) -> bool:
    if _REFLECTIVE_MARKER_RE.search(fragment) and not _STRONG_TASK_OPENING_RE.search(fragment):
        return False
    if _ACTIONABLE_OPENING_RE.search(fragment):
        return True
    if EVENT_KEYWORD_RE.search(fragment):
        return True
    return len(fragment) < 100 and _TASK_VERB_RE.search(fragment) is not None


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Callable[[str, Sequence[DateCandidate]], bool]
    kind: FragmentKind


# First matching rule wins.
RULES: List[ClassificationRule] = [
    ClassificationRule("reflective", _is_reflective, FragmentKind.DROP),
    ClassificationRule("event_with_time", _is_timed_event, FragmentKind.EVENT),
    ClassificationRule("concrete_time", _has_concrete_time, FragmentKind.EVENT),
    ClassificationRule("shopping_list", _is_shopping_list, FragmentKind.TODO),
    ClassificationRule("actionable", _is_actionable, FragmentKind.TODO),
]


def match_rule(fragment: str, candidates: Sequence[DateCandidate]) -> Optional[ClassificationRule]:
    for rule in RULES:
        if rule.predicate(fragment, candidates):
            return rule
    return None


def classify(fragment: str, candidates: Sequence[DateCandidate]) -> FragmentKind:
    """Decide whether a fragment becomes an event, a todo, or nothing."""
    rule = match_rule(fragment, candidates)
    kind = rule.kind if rule is not None else FragmentKind.DROP
    logger.debug(f"Fragment {fragment!r} -> {kind.value} ({rule.name if rule else 'unmatched'})")
    return kind
