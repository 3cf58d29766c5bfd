from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from braindump.lexicon import MONTH_PATTERN, VAGUE_TIME_RE, WEEKDAY_PATTERN, has_vague_time
from braindump.models import TITLE_MAX_LENGTH, EventItem, ProcessOptions, TodoItem
from classification.fragment_classifier import SHOPPING_LIST_RE, FragmentKind
from dates.date_resolver import DateCandidate

logger = logging.getLogger(__name__)

_LEAD_IN_RE = re.compile(
    r"^(?:and|but|so|also|then|ok(?:ay)?|please"
    r"|i\s+(?:really\s+)?(?:need|have|got|want)\s+to|i\s+gotta|i'll|i\s+will|i\s+should|i\s+must"
    r"|i(?:\s+have|'ve\s+got)\s+(?:a|an)"
    r"|need\s+to|have\s+to|remember\s+to|don't\s+forget\s+to|remind\s+me\s+to"
    r"|(?:i\s+have\s+)?so\s+many\s+things\s+to\s+get\s+done|things\s+to\s+get\s+done"
    r"|note\s+to\s+self|todo|to-do|task|action(?:\s+item)?|reminder|meeting|appointment)(?:\s*:\s*|\s+)",
    re.IGNORECASE,
)
# Bare "reminder"/"meeting" are titles, only their "xxx:" form is a lead-in.
_LABEL_WITHOUT_COLON_RE = re.compile(r"^(?:note\s+to\s+self|todo|to-do|task|action(?:\s+item)?|reminder|meeting|appointment)\s", re.IGNORECASE)
_CALL_AND_ASK_RE = re.compile(r"^(call\s+.+?)\s+and\s+ask\s+", re.IGNORECASE)
_ASK_PRONOUN_TO_RE = re.compile(r"^ask\s+(?:her|him|them)\s+to\s+", re.IGNORECASE)
_LEADING_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_TRAILING_TEMPORAL_RE = re.compile(
    rf"\s+(?:by\s+)?(?:tomorrow|today|tonight|(?:on\s+|this\s+|next\s+)?(?:{WEEKDAY_PATTERN})|after\s+\d+\s+minutes)$",
    re.IGNORECASE,
)
_DANGLING_TAIL_RE = re.compile(r"(?:\s+|^)(?:and|then|or|but|at|on|by|for|from|in|until|before|around|to|every)$", re.IGNORECASE)
_TRAILING_PUNCT_RE = re.compile(r"[\s,;:.!?-]+$")
_WHITESPACE_RE = re.compile(r"\s+")

_LOCATION_RE = re.compile(
    r"(?:\bat|@)\s+(?P<place>(?:the\s+)?[A-Z][\w'&.-]*(?:\s+(?:[A-Z][\w'&.-]*|of|the|and|&))*)"
)
_NOT_A_PLACE_RE = re.compile(rf"^(?:the\s+)?(?:{WEEKDAY_PATTERN}|{MONTH_PATTERN}|noon|midnight|night|I)\b", re.IGNORECASE)

_HIGH_PRIORITY_RE = re.compile(r"\b(?:urgent(?:ly)?|asap|as\s+soon\s+as\s+possible|important|high\s+priority|critical)\b", re.IGNORECASE)
_LOW_PRIORITY_RE = re.compile(r"\b(?:low\s+priority|no\s+rush|whenever|not\s+urgent)\b", re.IGNORECASE)
_SHOPPING_PREFIX_RE = re.compile(r"^(?:(?:some\s+)?groceries|the\s+following|these)\s*:?\s*", re.IGNORECASE)

SHOPPING_TITLE = "Buy groceries"

Item = Union[TodoItem, EventItem]


@dataclass
class BuiltFragment:
    items: List[Item] = field(default_factory=list)
    followups: List[str] = field(default_factory=list)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _strip_lead_ins(title: str) -> str:
    while True:
        m = _LEAD_IN_RE.match(title)
        if m is None or (":" not in m.group(0) and _LABEL_WITHOUT_COLON_RE.match(title)):
            return title
        title = title[m.end():]


def _remove_phrase(title: str, phrase: str) -> str:
    return re.sub(rf"\s*(?<!\w){re.escape(phrase)}(?!\w)", " ", title, flags=re.IGNORECASE)


def normalize_title(fragment: str, candidates: Sequence[DateCandidate] = ()) -> str:
    """Turn a fragment into a short imperative title.

    Lead-ins ("I need to", "Reminder:") and temporal phrases are dropped; the
    date itself lives on the item. Falls back to the capitalized fragment when
    nothing meaningful is left.
    """
    title = _TRAILING_PUNCT_RE.sub("", fragment.strip())
    title = _strip_lead_ins(title)

    title = _CALL_AND_ASK_RE.sub(r"\1 to ask ", title)
    title = _ASK_PRONOUN_TO_RE.sub("", title)
    title = _LEADING_ARTICLE_RE.sub("", title)

    for phrase in sorted((c.when_text for c in candidates if c.when_text), key=len, reverse=True):
        title = _remove_phrase(title, phrase)
    title = VAGUE_TIME_RE.sub(" ", title)
    title = _WHITESPACE_RE.sub(" ", title).strip()
    title = _TRAILING_TEMPORAL_RE.sub("", title)

    previous = None
    while previous != title:
        previous = title
        title = _TRAILING_PUNCT_RE.sub("", title)
        title = _DANGLING_TAIL_RE.sub("", title).strip()

    title = _capitalize(title)[:TITLE_MAX_LENGTH].rstrip()
    if not title:
        title = _capitalize(_TRAILING_PUNCT_RE.sub("", fragment.strip()))[:TITLE_MAX_LENGTH].rstrip()
    return title


def extract_location(fragment: str, candidates: Sequence[DateCandidate] = ()) -> Optional[str]:
    when_texts = [c.when_text for c in candidates if c.when_text]
    for m in _LOCATION_RE.finditer(fragment):
        place = m.group("place")
        if _NOT_A_PLACE_RE.match(place) or any(place in w for w in when_texts):
            continue
        place = re.sub(r"\s+(?:of|the|and|&)$", "", place).strip()
        return place or None
    return None


def _priority(fragment: str) -> Optional[str]:
    if _HIGH_PRIORITY_RE.search(fragment):
        return "high"
    if _LOW_PRIORITY_RE.search(fragment):
        return "low"
    return None


def _build_events(fragment: str, candidates: Sequence[DateCandidate], options: ProcessOptions) -> BuiltFragment:
    built = BuiltFragment()
    title = normalize_title(fragment, candidates)
    location = extract_location(fragment, candidates)

    for candidate in candidates or [None]:
        if candidate is None:
            built.items.append(EventItem(title=title, fuzzy=True, location=location))
            built.followups.append(f"What time is '{title}'?")
            continue
        built.items.append(
            EventItem(
                title=title,
                start=candidate.start,
                end=candidate.end,
                all_day=candidate.all_day,
                when_text=candidate.when_text,
                fuzzy=candidate.fuzzy,
                location=location,
            )
        )
        if candidate.fuzzy or candidate.start is None:
            built.followups.append(f"What time is '{candidate.when_text or title}'?")
    return built


def _build_todo(fragment: str, candidates: Sequence[DateCandidate], options: ProcessOptions) -> BuiltFragment:
    built = BuiltFragment()
    vague = has_vague_time(fragment)
    when_text = candidates[0].when_text if candidates else None

    due = None
    if not vague:
        due = next((c.start for c in candidates if not c.is_vague), None)

    shopping = SHOPPING_LIST_RE.search(fragment)
    if shopping is not None:
        title = SHOPPING_TITLE
        notes = _SHOPPING_PREFIX_RE.sub("", shopping.group("items").strip())
        for phrase in (c.when_text for c in candidates if c.when_text):
            notes = _remove_phrase(notes, phrase)
        notes = _TRAILING_PUNCT_RE.sub("", _WHITESPACE_RE.sub(" ", notes).strip())
    else:
        title = normalize_title(fragment, candidates)
        notes = None

    built.items.append(
        TodoItem(
            title=title,
            project_id=options.project_id,
            due=due,
            notes=notes or None,
            priority=_priority(fragment),
            when_text=when_text,
        )
    )

    if due is None and vague and not options.someday_allowed:
        built.followups.append(f"When should '{title}' happen?")
    return built


def build(fragment: str, kind: FragmentKind, candidates: Sequence[DateCandidate], options: ProcessOptions) -> BuiltFragment:
    """Materialize items (and follow-up questions) for one classified fragment."""
    if kind is FragmentKind.EVENT:
        built = _build_events(fragment, candidates, options)
    elif kind is FragmentKind.TODO:
        built = _build_todo(fragment, candidates, options)
    else:
        return BuiltFragment()

    logger.debug(f"Built {len(built.items)} {kind.value} item(s) from {fragment!r}")
    return built
