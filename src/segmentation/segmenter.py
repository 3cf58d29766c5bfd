from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List

from braindump.lexicon import (
    ACTION_VERB_PATTERN,
    EVENT_KEYWORD_RE,
    NOTE_HEADER_RE,
    TASK_INDICATOR_RE,
    WEEKDAY_PATTERN,
    starts_with_action,
)
from classification.fragment_classifier import looks_like_journal

logger = logging.getLogger(__name__)

LONG_LINE_CHARS = 120
MIN_FRAGMENT_CHARS = 4
MAX_LIST_ITEMS = 3

_SENTENCE_END_RE = re.compile(r"[.!?](?:\s|$)")
_SENTENCE_SPLIT_RE = re.compile(
    r"(?<!\bDr)(?<!\bMr)(?<!\bMs)(?<!\bMrs)(?<!\bSt)(?<!\bvs)(?<!\betc)\.\s+(?=[A-Z\"'])"
    r"|[!?]+\s+"
    r"|[.!?]+\s*$"
)
_TIME_PHRASE_OPENING_RE = re.compile(
    rf"^(?:tomorrow|today|tonight|(?:on\s+|next\s+|this\s+)?(?:{WEEKDAY_PATTERN})|at\s+\d|\d{{1,2}}(?::\d{{2}})?\s*(?:am|pm))\b",
    re.IGNORECASE,
)
_TRANSITION_RE = re.compile(r"\s+(?:but\s+then|and\s+then|then)\s+", re.IGNORECASE)
_TASK_INDICATOR_SPLIT_RE = re.compile(
    r"\s+(?=(?:and\s+)?(?:I\s+(?:need|have|got)\s+to|I'll|I\s+will)\b)",
    re.IGNORECASE,
)
_AND_ACTION_SPLIT_RE = re.compile(
    rf"\s+and\s+(?!ask\b)(?=(?:{ACTION_VERB_PATTERN}|I\s+need|I\s+have)\b)",
    re.IGNORECASE,
)
_WEEKDAY_RANGE_RE = re.compile(rf"\b(?:{WEEKDAY_PATTERN})\s+(?:and|to|or|-)\s+(?:{WEEKDAY_PATTERN})\b", re.IGNORECASE)
_TIME_RANGE_RE = re.compile(r"\b\d{1,2}(?::\d{2})?\s*(?:am|pm)?\s+and\s+\d{1,2}(?::\d{2})?\s*(?:am|pm)\b", re.IGNORECASE)
_COMMA_CLAUSE_SPLIT_RE = re.compile(
    rf",\s+(?=(?:{ACTION_VERB_PATTERN}|I\s+(?:need|have|got)\s+to|I'll|then)\b)",
    re.IGNORECASE,
)
_SEMICOLON_RE = re.compile(r"\s*;\s*")
_LEADING_CONJUNCTION_RE = re.compile(r"^(?:and|but|so|also|plus)\s+", re.IGNORECASE)
_STUB_RE = re.compile(r"^(?:I\s+(?:have|need|got)\s+to|I'll|I\s+will|and|then)\.?$", re.IGNORECASE)


def _split_sentences(segment: str) -> List[str]:
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(segment) if s and s.strip()]
    merged: List[str] = []
    for sentence in sentences:
        # "Dentist appointment. Tomorrow at 3 pm." stays one fragment
        if (
            merged
            and EVENT_KEYWORD_RE.search(merged[-1])
            and _TIME_PHRASE_OPENING_RE.match(sentence)
            and not TASK_INDICATOR_RE.search(sentence)
            and not starts_with_action(_TIME_PHRASE_OPENING_RE.sub("", sentence))
        ):
            merged[-1] = f"{merged[-1]}. {sentence}"
        else:
            merged.append(sentence)
    return merged


def _split_transitions(segment: str) -> List[str]:
    return _TRANSITION_RE.split(segment)


def _split_task_indicators(segment: str) -> List[str]:
    return _TASK_INDICATOR_SPLIT_RE.split(segment)


def _split_conjunctions(segment: str) -> List[str]:
    if _WEEKDAY_RANGE_RE.search(segment) or _TIME_RANGE_RE.search(segment):
        return [segment]
    return _AND_ACTION_SPLIT_RE.split(segment)


def _split_commas(segment: str) -> List[str]:
    if NOTE_HEADER_RE.match(segment):
        return [segment]
    parts = segment.split(",")
    if len(parts) > MAX_LIST_ITEMS and not all(starts_with_action(p) for p in parts[1:]):
        return [segment]
    return _COMMA_CLAUSE_SPLIT_RE.split(segment)


def _split_semicolons(segment: str) -> List[str]:
    return _SEMICOLON_RE.split(segment)


# Coarse to fine; every pass runs over the output of the previous one.
_PASSES: List[Callable[[str], List[str]]] = [
    _split_sentences,
    _split_transitions,
    _split_task_indicators,
    _split_conjunctions,
    _split_commas,
    _split_semicolons,
]


def _tidy(piece: str) -> str:
    piece = piece.strip().strip(",;: ")
    while _LEADING_CONJUNCTION_RE.match(piece):
        piece = _LEADING_CONJUNCTION_RE.sub("", piece, count=1)
    return piece.rstrip(".!?").strip()


def _keep_whole(line: str) -> bool:
    if NOTE_HEADER_RE.match(line):
        return True
    return (
        len(line) > LONG_LINE_CHARS
        and len(_SENTENCE_END_RE.findall(line)) >= 2
        and looks_like_journal(line)
        and not TASK_INDICATOR_RE.search(line)
        and not re.search(rf"\b(?:{ACTION_VERB_PATTERN})\b", line, re.IGNORECASE)
    )


def _cascade(line: str) -> Iterable[str]:
    pieces = [line]
    for split in _PASSES:
        pieces = [part for piece in pieces for part in split(piece)]
    return pieces


def segment(cleaned: str) -> List[str]:
    """Break cleaned text into candidate fragments, in reading order.

    Literal dates ("January 1, 2024") and weekday/time ranges are never cut,
    long reflective paragraphs and note headers are kept as single fragments.
    """
    fragments: List[str] = []
    for line in (ln.strip() for ln in cleaned.split("\n")):
        if not line:
            continue
        pieces = [line] if _keep_whole(line) else _cascade(line)
        for piece in pieces:
            piece = _tidy(piece)
            if len(piece) < MIN_FRAGMENT_CHARS or _STUB_RE.match(piece):
                continue
            fragments.append(piece)

    logger.debug(f"Segmented text into {len(fragments)} fragments")
    return fragments
