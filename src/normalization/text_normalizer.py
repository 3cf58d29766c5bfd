from __future__ import annotations

import logging
import re
from functools import reduce

from braindump.lexicon import WEEKDAY_PATTERN
from normalization.corrections import SPEECH_CORRECTIONS

logger = logging.getLogger(__name__)

_LINE_BREAKS_RE = re.compile(r"\r\n?|[\v\f\x85\u2028\u2029]")
_HSPACE_RE = re.compile(r"[ \t\u00a0]+")
_EDGE_SPACE_RE = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
_MANY_NEWLINES_RE = re.compile(r"\n{3,}")

_FILLERS = [
    (re.compile(r"\b(?:u+h+m*|u+m+|e+rm+|hm+|er|ah)\b[,.]?", re.IGNORECASE), ""),
    (re.compile(r"(?:,\s*|\b)(?:you\s+know|i\s+mean),", re.IGNORECASE), ","),
    (re.compile(r",\s*like,", re.IGNORECASE), ","),
    (re.compile(r"(?:^|(?<=[\s.!?]))like,\s*", re.IGNORECASE | re.MULTILINE), ""),
    (re.compile(r"\b(?:actually|basically|literally|totally)\b,?", re.IGNORECASE), ""),
    # stutters and false starts: "I I need", "the- the list"
    (re.compile(r"\b([\w']+)(?:-?[ \t]+\1\b)+", re.IGNORECASE), r"\1"),
]

_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([,.!?;:])")
_DOUBLED_SEPARATOR_RE = re.compile(r"([,;])(?:[ \t]*[,;])+")
_SEPARATOR_BEFORE_END_RE = re.compile(r"[,;][ \t]*([.!?])")
_LEADING_SEPARATOR_RE = re.compile(r"^[,;][ \t]*", re.MULTILINE)

_PUNCTUATION_MAP = str.maketrans({
    "\u201c": '"', "\u201d": '"', "\u201e": '"',
    "\u2018": "'", "\u2019": "'", "\u201a": "'",
    "\u2013": "-", "\u2014": "-", "\u2026": ".",
})
_REPEATED_PERIODS_RE = re.compile(r"\.{2,}")
_BULLET_RE = re.compile(r"^[ \t]*(?:[-*\u2022]|\d{1,2}[.)])[ \t]+", re.MULTILINE)

_TASK_BOUNDARY_RE = re.compile(
    r"[ \t]+(?=(?:i\s+(?:need|have|got)\s+to|i'll|go\s+for|go\s+to\s+the|buy|call|complete|send|create|book)\b)",
    re.IGNORECASE,
)
_PREVIOUS_WORD_RE = re.compile(r"([\w'-]+)\W*$")
# "the book was great": an indicator followed by one of these is a noun, not a new task.
_NOUN_USE_RE = re.compile(
    r"(?:buy|call|complete|send|create|book)[ \t]*(?:$|[,.;!?]|(?:yesterday|last|was|were|is|has|had|that|which)\b)",
    re.IGNORECASE,
)
# A task indicator right after one of these words belongs to the same clause.
_BINDING_WORDS = frozenset({
    "a", "an", "the", "to", "and", "or", "but", "then", "also", "just", "please",
    "i", "we", "you", "they", "he", "she", "will", "would", "should", "must",
    "can", "could", "might", "may", "need", "not", "don't", "never", "let's",
    "my", "your", "his", "her", "our", "their", "this", "that", "one",
    "phone", "video", "conference", "zoom", "quick", "sales", "team", "missed",
    "return", "follow-up", "wake-up", "remember", "me", "us",
    "good", "great", "new", "old", "nice", "bad", "long", "short", "big", "little", "whole",
    "interesting", "favorite", "favourite", "first", "last", "next", "same", "other", "another",
})
# "Tomorrow I need to..." keeps its sentence-opening time word.
_OPENING_TIME_WORD_RE = re.compile(
    rf"(?:^|[.!?\n]\s*)(?:(?:this|on|next)\s+)?(?:today|tonight|tomorrow|{WEEKDAY_PATTERN}|morning|afternoon|evening)\W*$",
    re.IGNORECASE,
)

_SENTENCE_START_RE = re.compile(r"([.!?][ \t]+|^[ \t]*)([a-z])", re.MULTILINE)
_LOWER_I_RE = re.compile(r"(?<![\w'])i(?=(?:'[a-z]+)?(?![\w]))")
_TRAILING_SEPARATOR_RE = re.compile(r"[\s,;:-]+$")


def _normalize_whitespace(text: str) -> str:
    text = _LINE_BREAKS_RE.sub("\n", text)
    text = _HSPACE_RE.sub(" ", text)
    text = _EDGE_SPACE_RE.sub("", text)
    return _MANY_NEWLINES_RE.sub("\n\n", text).strip()


def _tidy_separators(text: str) -> str:
    text = _HSPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    text = _DOUBLED_SEPARATOR_RE.sub(r"\1", text)
    text = _SEPARATOR_BEFORE_END_RE.sub(r"\1", text)
    text = _EDGE_SPACE_RE.sub("", text)
    return _LEADING_SEPARATOR_RE.sub("", text)


def _strip_fillers(text: str) -> str:
    for pattern, replacement in _FILLERS:
        text = pattern.sub(replacement, text)
    return _tidy_separators(text)


def apply_corrections(text: str) -> str:
    """Fold the speech-correction table over the text, in table order."""
    return reduce(lambda acc, rule: rule[0].sub(rule[1], acc), SPEECH_CORRECTIONS, text)


def _normalize_punctuation(text: str) -> str:
    text = text.translate(_PUNCTUATION_MAP)
    text = _REPEATED_PERIODS_RE.sub(".", text)
    return _BULLET_RE.sub("", text)


def _insert_task_boundaries(text: str) -> str:
    def _boundary(match: re.Match) -> str:
        before = text[: match.start()]
        if not before or before[-1] in ".!?,;:\n":
            return match.group(0)
        prev = _PREVIOUS_WORD_RE.search(before)
        if prev is None or prev.group(1).lower() in _BINDING_WORDS or prev.group(1).lower().endswith("'ll"):
            return match.group(0)
        if _OPENING_TIME_WORD_RE.search(before) or _NOUN_USE_RE.match(text, match.end()):
            return match.group(0)
        return ". "

    return _TASK_BOUNDARY_RE.sub(_boundary, text)


def _fix_capitalization(text: str) -> str:
    text = _LOWER_I_RE.sub("I", text)
    return _SENTENCE_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def _finalize(text: str) -> str:
    text = text.strip()
    if not text:
        return text
    text = text[0].upper() + text[1:]
    if text[-1] not in ".!?":
        text = _TRAILING_SEPARATOR_RE.sub("", text) + "."
    return text


def normalize(raw: str) -> str:
    """Rule-based cleanup of a dictated or typed brain dump.

    Pure and total: never raises on string input, returns "" for blank input,
    and leaves text without any letters alone apart from whitespace collapsing.
    """
    if not raw or not raw.strip():
        return ""

    text = _normalize_whitespace(raw)
    if not any(ch.isalpha() for ch in text):
        return text

    text = _strip_fillers(text)
    text = apply_corrections(text)
    text = _normalize_punctuation(text)
    text = _insert_task_boundaries(text)
    text = _fix_capitalization(text)
    text = _finalize(_tidy_separators(text))

    logger.debug(f"Normalized {len(raw)} chars into {len(text)} chars")
    return text
