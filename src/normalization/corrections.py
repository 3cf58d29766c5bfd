"""Ordered speech-to-text correction table.

Each entry is ``(pattern, replacement)``; entries are applied top to bottom, so
more specific phrases must come before the general ones they overlap with.
"""
from __future__ import annotations

import re
from typing import Callable, List, Pattern, Tuple, Union

Replacement = Union[str, Callable[["re.Match[str]"], str]]

_GROCERY_NOUNS = r"banana|bananas|vegetables|groceries|items|food|things|bread|milk|eggs|coffee|apples|rice"


def _rule(pattern: str, replacement: Replacement) -> Tuple[Pattern[str], Replacement]:
    return re.compile(pattern, re.IGNORECASE), replacement


SPEECH_CORRECTIONS: List[Tuple[Pattern[str], Replacement]] = [
    # homophones around shopping
    _rule(rf"\bby\s+(?=(?:some\s+|the\s+)?(?:{_GROCERY_NOUNS})\b)", "buy "),
    _rule(r"\bgan\s+milk\b", "oat milk"),
    _rule(r"\begg\s+milk\s+and\b", "eggs, milk and"),
    _rule(r"\begg\s+milk\b", "eggs and milk"),
    _rule(r"\beggs\s+and\s+mild\b", "eggs and milk"),
    _rule(r"\bmild\s+and\s+(?=eggs|bread)", "milk and "),
    # misheard words
    _rule(r"\bcomplaint\s+(?=(?:the|my|a|an|this|that|our|your)\b)", "complete "),
    _rule(r"\bheart\s+day\b", "hard day"),
    _rule(r"\btoday\s+I\s+walk\s+up\b", "today I woke up"),
    _rule(r"\bfeel\s+sleep\s+head\b", "feel sleepy"),
    _rule(r"\bcan\s+walk\s+project\b", "Canva project"),
    _rule(r"\bsend\s+out\s+the\s+ma\b", "send out the mail"),
    _rule(r"\blate\s+number\b", "slide number"),
    _rule(r"\blater\s+the\s+sweet\b", "later this evening"),
    _rule(r"\bwhat\s+are\s+the\s+plan\s+set\b", "watch the planned show at"),
    _rule(r"\bplan\s+set\b", "planned show at"),
    _rule(r"\bremind\s+me\s+to\s+what\b", "remind me to watch"),
    # availability phrasing, specific first
    _rule(r"\bsave\s+(?:if\s+)?they\s+are\s+feed\b", "see if they are free"),
    _rule(r"\bthey\s+are\s+feed\b", "they are free"),
    _rule(r"\bfeed\s+during\b", "free during"),
    _rule(r"\b(to\s+)?say\s+if\s+(she\s+is|he\s+is|they\s+are)\s+free\b", r"\1ask if \2 free"),
    _rule(r"\bto\s+save\s+(she\s+is|he\s+is|they\s+are)\s+free\b", r"to ask if \1 free"),
    _rule(r"\b(to\s+)?save\s+the\s+((?:movie\s+)?tickets)\b", r"\1see if the \2"),
    _rule(r"\bsave\s+they\b", "see if they"),
    _rule(r"\bsave\s+if\b", "see if"),
    _rule(r"\bif\s+there\s+free\b", "if they're free"),
    _rule(r"\bthere\s+are\s+free\b", "they are free"),
    _rule(r"\bthere\s+free\b", "they're free"),
    _rule(r"\btheir\s+free\b", "they're free"),
    # misheard activities
    _rule(r"\bgo\s+for\s+a\s+work\b", "go for a walk"),
    _rule(r"\ba\s+work\s+after\b", "a walk after"),
    _rule(r"\bweek(?:e|nd)\b", "weekend"),
    _rule(r"\b(final|professional|rough)\s+draught\b", r"\1 draft"),
    _rule(r"\bdraught\s+(?=email|mail|message|reply)", "draft "),
    _rule(r"\bbook\s+stay\b", "book a stay"),
    # missing articles
    _rule(r"\bdo\s+lot\s+of\b", "do a lot of"),
    _rule(r"(?<!\ba\s)\blot\s+of\s+work\b", "a lot of work"),
    # dropped subject
    _rule(r"\band\s+it\s+to\b", "and I need to"),
    _rule(r"\bso\s+i\s+was\s+thinking\s+about\s+going\b", "so I need to go"),
    _rule(r"\bgonna\s+have\s+to\b", "have to"),
    _rule(r"\bgotta\b", "got to"),
    # shorthand
    _rule(r"\b(?:tmrw|tmrow|tmr)\b", "tomorrow"),
    _rule(r"\bappt\b", "appointment"),
    # clock formats: "3 p.m." -> "3 pm", "3PM" -> "3 pm"
    _rule(r"\b(\d{1,2}(?::\d{2})?)\s*a\.\s?m\.?(?=\W|$)", r"\1 am"),
    _rule(r"\b(\d{1,2}(?::\d{2})?)\s*p\.\s?m\.?(?=\W|$)", r"\1 pm"),
    _rule(r"\b(\d{1,2}(?::\d{2})?)\s*([ap])m\b", lambda m: f"{m.group(1)} {m.group(2).lower()}m"),
    _rule(r"\b(\d{1,2})\s*o'?clock\b", r"\1:00"),
    # doubled articles left behind by the fixes above
    _rule(r"\ba\s+a\s+lot\s+of\b", "a lot of"),
]
