"""Word lists and patterns shared by the normalizer, segmenter, classifier and builder."""
from __future__ import annotations

import re

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
WEEKDAY_PATTERN = "|".join(WEEKDAYS)

MONTH_PATTERN = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)

# Verbs that open a new actionable clause when they follow "and" or a comma.
ACTION_VERBS = (
    "ask", "book", "buy", "call", "clean", "complete", "create", "do", "email",
    "finish", "fix", "get", "go", "make", "order", "pay", "pick up", "prepare",
    "review", "schedule", "send", "submit", "text", "update", "write",
)
ACTION_VERB_PATTERN = "|".join(v.replace(" ", r"\s+") for v in ACTION_VERBS)

TASK_INDICATOR_RE = re.compile(
    r"\b(?:i\s+(?:need|have|got)\s+to|i'll|i\s+will|i\s+should|i\s+must)\b",
    re.IGNORECASE,
)

EVENT_KEYWORD_RE = re.compile(r"\b(?:meet(?:ing)?|appointment|visit|call|remind(?:er)?)\b", re.IGNORECASE)

# Phrases that carry temporal intent but no usable calendar date.
VAGUE_TIME_RE = re.compile(
    r"\b(?:(?:some\s*time|sometime)\s+)?"
    r"(?:some\s*day|soon|later|eventually|(?:this|next)\s+(?:week(?:end)?|month))\b"
    r"|\bsometime\b",
    re.IGNORECASE,
)

# "by Friday", "by tomorrow": a deadline, not an appointment.
BY_DEADLINE_RE = re.compile(
    rf"\bby\s+(?:(?:next|this)\s+)?(?:{WEEKDAY_PATTERN}|weekend|tomorrow|tonight|today|end\s+of\s+(?:the\s+)?(?:day|week))\b",
    re.IGNORECASE,
)

NOTE_HEADER_RE = re.compile(
    r"^\s*(?:key\s+points|notes|summary|takeaways|main\s+points|highlights)\s*:",
    re.IGNORECASE,
)


def has_vague_time(text: str) -> bool:
    return VAGUE_TIME_RE.search(text) is not None


def starts_with_action(text: str) -> bool:
    return re.match(rf"\s*(?:{ACTION_VERB_PATTERN})\b", text, re.IGNORECASE) is not None
