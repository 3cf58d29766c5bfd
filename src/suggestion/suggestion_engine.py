from __future__ import annotations

from collections import Counter
from typing import Sequence

from braindump.models import EventItem, Suggestion, TodoItem

CONFIDENCE_THRESHOLD = 0.6

_NUMBER_WORDS = (
    "zero", "one", "two", "three", "four", "five", "six",
    "seven", "eight", "nine", "ten", "eleven", "twelve",
)


def _spell(n: int) -> str:
    return _NUMBER_WORDS[n] if n < len(_NUMBER_WORDS) else str(n)


def _rationale(kind: str, count: int, total: int) -> str:
    if count == total:
        return f"All fragments are {kind}s"
    if count == 1:
        article = "an" if kind == "event" else "a"
        return f"One of {_spell(total)} fragments is {article} {kind}"
    return f"{_spell(count).capitalize()} of {_spell(total)} fragments are {kind}s"


def suggest(items: Sequence[TodoItem | EventItem]) -> Suggestion:
    """Summarize what the extracted items mostly are."""
    if not items:
        return Suggestion(inferred_type="mixed", confidence=0.0, rationale="No items extracted")

    counts = Counter(item.type for item in items)
    kind, count = counts.most_common(1)[0]
    confidence = round(count / len(items), 2)

    return Suggestion(
        inferred_type=kind if confidence >= CONFIDENCE_THRESHOLD else "mixed",
        confidence=confidence,
        rationale=_rationale(kind, count, len(items)),
    )
