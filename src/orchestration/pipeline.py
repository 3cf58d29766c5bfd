from __future__ import annotations

import inspect
import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from braindump.errors import CleanerFailure, InputValidationError
from braindump.models import Cleaner, ProcessOptions, ProcessResult
from classification.fragment_classifier import FragmentKind, classify
from dates.date_resolver import resolve_dates
from extraction.item_builder import Item, build
from normalization.text_normalizer import normalize
from segmentation.segmenter import segment
from suggestion.suggestion_engine import suggest

logger = logging.getLogger(__name__)

OptionsInput = Union[ProcessOptions, Mapping[str, Any]]


def parse_options(options: Optional[OptionsInput]) -> ProcessOptions:
    if isinstance(options, ProcessOptions):
        return options
    if options is not None and not isinstance(options, Mapping):
        raise InputValidationError("options must be an object")
    try:
        return ProcessOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        raise InputValidationError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        where = ".".join(str(p) for p in err.get("loc", ())) or "options"
        parts.append(f"{where}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


class TextPipeline:
    """Central orchestration component: raw text in, structured items out."""

    def __init__(self, cleaner: Optional[Cleaner] = None):
        self.cleaner = cleaner

    async def _clean(self, text: str, cleaner: Optional[Cleaner]) -> str:
        if cleaner is None or not text:
            return text
        try:
            out = cleaner(text)
            if inspect.isawaitable(out):
                out = await out
            if not isinstance(out, str) or not out.strip():
                raise CleanerFailure("cleaner returned no text")
            return out.strip()
        except Exception as e:
            logger.warning(f"External cleaner failed, keeping rule-cleaned text: {e}")
            return text

    async def run(self, text: Any, options: Optional[OptionsInput] = None) -> ProcessResult:
        if not isinstance(text, str):
            raise InputValidationError("input must be a string")
        opts = parse_options(options)
        now = opts.reference_now()

        # 1. Rule-based normalization
        cleaned = normalize(text)

        # 2. Optional external cleaner (the only await)
        cleaned = await self._clean(cleaned, opts.cleaner or self.cleaner)

        # 3. Segment into fragments
        fragments = segment(cleaned)

        # 4. Resolve dates, classify and build, fragment by fragment
        items: List[Item] = []
        followups: List[str] = []
        for fragment in fragments:
            try:
                candidates = resolve_dates(fragment, now, opts.zone)
                kind = classify(fragment, candidates)
                if kind is FragmentKind.DROP:
                    continue
                built = build(fragment, kind, candidates, opts)
            except Exception:
                logger.exception(f"Failed to process fragment {fragment!r}, skipping it")
                continue
            items.extend(built.items)
            followups.extend(built.followups)

        # 5. Cap, after everything is classified
        if len(items) > opts.max_items:
            logger.info(f"Capping {len(items)} items to {opts.max_items}")
            items = items[: opts.max_items]

        # 6. Overall suggestion
        suggestion = suggest(items)

        logger.info(
            f"Processed {len(text)} chars into {len(fragments)} fragments, "
            f"{len(items)} items, {len(followups)} followups ({suggestion.inferred_type})"
        )
        return ProcessResult(cleaned_text=cleaned, items=items, suggestion=suggestion, followups=followups)


async def process_text(
    text: Any,
    options: Optional[OptionsInput] = None,
    *,
    cleaner: Optional[Cleaner] = None,
) -> ProcessResult:
    """Run the full extraction pipeline once.

    Raises InputValidationError for non-string input or invalid options;
    everything after validation degrades instead of failing.
    """
    return await TextPipeline(cleaner=cleaner).run(text, options)
