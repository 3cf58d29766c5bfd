import logging
from typing import Optional

from braindump.models import Cleaner
from llm.llm_client import LLM_PROVIDER, LLMClient

logger = logging.getLogger(__name__)

_cleaner: Optional[Cleaner] = None
_cleaner_loaded = False


def get_cleaner() -> Optional[Cleaner]:
    """Server-side text cleaner, built once from LLM_PROVIDER; None when unset."""
    global _cleaner, _cleaner_loaded
    if not _cleaner_loaded:
        _cleaner_loaded = True
        if LLM_PROVIDER:
            try:
                _cleaner = LLMClient()
                logger.info(f"Using '{LLM_PROVIDER}' LLM cleaner")
            except (RuntimeError, ValueError) as e:
                logger.error(f"LLM cleaner disabled: {e}")
    return _cleaner
