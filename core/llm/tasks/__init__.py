"""
LLM Tasks Module

Contains specific task implementations that use LLM capabilities.
Each task encapsulates prompt engineering and response parsing.

Available Tasks:
    - ListingTranslationTask: auction title + description localization
"""

from core.llm.tasks.base import LLMTask, TaskResult
from core.llm.tasks.translation import (
    ListingTranslationTask,
    TranslationResult,
    normalize_language_tag,
    translate_listing,
)

__all__ = [
    "LLMTask",
    "TaskResult",
    "ListingTranslationTask",
    "TranslationResult",
    "normalize_language_tag",
    "translate_listing",
]
