"""
LLM Integration Module

Architecture:
    - LLMClient: Abstract base for LLM providers (OpenAI-compatible chat completions)
    - LLMTask: Abstract base for specific tasks
    - ListingTranslationTask: title + description translation for imports

Usage:
    from core.llm import translate_listing

    result = translate_listing(title, description, source_lang="ja", target_lang="zh-CN")
    if result is not None:
        print(result.title)
"""

from core.llm.client import (
    LLMClient,
    LLMConfig,
    LLMResponse,
    OpenAIClient,
    get_llm_client,
    is_llm_configured,
)
from core.llm.tasks.base import LLMTask, TaskResult
from core.llm.tasks.translation import (
    ListingTranslationTask,
    TranslationResult,
    normalize_language_tag,
    translate_listing,
)

__all__ = [
    # Client
    "LLMClient",
    "LLMConfig",
    "LLMResponse",
    "OpenAIClient",
    "get_llm_client",
    "is_llm_configured",
    # Tasks
    "LLMTask",
    "TaskResult",
    "ListingTranslationTask",
    "TranslationResult",
    # High-level API
    "normalize_language_tag",
    "translate_listing",
]
