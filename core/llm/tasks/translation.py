"""
Translation Task - localize an auction listing's title and description.

One chat completion call translates both fields at once. The model is asked
for a strict JSON object so the two fields come back separately, and to keep
brand names and model codes untouched.

Usage:
    # Using task class directly
    task = ListingTranslationTask(client)
    result = task.execute("ロレックス サブマリーナ", "美品です", source_lang="ja", target_lang="en")
    print(result.title)

    # Using convenience function (None when no API key is configured)
    from core.llm import translate_listing
    result = translate_listing("ロレックス サブマリーナ", "美品です", "ja", "zh-CN")
"""

import json
from dataclasses import dataclass
from typing import Optional

from core.errors import TranslationError
from core.llm.client import LLMClient, LLMResponse, is_llm_configured
from core.llm.tasks.base import LLMTask, TaskResult
from core.logging import get_logger
from core.text import normalize_text

logger = get_logger("llm-translation")

DEFAULT_TARGET_LANG = "zh-CN"


def normalize_language_tag(tag: Optional[str], default: str = DEFAULT_TARGET_LANG) -> str:
    """Trim a BCP-47 tag; blank or missing tags fall back to the default."""
    if not tag:
        return default
    return tag.strip() or default


# ============================================================================
# RESULT CLASS
# ============================================================================

@dataclass
class TranslationResult(TaskResult):
    """
    Result of a listing translation.

    Attributes:
        title: Translated title
        description: Translated description
        provider: LLM provider that produced it
        source_language: Language translated from
        target_language: Language translated to
    """
    title: str = ""
    description: str = ""
    provider: str = "openai"
    source_language: str = "ja"
    target_language: str = DEFAULT_TARGET_LANG

    @property
    def has_translation(self) -> bool:
        return bool(self.title and self.description)


# ============================================================================
# TRANSLATION TASK
# ============================================================================

class ListingTranslationTask(LLMTask[TranslationResult]):
    """
    Translate a listing's title and description together.

    Both translated fields must be non-empty after normalization, otherwise
    the whole translation counts as failed.
    """

    def get_system_prompt(
        self,
        title: str = "",
        description: str = "",
        source_lang: str = "ja",
        target_lang: str = DEFAULT_TARGET_LANG,
        **kwargs
    ) -> str:
        return (
            f"Translate product content from {source_lang} to {target_lang}. "
            "Keep brand/model codes unchanged. Return strict JSON only: "
            '{"title":"...","description":"..."}'
        )

    def get_response_format(self) -> str:
        return "json_object"

    def build_prompt(self, title: str, description: str, **kwargs) -> str:
        return json.dumps({"title": title, "description": description}, ensure_ascii=False)

    def parse_response(
        self,
        response: LLMResponse,
        title: str,
        description: str,
        source_lang: str = "ja",
        target_lang: str = DEFAULT_TARGET_LANG,
        **kwargs
    ) -> TranslationResult:
        try:
            payload = json.loads(response.content)
        except json.JSONDecodeError:
            raise ValueError("Translation failed: model did not return JSON")

        if not isinstance(payload, dict):
            raise ValueError("Translation failed: invalid JSON payload")

        raw_title = payload.get("title")
        raw_description = payload.get("description")
        translated_title = normalize_text(raw_title) if isinstance(raw_title, str) else ""
        translated_description = (
            normalize_text(raw_description) if isinstance(raw_description, str) else ""
        )
        if not translated_title or not translated_description:
            raise ValueError("Translation failed: invalid JSON payload")

        return TranslationResult(
            success=True,
            title=translated_title,
            description=translated_description,
            provider=self.client.provider,
            source_language=source_lang,
            target_language=target_lang,
        )

    def validate_input(self, title: str, description: str, **kwargs) -> Optional[str]:
        if not (title or "").strip() and not (description or "").strip():
            return "Translation failed: nothing to translate"
        return None

    def _create_error_result(
        self,
        error: str,
        response: Optional[LLMResponse] = None
    ) -> TranslationResult:
        return TranslationResult(
            success=False,
            error=error,
            latency_ms=response.latency_ms if response else None,
            model=response.model if response else None
        )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def translate_listing(
    title: str,
    description: str,
    source_lang: str,
    target_lang: str,
    client: Optional[LLMClient] = None,
) -> Optional[TranslationResult]:
    """
    Translate a listing, failing loudly so the caller can record the error.

    Args:
        title: Original title
        description: Original description
        source_lang: Source language tag
        target_lang: Target language tag
        client: LLM client (built from config when omitted)

    Returns:
        TranslationResult, or None when no client is given and no API key
        is configured (translation is opt-in)

    Raises:
        TranslationError: provider error, malformed JSON or blank fields
    """
    if client is None:
        if not is_llm_configured():
            logger.debug("No LLM credential configured, skipping translation")
            return None
        task = ListingTranslationTask()
    else:
        task = ListingTranslationTask(client)

    result = task.execute(
        title,
        description,
        source_lang=source_lang,
        target_lang=target_lang,
    )

    if result.failed:
        raise TranslationError(result.error or "Translation failed")

    logger.debug(
        "Listing translated",
        extra={
            "source_lang": source_lang,
            "target_lang": target_lang,
            "model": result.model,
            "latency_ms": round(result.latency_ms or 0, 2),
        },
    )
    return result
