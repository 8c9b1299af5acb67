"""
LLM Client - Abstract interface for LLM providers.

This module defines the contract for LLM providers and the adapter for
OpenAI-compatible chat completion endpoints (OpenAI itself, or any gateway
exposing /chat/completions with bearer auth).

Design Patterns:
    - Strategy Pattern: providers implement the same interface
    - Factory Pattern: get_llm_client() creates the configured client
    - Adapter Pattern: each provider adapter normalizes responses

Failures never raise out of generate(): the returned LLMResponse has empty
content and the error under raw_response["error"]. Callers decide whether
that is fatal.

Example:
    client = get_llm_client()
    response = client.generate("Translate: こんにちは", response_format="json_object")
    print(response.content)
"""

import json
import time
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from core.config import config as app_config
from core.logging import get_logger

logger = get_logger("llm-client")


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class LLMResponse:
    """
    Normalized response from any LLM provider.

    Attributes:
        content: The generated text response
        model: Model that generated the response
        tokens_used: Total tokens consumed (prompt + completion)
        latency_ms: Response time in milliseconds
        status_code: HTTP status of the provider call, when one was made
        raw_response: Original response from provider (for debugging)
    """
    content: str
    model: str
    tokens_used: Optional[int] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    latency_ms: Optional[float] = None
    status_code: Optional[int] = None
    raw_response: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Check if response contains valid content."""
        return bool(self.content and self.content.strip())

    @property
    def error(self) -> Optional[str]:
        return self.raw_response.get("error")


@dataclass
class LLMConfig:
    """
    Configuration for LLM client.

    Attributes:
        model: Model identifier (e.g., "gpt-4o-mini")
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
        base_url: API base URL
    """
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 2048
    timeout: int = 60
    base_url: str = "https://api.openai.com/v1"

    # Additional provider-specific options merged into the request body
    options: Dict[str, Any] = field(default_factory=dict)


# ============================================================================
# ABSTRACT BASE CLASS
# ============================================================================

class LLMClient(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses must implement generate().
    """

    provider: str = "unknown"

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate text from prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system instructions
            **kwargs: Provider-specific options (model, temperature,
                max_tokens, response_format)

        Returns:
            LLMResponse with generated content
        """
        pass


# ============================================================================
# OPENAI CLIENT
# ============================================================================

class OpenAIClient(LLMClient):
    """
    OpenAI chat completions client.

    One request per call, no retries: a slow or failing provider is reported
    straight back to the caller.

    Example:
        client = OpenAIClient(api_key="sk-...")
        response = client.generate(
            prompt='{"title": "ロレックス"}',
            system_prompt="Translate ... Return strict JSON only",
            response_format="json_object",
        )
    """

    provider = "openai"

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        api_key: Optional[str] = None
    ):
        """
        Initialize OpenAI client.

        Args:
            config: LLM configuration
            api_key: API key (falls back to OPENAI_API_KEY)
        """
        super().__init__(config)
        self._api_key = api_key or app_config.OPENAI_API_KEY
        if not self._api_key:
            raise ValueError(
                "OpenAI API key required. Set OPENAI_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self._chat_url = f"{self.config.base_url.rstrip('/')}/chat/completions"

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        start_time = time.time()
        model = kwargs.get("model", self.config.model)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": model,
            "messages": messages,
            "temperature": kwargs.get("temperature", self.config.temperature),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            **self.config.options,
        }
        response_format = kwargs.get("response_format")
        if response_format:
            payload["response_format"] = {"type": response_format}

        def _failed(error: str, status_code: Optional[int] = None, **raw) -> LLMResponse:
            return LLMResponse(
                content="",
                model=model,
                latency_ms=(time.time() - start_time) * 1000,
                status_code=status_code,
                raw_response={"error": error, **raw},
            )

        try:
            req = urllib.request.Request(
                self._chat_url,
                data=json.dumps(payload).encode("utf-8"),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self._api_key}",
                },
                method="POST"
            )

            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                status_code = response.status
                raw_response = json.loads(response.read().decode("utf-8"))

        except urllib.error.HTTPError as e:
            try:
                error_body = e.read().decode("utf-8", errors="replace")
            except OSError:
                error_body = ""
            logger.error(
                f"OpenAI HTTP error: {e.code}",
                extra={"status_code": e.code, "body": error_body[:500]}
            )
            return _failed(f"Translation failed ({e.code})", status_code=e.code, body=error_body)

        except urllib.error.URLError as e:
            logger.error(f"OpenAI request failed: {e}")
            return _failed(f"Translation failed: {e.reason}")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse OpenAI response: {e}")
            return _failed("Translation failed: malformed provider response")

        except (TimeoutError, ConnectionError) as e:
            logger.error(f"OpenAI request failed: {e}")
            return _failed(f"Translation failed: {e}")

        latency_ms = (time.time() - start_time) * 1000

        content = ""
        choices = raw_response.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content") or ""

        usage = raw_response.get("usage") or {}

        logger.debug(
            "OpenAI generation complete",
            extra={
                "model": model,
                "latency_ms": round(latency_ms, 2),
                "tokens": usage.get("total_tokens"),
            }
        )

        if not content.strip():
            raw_response = {**raw_response, "error": "Translation failed: empty model response"}

        return LLMResponse(
            content=content.strip(),
            model=raw_response.get("model", model),
            tokens_used=usage.get("total_tokens"),
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            latency_ms=latency_ms,
            status_code=status_code,
            raw_response=raw_response
        )


# ============================================================================
# CLIENT FACTORY
# ============================================================================

def is_llm_configured() -> bool:
    """True when a provider credential is available."""
    return bool(app_config.OPENAI_API_KEY)


def get_llm_client(config: Optional[LLMConfig] = None) -> LLMClient:
    """
    Factory function to get the configured LLM client.

    Args:
        config: Optional custom configuration (built from env when omitted)

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: if no API key is configured
    """
    if config is None:
        config = LLMConfig(
            model=app_config.OPENAI_TRANSLATE_MODEL,
            base_url=app_config.OPENAI_BASE_URL,
            temperature=app_config.LLM_TEMPERATURE,
            timeout=app_config.LLM_TIMEOUT_SECONDS,
        )

    client = OpenAIClient(config)
    logger.debug("Using OpenAI LLM provider", extra={"model": config.model})
    return client
