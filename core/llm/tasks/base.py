"""
Base LLM Task - Abstract interface for LLM-powered tasks.

Each task encapsulates:
    - Prompt engineering (system prompt, user prompt formatting)
    - Response parsing and validation
    - Error handling: execute() never raises, failures come back as a result
      with success=False and an error message

Design Patterns:
    - Template Method: base class defines execution flow, subclasses implement specifics
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TypeVar, Generic, Optional, Any, Dict

from core.llm.client import LLMClient, LLMResponse, get_llm_client
from core.logging import get_logger

logger = get_logger("llm-task")


# ============================================================================
# BASE RESULT CLASS
# ============================================================================

@dataclass
class TaskResult:
    """
    Base class for task results.

    Attributes:
        success: Whether the task completed successfully
        error: Error message if task failed
        latency_ms: Task execution time in milliseconds
        model: Model used for the task
        metadata: Additional task-specific metadata
    """
    success: bool = True
    error: Optional[str] = None
    latency_ms: Optional[float] = None
    model: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return not self.success


T = TypeVar("T", bound=TaskResult)


# ============================================================================
# ABSTRACT TASK CLASS
# ============================================================================

class LLMTask(ABC, Generic[T]):
    """
    Abstract base class for LLM-powered tasks.

    Subclasses implement build_prompt(), parse_response() and
    _create_error_result(); get_system_prompt(), get_response_format() and
    validate_input() are optional hooks.

    execute():
        1. Validate inputs
        2. Build prompt
        3. Generate LLM response
        4. Parse and return result
    """

    def __init__(self, client: Optional[LLMClient] = None):
        self._client = client or get_llm_client()

    @property
    def client(self) -> LLMClient:
        return self._client

    @abstractmethod
    def build_prompt(self, *args, **kwargs) -> str:
        pass

    @abstractmethod
    def parse_response(self, response: LLMResponse, *args, **kwargs) -> T:
        """
        Parse LLM response into structured result.

        Raise ValueError for content that does not meet the task's contract;
        execute() turns it into an error result.
        """
        pass

    @abstractmethod
    def _create_error_result(self, error: str, response: Optional[LLMResponse] = None) -> T:
        pass

    def get_system_prompt(self, *args, **kwargs) -> Optional[str]:
        return None

    def get_response_format(self) -> Optional[str]:
        """Structured output mode to request (e.g. "json_object"), if any."""
        return None

    def validate_input(self, *args, **kwargs) -> Optional[str]:
        """Return an error message if inputs are invalid, None if valid."""
        return None

    def execute(self, *args, **kwargs) -> T:
        validation_error = self.validate_input(*args, **kwargs)
        if validation_error:
            logger.warning(f"Task input validation failed: {validation_error}")
            return self._create_error_result(validation_error)

        prompt = self.build_prompt(*args, **kwargs)
        system_prompt = self.get_system_prompt(*args, **kwargs)

        llm_options = dict(kwargs.get("llm_options") or {})
        response_format = self.get_response_format()
        if response_format:
            llm_options.setdefault("response_format", response_format)

        response = self._client.generate(
            prompt=prompt,
            system_prompt=system_prompt,
            **llm_options
        )

        if not response.success:
            error_msg = response.error or "LLM generation failed"
            logger.warning(f"LLM generation failed: {error_msg}")
            return self._create_error_result(error_msg, response)

        try:
            result = self.parse_response(response, *args, **kwargs)
        except ValueError as e:
            logger.warning(f"LLM response rejected: {e}", extra={"model": response.model})
            return self._create_error_result(str(e), response)

        result.latency_ms = response.latency_ms
        result.model = response.model
        return result
