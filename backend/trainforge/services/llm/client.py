"""
LLM Client supporting multiple providers via LiteLLM.

LiteLLM provides a unified interface to 100+ LLM providers using
the format "provider/model-name". Key features:
- Operation-based model selection via PipelineOperation enum
- Cost tracking via LLMUsage
- Per-call timeout
- Retries with exponential backoff for transient failures only
- Local recovery of malformed JSON (never retried)

See: https://docs.litellm.ai/

The pipeline stages depend on the ModelClient protocol, not on LLMClient,
so any object with analyze/generate_questions/suggest_modules coroutines
can be injected (tests pass mocks).

Usage:
    from trainforge.services.llm import LLMClient

    client = LLMClient()
    data, usage = await client.analyze("Summarize this document ...")
    print(f"Cost: ${usage.total_cost:.4f}")
"""

import logging
import os
import time
from typing import Any, Optional, Protocol, Union

import litellm
from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    InternalServerError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from trainforge.config.processing import processing_settings
from trainforge.config.settings import settings
from trainforge.enums.pipeline import PipelineName, PipelineOperation
from trainforge.middleware.error_handling import LLMError, LLMTransientError
from trainforge.services.llm.usage import (
    LLMUsage,
    create_error_usage,
    extract_usage_from_response,
)
from trainforge.utils.text_utils import extract_json_from_response

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"

# HTTP statuses worth another attempt
TRANSIENT_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})

_TRANSIENT_EXCEPTIONS = (
    Timeout,
    APIConnectionError,
    RateLimitError,
    ServiceUnavailableError,
    InternalServerError,
    TimeoutError,
    ConnectionError,
)


class ModelClient(Protocol):
    """Interface the pipeline stages use to reach a language model."""

    async def analyze(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]: ...

    async def generate_questions(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]: ...

    async def suggest_modules(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]: ...


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def is_transient_error(error: BaseException) -> bool:
    """
    Decide whether a failed LLM call is worth retrying.

    Timeouts, connection failures, rate limits and 5xx responses are
    transient. Authentication, bad-request and not-found errors are not.
    """
    if isinstance(error, _TRANSIENT_EXCEPTIONS):
        return True
    status_code = getattr(error, "status_code", None)
    return status_code in TRANSIENT_STATUS_CODES


def _adjust_temperature_for_model(model: str, temperature: float) -> float:
    """
    Adjust temperature based on model requirements.

    Gemini 3 models require temperature=1.0.
    """
    if "gemini-3" in model.lower():
        return 1.0
    return temperature


class LLMClient:
    """
    LLM client with operation-based model selection and usage tracking.

    Each public method returns (parsed JSON or None, LLMUsage). A None
    payload means the model answered but the answer was not valid JSON;
    stages fall back to their defaults in that case.

    Raises LLMTransientError once retries for a transient failure are
    exhausted, and LLMError immediately for anything else.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        """Initialize the LLM client and validate API keys."""
        self.timeout_seconds = timeout_seconds or processing_settings.LLM_TIMEOUT_SECONDS
        self.models: dict[PipelineOperation, Optional[str]] = {
            PipelineOperation.CONTENT_ANALYSIS: processing_settings.MODEL_ANALYSIS,
            PipelineOperation.QUIZ_GENERATION: processing_settings.MODEL_QUIZ,
            PipelineOperation.REVIEW_SUGGESTION: processing_settings.MODEL_REVIEW,
        }
        self._validate_api_keys()

    def _validate_api_keys(self):
        """Warn when no provider API key is configured."""
        available_keys = []

        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available_keys.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available_keys.append("Anthropic")
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available_keys.append("Google/Gemini")

        if not available_keys:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {available_keys}")

    def get_model_for_operation(self, operation: Union[PipelineOperation, str]) -> str:
        """
        Get the configured model for a specific operation.

        Args:
            operation: PipelineOperation enum value

        Returns:
            Model identifier in LiteLLM format (provider/model-name)
        """
        if isinstance(operation, str):
            try:
                operation = PipelineOperation(operation)
            except ValueError:
                logger.warning(f"Unknown operation type: {operation}, using default model")
                return settings.TEXT_MODEL
        return self.models.get(operation) or settings.TEXT_MODEL

    @retry(
        retry=retry_if_exception_type(LLMTransientError),
        stop=stop_after_attempt(processing_settings.MAX_LLM_RETRIES),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def complete(
        self,
        operation: Union[PipelineOperation, str],
        messages: list[dict],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        json_mode: bool = False,
        pipeline: Optional[Union[PipelineName, str]] = None,
        content_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> tuple[Optional[Any], LLMUsage]:
        """
        Generate a completion using the appropriate model for the operation.

        Args:
            operation: PipelineOperation used for model selection and cost attribution
            messages: Chat messages in OpenAI format
            temperature: Sampling temperature (0-1, lower = more deterministic)
            max_tokens: Maximum tokens in response
            json_mode: Request JSON output and parse it. Unparseable output
                is logged and returned as None (not retried).
            pipeline: PipelineName for cost attribution
            content_id: Reference for cost attribution
            model: Optional model override (bypasses operation-based selection)

        Returns:
            Tuple of (response text, or parsed JSON if json_mode, LLMUsage)

        Raises:
            LLMTransientError: Transient failure persisted through all attempts
            LLMError: Non-retryable provider failure
        """
        model = model or self.get_model_for_operation(operation)

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": _adjust_temperature_for_model(model, temperature),
            "max_tokens": max_tokens,
            "timeout": self.timeout_seconds,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        start_time = time.perf_counter()

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            error_usage = create_error_usage(
                model=model,
                latency_ms=latency_ms,
                error_message=str(e),
                pipeline=pipeline,
                operation=operation,
                content_id=content_id,
            )
            details = {"model": model, "operation": error_usage.operation}

            if is_transient_error(e):
                logger.warning(f"Transient LLM failure: {e} (model={model})")
                raise LLMTransientError(
                    f"LLM call failed transiently: {e}", details=details
                ) from e

            logger.error(f"LLM completion failed: {e} (model={model})")
            raise LLMError(f"LLM call failed: {e}", details=details) from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        usage = extract_usage_from_response(
            response=response,
            model=model,
            latency_ms=latency_ms,
            pipeline=pipeline,
            operation=operation,
            content_id=content_id,
        )

        if usage.cost_usd:
            logger.debug(
                f"LLM completion [{model}] - Cost: ${usage.cost_usd:.4f}, "
                f"Tokens: {usage.total_tokens}, Latency: {latency_ms}ms"
            )

        if not getattr(response, "choices", None):
            logger.warning(
                f"Empty completion from {model} for {usage.operation}, "
                f"falling back to defaults"
            )
            return None, usage

        content = response.choices[0].message.content

        if json_mode:
            parsed = extract_json_from_response(content)
            if parsed is None:
                logger.warning(
                    f"Malformed JSON from {model} for {usage.operation}, "
                    f"falling back to defaults"
                )
            return parsed, usage

        return content, usage

    async def analyze(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]:
        """Run a document analysis prompt and return parsed JSON."""
        return await self.complete(
            operation=PipelineOperation.CONTENT_ANALYSIS,
            messages=build_messages(prompt, system_prompt),
            temperature=processing_settings.ANALYSIS_TEMPERATURE,
            max_tokens=processing_settings.ANALYSIS_MAX_TOKENS,
            json_mode=True,
            pipeline=PipelineName.MODULE_BUILDER,
        )

    async def generate_questions(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]:
        """Run a quiz generation prompt and return parsed JSON."""
        return await self.complete(
            operation=PipelineOperation.QUIZ_GENERATION,
            messages=build_messages(prompt, system_prompt),
            temperature=processing_settings.QUIZ_TEMPERATURE,
            max_tokens=processing_settings.QUIZ_MAX_TOKENS,
            json_mode=True,
            pipeline=PipelineName.MODULE_BUILDER,
        )

    async def suggest_modules(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> tuple[Optional[Any], LLMUsage]:
        """Run a review suggestion prompt and return parsed JSON."""
        return await self.complete(
            operation=PipelineOperation.REVIEW_SUGGESTION,
            messages=build_messages(prompt, system_prompt),
            temperature=processing_settings.REVIEW_TEMPERATURE,
            max_tokens=processing_settings.REVIEW_MAX_TOKENS,
            json_mode=True,
            pipeline=PipelineName.QUIZ_REVIEW,
        )
