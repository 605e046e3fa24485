"""
LLM Usage and Cost Types

Defines the LLMUsage dataclass and helpers that read token counts and cost
from LiteLLM responses. Every model call returns one LLMUsage so callers can
report the cost of a preview.

Usage:
    from trainforge.services.llm.usage import LLMUsage, total_cost

    data, usage = await llm_client.analyze(prompt)
    print(f"Cost so far: ${total_cost([usage]):.4f}")
"""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Iterable, Optional

import litellm

logger = logging.getLogger(__name__)


@dataclass
class LLMUsage:
    """
    Structured usage data for one LLM call.

    Attributes:
        request_id: Unique identifier for this request
        model: Full model identifier (e.g., "openai/gpt-4o")
        provider: Provider prefix of the model identifier
        request_type: "text" for chat completions
        prompt_tokens / completion_tokens / total_tokens: Token counts
        cost_usd: Total cost in USD, when LiteLLM can price the model
        pipeline: Calling pipeline, for attribution
        operation: PipelineOperation value, for attribution
        content_id: Optional document/module reference
        latency_ms: Request latency in milliseconds
        success: Whether the request succeeded
        error_message: Error message if request failed
    """

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    model: str = ""
    provider: str = ""
    request_type: str = "text"

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    cost_usd: Optional[float] = None

    pipeline: Optional[str] = None
    operation: Optional[str] = None
    content_id: Optional[str] = None

    latency_ms: Optional[int] = None
    success: bool = True
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def total_cost(self) -> float:
        """Return total cost, defaulting to 0 if not available."""
        return self.cost_usd or 0.0

    def __str__(self) -> str:
        cost_str = f"${self.cost_usd:.4f}" if self.cost_usd else "N/A"
        tokens_str = str(self.total_tokens) if self.total_tokens else "N/A"
        return f"LLMUsage({self.model}, {self.operation}, cost={cost_str}, tokens={tokens_str})"


def extract_provider(model: str) -> str:
    """Return the provider prefix of a LiteLLM model id, or "unknown"."""
    if "/" in model:
        return model.split("/")[0]
    return "unknown"


def _enum_value(value) -> Optional[str]:
    return getattr(value, "value", value)


def extract_usage_from_response(
    response,
    model: str,
    latency_ms: int,
    pipeline=None,
    operation=None,
    content_id: Optional[str] = None,
) -> LLMUsage:
    """
    Build an LLMUsage from a LiteLLM completion response.

    Token counts come from response.usage and cost from LiteLLM's hidden
    params, falling back to litellm.completion_cost when absent.

    Args:
        response: LiteLLM response object
        model: Model identifier used for the request
        latency_ms: Measured latency in milliseconds
        pipeline: Optional PipelineName for attribution
        operation: Optional PipelineOperation for attribution
        content_id: Optional reference for attribution

    Returns:
        Populated LLMUsage
    """
    usage = LLMUsage(
        model=model,
        provider=extract_provider(model),
        latency_ms=latency_ms,
        pipeline=_enum_value(pipeline),
        operation=_enum_value(operation),
        content_id=content_id,
    )

    if getattr(response, "usage", None):
        usage.prompt_tokens = getattr(response.usage, "prompt_tokens", None)
        usage.completion_tokens = getattr(response.usage, "completion_tokens", None)
        usage.total_tokens = getattr(response.usage, "total_tokens", None)

    hidden = getattr(response, "_hidden_params", None)
    if isinstance(hidden, dict):
        usage.cost_usd = hidden.get("response_cost")

    if usage.cost_usd is None and usage.total_tokens:
        try:
            usage.cost_usd = litellm.completion_cost(completion_response=response)
        except Exception as e:
            logger.debug(f"Cost calculation unavailable for {model}: {e}")

    return usage


def create_error_usage(
    model: str,
    latency_ms: int,
    error_message: str,
    pipeline=None,
    operation=None,
    content_id: Optional[str] = None,
) -> LLMUsage:
    """Create an LLMUsage record for a failed request."""
    return LLMUsage(
        model=model,
        provider=extract_provider(model),
        latency_ms=latency_ms,
        success=False,
        error_message=error_message,
        pipeline=_enum_value(pipeline),
        operation=_enum_value(operation),
        content_id=content_id,
    )


def total_cost(usages: Iterable[LLMUsage]) -> float:
    """Sum the known cost of a collection of usages."""
    return sum(u.total_cost for u in usages)
