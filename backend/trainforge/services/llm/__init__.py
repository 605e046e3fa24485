"""
LLM Service Module

Provides a unified interface to multiple LLM providers via LiteLLM.

Key Components:
- client.py: LLMClient and the ModelClient protocol used by pipeline stages
- usage.py: LLMUsage cost/token records

All client methods return (response, LLMUsage) tuples for consistent cost tracking.
"""

from trainforge.services.llm.client import (
    LLMClient,
    ModelClient,
    build_messages,
    is_transient_error,
)
from trainforge.services.llm.usage import LLMUsage, total_cost

__all__ = [
    "LLMClient",
    "LLMUsage",
    "ModelClient",
    "build_messages",
    "is_transient_error",
    "total_cost",
]
