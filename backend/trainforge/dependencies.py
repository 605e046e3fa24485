"""
FastAPI Dependencies

Provides the model client and module assembler to route handlers. Tests
replace these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from trainforge.services.llm.client import LLMClient, ModelClient
from trainforge.services.processing.pipeline import ModuleAssembler


@lru_cache()
def get_llm_client() -> ModelClient:
    """Get the process-wide LLM client used by the HTTP layer."""
    return LLMClient()


def get_module_assembler(
    llm_client: ModelClient = Depends(get_llm_client),
) -> ModuleAssembler:
    """Build a ModuleAssembler bound to the injected model client."""
    return ModuleAssembler(llm_client)
