# backend/src/casegen/llm/__init__.py
"""LLM client abstraction."""

from casegen.llm.client import (
    Completion,
    LLMAuthenticationError,
    LLMClient,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    placeholder_response,
)

__all__ = [
    "Completion",
    "LLMAuthenticationError",
    "LLMClient",
    "LLMConnectionError",
    "LLMError",
    "LLMRateLimitError",
    "placeholder_response",
]
