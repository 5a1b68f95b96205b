# backend/src/casegen/llm/client.py
"""LiteLLM-based LLM client."""

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    OpenAIError,
    PermissionDeniedError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
    UnprocessableEntityError,
)

from casegen.constants.llm import (
    DEFAULT_TEMPERATURE,
    MAX_TOKENS,
    PLACEHOLDER_HEADER,
    PLACEHOLDER_PROMPT_CHARS,
)

logger = logging.getLogger(__name__)

# Providers that run without an API key
KEYLESS_PROVIDERS = frozenset({"ollama"})


class LLMError(Exception):
    """Base exception for LLM client errors."""

    pass


class LLMConnectionError(LLMError):
    """Raised when unable to connect to the LLM provider."""

    pass


class LLMAuthenticationError(LLMError):
    """Raised when authentication with the LLM provider fails."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when rate limited by the LLM provider."""

    pass


@dataclass(frozen=True)
class Completion:
    """Generated text and whether it came from the placeholder generator."""

    text: str
    mocked: bool = False


def placeholder_response(prompt: str, prompt_chars: int = PLACEHOLDER_PROMPT_CHARS) -> str:
    """Deterministic stand-in for a model response.

    Args:
        prompt: The prompt that would have been sent.
        prompt_chars: How much of the prompt to echo back.
    """
    return f"{PLACEHOLDER_HEADER}{prompt[:prompt_chars]}..."


class LLMClient:
    """Unified LLM client supporting multiple providers via LiteLLM.

    Without an API key (for providers that need one) the client runs in
    placeholder mode: ``complete`` returns ``placeholder_response`` marked as
    mocked and never touches the network.
    """

    def __init__(
        self,
        provider: str,
        model: str,
        api_key: str | None = None,
        endpoint: str | None = None,
        log_path: Path | None = None,
        max_tokens: int = MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        placeholder_prompt_chars: int = PLACEHOLDER_PROMPT_CHARS,
    ):
        """Initialize LLM client.

        Args:
            provider: LLM provider (openai, anthropic, google, ollama).
            model: Model name.
            api_key: Optional API key. Required for real calls to hosted providers.
            endpoint: Optional custom endpoint (for Ollama).
            log_path: Optional path to JSONL log file for query logging.
            max_tokens: Default response token budget.
            temperature: Default sampling temperature.
            placeholder_prompt_chars: Prompt characters echoed in placeholder mode.
        """
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.endpoint = endpoint
        self.log_path = log_path
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.placeholder_prompt_chars = placeholder_prompt_chars

    @property
    def is_configured(self) -> bool:
        """Whether real completions can be requested."""
        return bool(self.api_key) or self.provider in KEYLESS_PROVIDERS

    def _log_query(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        response: str | None,
        duration_ms: int,
        error: str | None,
    ) -> None:
        """Append a query to the JSONL log file, if one is configured."""
        if not self.log_path:
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": self.provider,
            "model": self.model,
            "request": {
                "prompt": prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            "response": response,
            "duration_ms": duration_ms,
            "error": error,
        }

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Could not write LLM query log {self.log_path}: {e}")

    def _log_failure(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        start_time: float,
        error: Exception,
    ) -> None:
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.error(f"LLM call to {self._get_model_string()} failed after {duration_ms}ms: {error}")
        self._log_query(prompt, temperature, max_tokens, None, duration_ms, str(error))

    def _get_model_string(self) -> str:
        """Get LiteLLM model string.

        Returns:
            Model string in provider/model format.
        """
        if self.provider == "openai":
            return self.model  # OpenAI is default
        return f"{self.provider}/{self.model}"

    async def generate(
        self,
        prompt: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate completion from prompt.

        Args:
            prompt: User prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum response tokens.

        Returns:
            Generated text response.

        Raises:
            LLMError: If the provider call fails.
        """
        if temperature is None:
            temperature = self.temperature
        if max_tokens is None:
            max_tokens = self.max_tokens

        kwargs = {
            "model": self._get_model_string(),
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if self.api_key:
            kwargs["api_key"] = self.api_key

        if self.endpoint and self.provider == "ollama":
            kwargs["api_base"] = self.endpoint

        start_time = time.perf_counter()
        try:
            response = await acompletion(**kwargs)
            result: str = str(response.choices[0].message.content or "")
        except AuthenticationError as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMAuthenticationError(f"Authentication failed: {e}") from e
        except RateLimitError as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMRateLimitError(f"Rate limit exceeded: {e}") from e
        except APIConnectionError as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMConnectionError(f"Connection failed: {e}") from e
        except Timeout as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMConnectionError(f"Request timed out: {e}") from e
        except (APIError, BadRequestError, NotFoundError, InternalServerError, ServiceUnavailableError) as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMError(f"LLM API error: {e}") from e
        except (PermissionDeniedError, UnprocessableEntityError, OpenAIError) as e:
            self._log_failure(prompt, temperature, max_tokens, start_time, e)
            raise LLMError(f"LLM API error: {e}") from e

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        self._log_query(prompt, temperature, max_tokens, result, duration_ms, None)
        return result

    async def complete(self, prompt: str) -> Completion:
        """Generate text, falling back to a placeholder when unconfigured.

        Only the missing-key case falls back. A configured provider that fails
        raises, so callers can report the failure.

        Args:
            prompt: User prompt.

        Returns:
            The completion, with ``mocked`` set for placeholder text.
        """
        if not self.is_configured:
            return Completion(
                text=placeholder_response(prompt, self.placeholder_prompt_chars),
                mocked=True,
            )
        return Completion(text=await self.generate(prompt))
