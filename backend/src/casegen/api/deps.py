"""FastAPI dependency injection functions."""

from functools import lru_cache
from typing import Callable

from fastapi import Depends, Header

from casegen.api.errors import UnauthorizedError
from casegen.config import Settings, load_settings
from casegen.generation.service import TestGenerationService
from casegen.github.client import GitHubClient
from casegen.llm.client import LLMClient
from casegen.sessions.store import SessionStore

GitHubClientFactory = Callable[[str], GitHubClient]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return load_settings()


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    global _session_store
    if _session_store is None:
        settings = get_settings()
        _session_store = SessionStore(
            ttl_minutes=settings.sessions.ttl_minutes,
            max_sessions=settings.sessions.max_sessions,
        )
    return _session_store


def _reset_session_store() -> None:
    """Reset the session store (for testing only)."""
    global _session_store
    _session_store = None


_llm_instance: LLMClient | None = None


def get_llm() -> LLMClient:
    """Get LLM client instance."""
    global _llm_instance
    if _llm_instance is None:
        settings = get_settings()
        _llm_instance = LLMClient(
            provider=settings.llm_provider,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            endpoint=settings.llm_endpoint,
            log_path=settings.llm_log_path,
            max_tokens=settings.llm.max_tokens,
            temperature=settings.llm.default_temperature,
            placeholder_prompt_chars=settings.generation.placeholder_prompt_chars,
        )
    return _llm_instance


def _reset_llm_instance() -> None:
    """Reset LLM client instance (for testing only)."""
    global _llm_instance
    _llm_instance = None


def get_github_client_factory(
    settings: Settings = Depends(get_settings),
) -> GitHubClientFactory:
    """Get a callable that builds a GitHub client for a user token."""

    def factory(token: str) -> GitHubClient:
        return GitHubClient(
            token,
            api_url=settings.github.api_url,
            timeout=settings.github.timeout_seconds,
        )

    return factory


def get_generation_service(
    llm: LLMClient = Depends(get_llm),
    settings: Settings = Depends(get_settings),
) -> TestGenerationService:
    """Get test generation service instance."""
    return TestGenerationService(llm, parallel_limit=settings.generation.parallel_limit)


def get_session_id(authorization: str | None = Header(default=None)) -> str:
    """Extract the session id from an ``Authorization: Bearer`` header.

    Raises:
        UnauthorizedError: If the header is missing or not a bearer token.
    """
    if not authorization:
        raise UnauthorizedError()
    scheme, _, session_id = authorization.partition(" ")
    session_id = session_id.strip()
    if scheme.lower() != "bearer" or not session_id:
        raise UnauthorizedError()
    return session_id


def require_session(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> str:
    """Resolve the bearer session to its GitHub token.

    Raises:
        UnauthorizedError: If the session is unknown or expired.
    """
    credential = store.get(session_id)
    if credential is None:
        raise UnauthorizedError()
    return credential
