# backend/src/casegen/config.py
"""Configuration system for the casegen backend.

This module handles loading settings from environment variables and an
optional INI file, providing sensible defaults for every tunable value.
"""

from configparser import ConfigParser
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional
import os

from casegen.constants.github import (
    DEFAULT_BASE_BRANCH,
    DEFAULT_BRANCH_NAME,
    GITHUB_API_URL,
    REPOSITORY_LIST_LIMIT,
)
from casegen.constants.llm import DEFAULT_TEMPERATURE, MAX_TOKENS, PLACEHOLDER_PROMPT_CHARS
from casegen.constants.sessions import MAX_SESSIONS, SESSION_TTL_MINUTES


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# Schema: section -> key -> (type, default, min, max, description)
CONFIG_SCHEMA: dict[str, dict[str, tuple[type, Any, Any, Any, str]]] = {
    "sessions": {
        "ttl_minutes": (int, SESSION_TTL_MINUTES, 1, None, "Idle minutes before a session expires"),
        "max_sessions": (int, MAX_SESSIONS, 1, None, "Live sessions kept in memory"),
    },
    "github": {
        "api_url": (str, GITHUB_API_URL, None, None, "GitHub REST API base URL"),
        "repo_list_limit": (int, REPOSITORY_LIST_LIMIT, 1, 100, "Repositories per listing"),
        "default_base_branch": (str, DEFAULT_BASE_BRANCH, None, None, "Pull request base"),
        "default_branch_name": (str, DEFAULT_BRANCH_NAME, None, None, "Branch for generated tests"),
        "cleanup_orphaned_branch": (
            bool,
            True,
            None,
            None,
            "Delete the created branch when a later pull request step fails",
        ),
        "timeout_seconds": (float, 30.0, 1.0, 600.0, "HTTP timeout for GitHub calls"),
    },
    "generation": {
        "parallel_limit": (int, 1, 1, 20, "Concurrent summary generations per request"),
        "placeholder_prompt_chars": (
            int,
            PLACEHOLDER_PROMPT_CHARS,
            0,
            10_000,
            "Prompt characters echoed by the placeholder generator",
        ),
    },
    "llm": {
        "max_tokens": (int, MAX_TOKENS, 64, 32768, "Max response tokens"),
        "default_temperature": (float, DEFAULT_TEMPERATURE, 0.0, 2.0, "Default LLM temperature"),
    },
}


@dataclass(frozen=True)
class SessionsConfig:
    """Session store configuration."""

    ttl_minutes: int
    max_sessions: int


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API configuration."""

    api_url: str
    repo_list_limit: int
    default_base_branch: str
    default_branch_name: str
    cleanup_orphaned_branch: bool
    timeout_seconds: float


@dataclass(frozen=True)
class GenerationConfig:
    """Test generation configuration."""

    parallel_limit: int
    placeholder_prompt_chars: int


@dataclass(frozen=True)
class LLMConfig:
    """LLM client configuration."""

    max_tokens: int
    default_temperature: float


def _load_section(
    parser: ConfigParser, section: str, schema: dict[str, tuple[type, Any, Any, Any, str]]
) -> dict[str, Any]:
    """Load and validate a configuration section.

    Args:
        parser: ConfigParser instance with loaded config
        section: Section name to load
        schema: Schema definition for the section

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If validation fails
    """
    result = {}

    for key, (typ, default, min_val, max_val, _) in schema.items():
        if parser.has_option(section, key):
            raw_value = parser.get(section, key)
            value: bool | int | float | str
            try:
                if typ is bool:
                    value = raw_value.lower() in ("true", "1", "yes", "on")
                elif typ is int:
                    value = int(raw_value)
                elif typ is float:
                    value = float(raw_value)
                else:
                    value = raw_value
            except ValueError as e:
                raise ConfigError(
                    f"Invalid value for [{section}].{key}: {raw_value!r} (expected {typ.__name__})"
                ) from e
        else:
            value = default

        # Validate range for numeric types
        if typ in (int, float) and value is not None:
            if min_val is not None and value < min_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but minimum is {min_val}"
                )
            if max_val is not None and value > max_val:
                raise ConfigError(
                    f"Value for [{section}].{key} is {value}, but maximum is {max_val}"
                )

        result[key] = value

    return result


def _section_defaults(section: str) -> dict[str, Any]:
    return {key: default for key, (_, default, _, _, _) in CONFIG_SCHEMA[section].items()}


def _load_config(config_path: Optional[Path] = None) -> "Config":
    """Load configuration from an INI file (internal use only).

    Environment-derived fields are left at their defaults; load_settings()
    fills them in.

    Args:
        config_path: Path to config file. If None, uses defaults from schema.

    Returns:
        Config object with all sections populated.

    Raises:
        ConfigError: If validation fails
    """
    parser = ConfigParser()

    if config_path and config_path.exists():
        parser.read(config_path)

    return Config(
        sessions=SessionsConfig(**_load_section(parser, "sessions", CONFIG_SCHEMA["sessions"])),
        github=GitHubConfig(**_load_section(parser, "github", CONFIG_SCHEMA["github"])),
        generation=GenerationConfig(
            **_load_section(parser, "generation", CONFIG_SCHEMA["generation"])
        ),
        llm=LLMConfig(**_load_section(parser, "llm", CONFIG_SCHEMA["llm"])),
    )


@dataclass(frozen=True)
class Config:
    """Complete application configuration."""

    github_client_id: Optional[str] = None
    github_client_secret: Optional[str] = None
    frontend_url: str = "http://localhost:5173"
    backend_url: Optional[str] = None
    port: int = 3001
    active_provider: str = "openai"
    active_model: str = "gpt-3.5-turbo"
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    ollama_endpoint: str = "http://localhost:11434"
    llm_log_path: Optional[Path] = None

    # Section configs default to the schema values when not provided
    sessions: SessionsConfig = None  # type: ignore[assignment]
    github: GitHubConfig = None  # type: ignore[assignment]
    generation: GenerationConfig = None  # type: ignore[assignment]
    llm: LLMConfig = None  # type: ignore[assignment]

    def __post_init__(self):
        """Initialize section configs with defaults if not provided."""
        if self.sessions is None:
            object.__setattr__(self, "sessions", SessionsConfig(**_section_defaults("sessions")))
        if self.github is None:
            object.__setattr__(self, "github", GitHubConfig(**_section_defaults("github")))
        if self.generation is None:
            object.__setattr__(
                self, "generation", GenerationConfig(**_section_defaults("generation"))
            )
        if self.llm is None:
            object.__setattr__(self, "llm", LLMConfig(**_section_defaults("llm")))

    @property
    def oauth_configured(self) -> bool:
        """Whether GitHub OAuth client credentials are present."""
        return bool(self.github_client_id and self.github_client_secret)

    @property
    def llm_provider(self) -> str:
        """LLM provider name."""
        return self.active_provider

    @property
    def llm_model(self) -> str:
        """LLM model name."""
        return self.active_model

    @property
    def llm_api_key(self) -> Optional[str]:
        """API key for the active LLM provider."""
        provider_keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
        }
        return provider_keys.get(self.active_provider)

    @property
    def llm_endpoint(self) -> Optional[str]:
        """Endpoint for LLM provider (mainly for Ollama)."""
        if self.active_provider == "ollama":
            return self.ollama_endpoint
        return None


PROVIDER_DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-5-sonnet-20241022",
    "google": "gemini-1.5-pro",
    "ollama": "llama2",
}


def _openai_key() -> Optional[str]:
    # AI_API_KEY is the deployment-facing name; OPENAI_API_KEY wins if both are set
    return os.getenv("OPENAI_API_KEY") or os.getenv("AI_API_KEY")


def _detect_provider_from_keys() -> tuple[str, str]:
    """Auto-detect provider from available API keys.

    Returns:
        Tuple of (provider, model) based on available keys.
        Falls back to openai without a key, which puts the generator in
        placeholder mode.
    """
    if _openai_key():
        return ("openai", PROVIDER_DEFAULT_MODELS["openai"])
    if os.getenv("ANTHROPIC_API_KEY"):
        return ("anthropic", PROVIDER_DEFAULT_MODELS["anthropic"])
    if os.getenv("GOOGLE_API_KEY"):
        return ("google", PROVIDER_DEFAULT_MODELS["google"])
    return ("openai", PROVIDER_DEFAULT_MODELS["openai"])


@lru_cache(maxsize=1)
def load_settings() -> Config:
    """Load settings from environment variables and config file.

    Settings are cached for the lifetime of the application.
    Use load_settings.cache_clear() to reload settings.

    Returns:
        Config object populated from environment variables and config file.

    Raises:
        ConfigError: If the config file or a numeric variable is invalid.
    """
    config_file_str = os.getenv("CASEGEN_CONFIG")
    config_file = Path(config_file_str) if config_file_str else None
    base_config = _load_config(config_file)

    active_provider = os.getenv("ACTIVE_PROVIDER")
    active_model = os.getenv("ACTIVE_MODEL")

    if not active_provider:
        active_provider, detected_model = _detect_provider_from_keys()
        if not active_model:
            active_model = detected_model
    elif not active_model:
        active_model = PROVIDER_DEFAULT_MODELS.get(active_provider, "gpt-3.5-turbo")

    port_str = os.getenv("PORT", "3001")
    try:
        port = int(port_str)
    except ValueError as e:
        raise ConfigError(f"Invalid value for PORT: {port_str!r} (expected int)") from e

    llm_log_path_str = os.getenv("LLM_LOG_PATH")

    return Config(
        github_client_id=os.getenv("GITHUB_CLIENT_ID"),
        github_client_secret=os.getenv("GITHUB_CLIENT_SECRET"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
        backend_url=os.getenv("BACKEND_URL"),
        port=port,
        active_provider=active_provider,
        active_model=active_model,
        openai_api_key=_openai_key(),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        ollama_endpoint=os.getenv("OLLAMA_ENDPOINT", "http://localhost:11434"),
        llm_log_path=Path(llm_log_path_str) if llm_log_path_str else None,
        sessions=base_config.sessions,
        github=base_config.github,
        generation=base_config.generation,
        llm=base_config.llm,
    )


Settings = Config
