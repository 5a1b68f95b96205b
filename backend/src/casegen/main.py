"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Logging constants defined here (not in constants/) because logging.basicConfig()
# must run before any module imports that might create loggers.
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=logging.INFO,
)

# Unify uvicorn loggers with app format
for uvicorn_logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    uvicorn_logger.addHandler(handler)

from casegen import __version__  # noqa: E402
from casegen.api.deps import get_session_store, get_settings  # noqa: E402
from casegen.api.errors import register_exception_handlers  # noqa: E402
from casegen.api.routers import auth, repos, tests  # noqa: E402
from casegen.config import Settings  # noqa: E402

logger = logging.getLogger(__name__)


def _report_configuration(settings: Settings) -> None:
    """Log which integrations are usable with the current environment."""
    if not settings.oauth_configured:
        logger.warning("GITHUB_CLIENT_ID/GITHUB_CLIENT_SECRET not set - GitHub login will not work")

    if settings.llm_api_key or settings.llm_provider == "ollama":
        logger.info(f"AI provider: {settings.llm_provider} ({settings.llm_model})")
    else:
        logger.warning("No AI API key configured - generation will return placeholder text")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler for startup and shutdown events.

    On startup:
    - Reports missing OAuth credentials and the AI key status

    On shutdown:
    - Drops expired sessions
    """
    settings = get_settings()
    _report_configuration(settings)
    logger.info(f"Test case generator started, frontend at {settings.frontend_url}")

    yield

    removed = get_session_store().cleanup_expired()
    if removed > 0:
        logger.info(f"Dropped {removed} expired session(s)")


app = FastAPI(
    title="Test Case Generator",
    description="Generate test cases for GitHub repositories with an LLM",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(auth.router)
app.include_router(repos.router)
app.include_router(tests.router)


def run() -> None:
    """Serve the app with uvicorn on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
