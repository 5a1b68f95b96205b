"""GitHub account and repository browsing endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from casegen.api.deps import GitHubClientFactory, get_github_client_factory, get_settings, require_session
from casegen.api.errors import UpstreamFailure
from casegen.config import Settings
from casegen.github.errors import GitHubError
from casegen.github.models import ContentEntry, Repository, User, normalize_contents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["repos"])


@router.get("/user", response_model=User)
async def get_user(
    token: str = Depends(require_session),
    github: GitHubClientFactory = Depends(get_github_client_factory),
) -> dict[str, Any]:
    """Get the profile of the signed-in GitHub account."""
    try:
        async with github(token) as client:
            return await client.get_authenticated_user()
    except GitHubError as e:
        logger.exception("Error fetching user")
        raise UpstreamFailure("Failed to fetch user") from e


@router.get("/repositories", response_model=list[Repository])
async def list_repositories(
    token: str = Depends(require_session),
    github: GitHubClientFactory = Depends(get_github_client_factory),
    settings: Settings = Depends(get_settings),
) -> list[dict[str, Any]]:
    """List the account's repositories, most recently updated first."""
    try:
        async with github(token) as client:
            return await client.list_repositories(limit=settings.github.repo_list_limit)
    except GitHubError as e:
        logger.exception("Error fetching repositories")
        raise UpstreamFailure("Failed to fetch repositories") from e


@router.get("/repository/{owner}/{repo}/contents", response_model=list[ContentEntry])
async def get_repository_contents(
    owner: str,
    repo: str,
    path: str = Query("", description="Directory or file path, root when empty"),
    token: str = Depends(require_session),
    github: GitHubClientFactory = Depends(get_github_client_factory),
) -> list[ContentEntry]:
    """List a directory, or return a single file as a one-entry list."""
    try:
        async with github(token) as client:
            raw = await client.get_contents(owner, repo, path)
    except GitHubError as e:
        logger.exception(f"Error fetching contents of {owner}/{repo}/{path}")
        raise UpstreamFailure("Failed to fetch repository contents") from e
    return normalize_contents(raw)
