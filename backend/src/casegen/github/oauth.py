"""GitHub OAuth helper utilities."""

from __future__ import annotations

from urllib.parse import urlencode

import httpx

from casegen.config import Settings
from casegen.constants.github import GITHUB_AUTHORIZE_URL, GITHUB_OAUTH_SCOPE, GITHUB_TOKEN_URL
from casegen.github.errors import GitHubError, OAuthError


def _require_github_credentials(settings: Settings) -> None:
    if not settings.oauth_configured:
        raise OAuthError(
            "Configure OAuth",
            message="GitHub OAuth credentials are not configured. Set GITHUB_CLIENT_ID/SECRET.",
        )


def build_authorize_url(settings: Settings, redirect_uri: str) -> str:
    """Build the GitHub authorization URL the browser is sent to.

    Args:
        settings: Application settings with the OAuth client id.
        redirect_uri: Absolute URL of the callback endpoint.
    """
    _require_github_credentials(settings)
    query = urlencode(
        {
            "client_id": settings.github_client_id,
            "redirect_uri": redirect_uri,
            "scope": GITHUB_OAUTH_SCOPE,
        }
    )
    return f"{GITHUB_AUTHORIZE_URL}?{query}"


async def exchange_code_for_token(
    settings: Settings,
    code: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Exchange an authorization code for a user access token.

    Args:
        settings: Application settings with the OAuth client credentials.
        code: The ``code`` query parameter GitHub redirected back with.
        transport: Optional httpx transport (tests).

    Returns:
        The access token.

    Raises:
        OAuthError: If credentials are missing or GitHub returns no token.
        GitHubError: If the token endpoint cannot be reached or errors.
    """
    _require_github_credentials(settings)

    try:
        async with httpx.AsyncClient(timeout=settings.github.timeout_seconds, transport=transport) as client:
            token_response = await client.post(
                GITHUB_TOKEN_URL,
                headers={"Accept": "application/json"},
                data={
                    "client_id": settings.github_client_id,
                    "client_secret": settings.github_client_secret,
                    "code": code,
                },
            )
            token_response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise GitHubError(
            "Exchange OAuth code", message=str(e), status_code=e.response.status_code
        ) from e
    except httpx.HTTPError as e:
        raise GitHubError("Exchange OAuth code", message=str(e)) from e

    token_data = token_response.json()
    access_token = token_data.get("access_token")
    if not access_token:
        # GitHub reports bad or reused codes with 200 and an "error" field
        raise OAuthError(
            "Exchange OAuth code",
            message=token_data.get("error_description") or token_data.get("error") or "No access token returned",
        )
    return access_token
