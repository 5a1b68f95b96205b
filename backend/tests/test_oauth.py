"""GitHub OAuth helper tests."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from casegen.config import Config
from casegen.github import GitHubError, OAuthError
from casegen.github.oauth import build_authorize_url, exchange_code_for_token


@pytest.fixture
def settings() -> Config:
    return Config(github_client_id="client-id", github_client_secret="client-secret")


def test_authorize_url_requests_repo_scope(settings):
    url = build_authorize_url(settings, "http://localhost:3001/auth/github/callback")

    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://github.com/login/oauth/authorize"
    assert query["client_id"] == ["client-id"]
    assert query["scope"] == ["repo"]
    assert query["redirect_uri"] == ["http://localhost:3001/auth/github/callback"]


def test_authorize_url_requires_credentials():
    with pytest.raises(OAuthError):
        build_authorize_url(Config(), "http://localhost/callback")


async def test_exchange_code_returns_access_token(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = parse_qs(request.content.decode())
        seen["accept"] = request.headers["Accept"]
        return httpx.Response(200, json={"access_token": "gho_new", "token_type": "bearer"})

    token = await exchange_code_for_token(settings, "the-code", transport=httpx.MockTransport(handler))

    assert token == "gho_new"
    assert seen["url"] == "https://github.com/login/oauth/access_token"
    assert seen["body"]["code"] == ["the-code"]
    assert seen["body"]["client_secret"] == ["client-secret"]
    assert seen["accept"] == "application/json"


async def test_exchange_bad_code_raises_oauth_error(settings):
    """GitHub reports bad codes with a 200 and an error field."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"error": "bad_verification_code", "error_description": "The code is incorrect"},
        )

    with pytest.raises(OAuthError) as exc_info:
        await exchange_code_for_token(settings, "stale", transport=httpx.MockTransport(handler))

    assert "The code is incorrect" in str(exc_info.value)


async def test_exchange_http_error_raises_github_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(GitHubError) as exc_info:
        await exchange_code_for_token(settings, "code", transport=httpx.MockTransport(handler))

    assert exc_info.value.status_code == 503
