"""HTTP client for the test generator API, used by the wizard."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from casegen.generation.schemas import (
    CreatePullRequestRequest,
    GeneratedTest,
    GenerateSummariesRequest,
    GenerateTestCodeRequest,
    SourceFile,
    TestSummary,
)
from casegen.github.models import ContentEntry, Repository, User

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:3001"


class ApiError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """Async client for the backend endpoints.

    Holds the session id handed out by the OAuth callback and sends it as a
    bearer token on every request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        session_id: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._session_id = session_id
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_session(self, session_id: str) -> None:
        self._session_id = session_id

    def get_session(self) -> str | None:
        return self._session_id

    def clear_session(self) -> None:
        self._session_id = None

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        headers = {}
        if self._session_id:
            headers["Authorization"] = f"Bearer {self._session_id}"

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}") from e

        if response.is_error:
            raise ApiError(_error_message(response), response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_auth_url(self) -> str:
        data = await self._request("GET", "/auth/github")
        return data["authUrl"]

    async def logout(self) -> None:
        """End the session on the server and forget it locally."""
        await self._request("POST", "/auth/logout")
        self.clear_session()

    async def get_user(self) -> User:
        return User.model_validate(await self._request("GET", "/api/user"))

    async def get_repositories(self) -> list[Repository]:
        data = await self._request("GET", "/api/repositories")
        return [Repository.model_validate(item) for item in data]

    async def get_repository_contents(self, owner: str, repo: str, path: str | None = None) -> list[ContentEntry]:
        """List a directory of a repository, the root when ``path`` is empty."""
        params = {"path": path} if path else None
        url = f"/api/repository/{quote(owner, safe='')}/{quote(repo, safe='')}/contents"
        data = await self._request("GET", url, params=params)
        return [ContentEntry.model_validate(item) for item in data]

    async def fetch_file_content(self, download_url: str) -> str:
        """Fetch raw file text from a download URL.

        The session id is not sent; download URLs point at GitHub, not the API.
        """
        try:
            response = await self._client.get(download_url)
        except httpx.HTTPError as e:
            raise ApiError(f"Failed to load file content: {e}") from e
        if response.is_error:
            raise ApiError("Failed to load file content", response.status_code)
        return response.text

    async def generate_test_summaries(self, files: list[SourceFile]) -> list[TestSummary]:
        body = GenerateSummariesRequest(files=files).model_dump(by_alias=True)
        data = await self._request("POST", "/api/generate-test-summaries", json=body)
        return [TestSummary.model_validate(item) for item in data["testSummaries"]]

    async def generate_test_code(self, request: GenerateTestCodeRequest) -> GeneratedTest:
        data = await self._request("POST", "/api/generate-test-code", json=request.model_dump(by_alias=True))
        return GeneratedTest.model_validate(data)

    async def create_pull_request(self, request: CreatePullRequestRequest) -> dict[str, Any]:
        """Open a pull request with a generated test.

        Returns:
            The pull request object as reported by GitHub.
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        data = await self._request("POST", "/api/create-pull-request", json=body)
        return data["pullRequest"]


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return "Request failed"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return "Request failed"
