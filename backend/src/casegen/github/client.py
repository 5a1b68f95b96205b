"""GitHub REST API client for the operations the test generator needs."""

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from casegen.constants.github import GITHUB_API_URL, REPOSITORY_LIST_LIMIT
from casegen.github.errors import BranchExistsError, GitHubError, GitHubNotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = 404
UNPROCESSABLE_ERROR = 422

API_VERSION = "2022-11-28"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _path(value: str) -> str:
    return quote(value.strip("/"), safe="/")


class GitHubClient:
    """Async client for GitHub REST API v3, authenticated with a user token.

    Responses are returned as parsed JSON without reshaping. Use as an async
    context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        action: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug(f"GitHub {method} {url} ({action})")
        try:
            response = await self._client.request(method, url, params=params, json=json)
        except httpx.HTTPError as e:
            raise GitHubError(action, message=str(e)) from e

        if response.status_code >= 400:
            message = _error_message(response)
            if response.status_code == NOT_FOUND_ERROR:
                raise GitHubNotFoundError(action, message=message, status_code=NOT_FOUND_ERROR)
            raise GitHubError(action, message=message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_authenticated_user(self) -> dict[str, Any]:
        """Get the profile of the account that owns the token."""
        return await self._request("GET", "/user", action="Get authenticated user")

    async def list_repositories(
        self,
        limit: int = REPOSITORY_LIST_LIMIT,
        sort: str = "updated",
        direction: str = "desc",
    ) -> list[dict[str, Any]]:
        """List repositories the user can access, most recently updated first.

        Args:
            limit: Page size, at most 100. Only the first page is returned.
            sort: GitHub sort key.
            direction: Sort direction.
        """
        return await self._request(
            "GET",
            "/user/repos",
            action="List repositories",
            params={"sort": sort, "direction": direction, "per_page": min(limit, 100)},
        )

    async def get_contents(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> Any:
        """Get a directory listing (list) or a single file (object).

        Args:
            owner: Repository owner.
            repo: Repository name.
            path: Path inside the repository; empty for the root.
            ref: Optional branch, tag or commit.
        """
        url = f"/repos/{_segment(owner)}/{_segment(repo)}/contents/{_path(path)}"
        return await self._request(
            "GET",
            url,
            action="Get repository contents",
            params={"ref": ref} if ref else None,
        )

    async def get_branch_sha(self, owner: str, repo: str, branch: str) -> str:
        """Get the commit sha at the tip of a branch."""
        ref = await self._request(
            "GET",
            f"/repos/{_segment(owner)}/{_segment(repo)}/git/ref/heads/{_path(branch)}",
            action="Get branch ref",
        )
        return ref["object"]["sha"]

    async def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> dict[str, Any]:
        """Create ``refs/heads/<branch>`` pointing at ``sha``.

        Raises:
            BranchExistsError: If the branch already exists.
        """
        try:
            return await self._request(
                "POST",
                f"/repos/{_segment(owner)}/{_segment(repo)}/git/refs",
                action="Create branch",
                json={"ref": f"refs/heads/{branch}", "sha": sha},
            )
        except GitHubError as e:
            if e.status_code == UNPROCESSABLE_ERROR and "already exists" in str(e):
                raise BranchExistsError(owner, repo, branch) from e
            raise

    async def delete_branch(self, owner: str, repo: str, branch: str) -> None:
        """Delete ``refs/heads/<branch>``."""
        await self._request(
            "DELETE",
            f"/repos/{_segment(owner)}/{_segment(repo)}/git/refs/heads/{_path(branch)}",
            action="Delete branch",
        )

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
    ) -> dict[str, Any]:
        """Create or update a text file on a branch.

        If the file already exists on the branch its blob sha is looked up
        first, since GitHub requires it for updates.
        """
        sha = None
        try:
            existing = await self.get_contents(owner, repo, path, ref=branch)
        except GitHubNotFoundError:
            existing = None
        if isinstance(existing, dict):
            sha = existing.get("sha")

        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha

        return await self._request(
            "PUT",
            f"/repos/{_segment(owner)}/{_segment(repo)}/contents/{_path(path)}",
            action="Create or update file",
            json=body,
        )

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> dict[str, Any]:
        """Open a pull request from ``head`` into ``base``."""
        return await self._request(
            "POST",
            f"/repos/{_segment(owner)}/{_segment(repo)}/pulls",
            action="Create pull request",
            json={"title": title, "head": head, "base": base, "body": body},
        )


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text[:200]
