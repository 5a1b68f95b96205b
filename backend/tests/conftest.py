"""Shared pytest fixtures for all tests."""

import base64
import json
import re

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from casegen.api.deps import (
    GitHubClientFactory,
    _reset_llm_instance,
    _reset_session_store,
    get_github_client_factory,
    get_llm,
    get_session_store,
    get_settings,
)
from casegen.config import load_settings
from casegen.github.client import GitHubClient
from casegen.llm.client import LLMClient
from casegen.main import app
from casegen.sessions.store import SessionStore

ENV_VARS = (
    "GITHUB_CLIENT_ID",
    "GITHUB_CLIENT_SECRET",
    "AI_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_API_KEY",
    "ACTIVE_PROVIDER",
    "ACTIVE_MODEL",
    "OLLAMA_ENDPOINT",
    "FRONTEND_URL",
    "BACKEND_URL",
    "PORT",
    "LLM_LOG_PATH",
    "CASEGEN_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run every test without provider keys or OAuth credentials from the host."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    get_settings.cache_clear()
    _reset_session_store()
    _reset_llm_instance()
    yield
    load_settings.cache_clear()
    get_settings.cache_clear()
    _reset_session_store()
    _reset_llm_instance()


class FakeGitHub:
    """In-memory stand-in for the GitHub REST endpoints the client uses.

    Serve it through ``httpx.MockTransport(fake.handler)``. Every request is
    recorded in ``requests``; set ``fail`` to ``{(method, path_regex): status}``
    to make matching calls error.
    """

    def __init__(self):
        self.user = {"id": 7, "login": "octocat", "name": "The Octocat", "avatar_url": "https://a/o.png"}
        self.repos = [
            {
                "id": 1,
                "name": "hello",
                "full_name": "octocat/hello",
                "private": False,
                "updated_at": "2024-05-01T00:00:00Z",
                "owner": {"login": "octocat", "avatar_url": "https://a/o.png"},
            }
        ]
        self.tree: dict[str, list[dict]] = {"": []}
        self.files: dict[str, str] = {}
        self.branches = {"main": "a" * 40}
        self.committed: dict[tuple[str, str], dict] = {}
        self.pulls: list[dict] = []
        self.deleted_branches: list[str] = []
        self.requests: list[httpx.Request] = []
        self.fail: dict[tuple[str, str], int] = {}

    def add_file(self, path: str, content: str) -> None:
        parent, _, name = path.rpartition("/")
        self.tree.setdefault(parent, []).append(
            {
                "name": name,
                "path": path,
                "type": "file",
                "size": len(content),
                "sha": f"sha-{path}",
                "download_url": f"https://raw.example.com/{path}",
            }
        )
        self.files[path] = content

    def add_dir(self, path: str) -> None:
        parent, _, name = path.rpartition("/")
        self.tree.setdefault(parent, []).append({"name": name, "path": path, "type": "dir", "sha": f"sha-{path}"})
        self.tree.setdefault(path, [])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        for (fail_method, pattern), status in self.fail.items():
            if fail_method == method and re.fullmatch(pattern, path):
                return httpx.Response(status, json={"message": "Simulated failure"})

        if method == "GET" and path == "/user":
            return httpx.Response(200, json=self.user)
        if method == "GET" and path == "/user/repos":
            return httpx.Response(200, json=self.repos)

        match = re.fullmatch(r"/repos/([^/]+)/([^/]+)/(.*)", path)
        if not match:
            return httpx.Response(404, json={"message": "Not Found"})
        rest = match.group(3)

        if method == "GET" and rest.startswith("contents"):
            return self._get_contents(rest[len("contents") :].strip("/"), request.url.params.get("ref"))
        if method == "PUT" and rest.startswith("contents/"):
            file_path = rest[len("contents/") :]
            body = json.loads(request.content)
            self.committed[(body["branch"], file_path)] = body
            return httpx.Response(201, json={"content": {"path": file_path}})
        if method == "GET" and rest.startswith("git/ref/heads/"):
            branch = rest[len("git/ref/heads/") :]
            if branch not in self.branches:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"ref": f"refs/heads/{branch}", "object": {"sha": self.branches[branch]}})
        if method == "POST" and rest == "git/refs":
            body = json.loads(request.content)
            branch = body["ref"].removeprefix("refs/heads/")
            if branch in self.branches:
                return httpx.Response(422, json={"message": "Reference already exists"})
            self.branches[branch] = body["sha"]
            return httpx.Response(201, json={"ref": body["ref"], "object": {"sha": body["sha"]}})
        if method == "DELETE" and rest.startswith("git/refs/heads/"):
            branch = rest[len("git/refs/heads/") :]
            self.branches.pop(branch, None)
            self.deleted_branches.append(branch)
            return httpx.Response(204)
        if method == "POST" and rest == "pulls":
            body = json.loads(request.content)
            pull = {"number": len(self.pulls) + 1, "html_url": f"https://github.com/pr/{len(self.pulls) + 1}", **body}
            self.pulls.append(pull)
            return httpx.Response(201, json=pull)
        return httpx.Response(404, json={"message": "Not Found"})

    def _get_contents(self, path: str, ref: str | None) -> httpx.Response:
        if ref is not None and (ref, path) in self.committed:
            return httpx.Response(200, json={"type": "file", "name": path.rsplit("/", 1)[-1], "path": path, "sha": "old"})
        if path in self.tree:
            return httpx.Response(200, json=self.tree[path])
        if path in self.files:
            encoded = base64.b64encode(self.files[path].encode()).decode()
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "name": path.rsplit("/", 1)[-1],
                    "path": path,
                    "sha": f"sha-{path}",
                    "encoding": "base64",
                    "content": encoded,
                },
            )
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def llm() -> LLMClient:
    """Keyless client, so generation returns placeholder text."""
    return LLMClient(provider="openai", model="gpt-3.5-turbo")


@pytest.fixture
async def client(fake_github, session_store, llm):
    """Async test client with GitHub, sessions and the LLM replaced."""

    def github_factory() -> GitHubClientFactory:
        return lambda token: GitHubClient(token, transport=httpx.MockTransport(fake_github.handler))

    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_github_client_factory] = github_factory
    app.dependency_overrides[get_llm] = lambda: llm

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def session_id(session_store) -> str:
    """A live session holding a GitHub token."""
    return session_store.create("gho_session_token").id


@pytest.fixture
def auth_headers(session_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {session_id}"}
