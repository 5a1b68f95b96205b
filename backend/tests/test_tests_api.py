"""Test summary, test code and pull request API tests."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from casegen.api.deps import get_llm
from casegen.llm import Completion, LLMError
from casegen.main import app

FILES = [
    {"name": "calc.py", "content": "def add(a, b):\n    return a + b\n", "path": "src/calc.py"},
    {"name": "Calculator.js", "content": "export const add = (a, b) => a + b;", "path": "web/Calculator.js"},
]


@pytest.fixture
def failing_llm(client):
    llm = MagicMock()
    llm.complete = AsyncMock(side_effect=LLMError("provider down"))
    app.dependency_overrides[get_llm] = lambda: llm
    return llm


@pytest.mark.parametrize(
    "path,body",
    [
        ("/api/generate-test-summaries", {"files": FILES}),
        ("/api/generate-test-code", {"fileName": "a.py", "language": "python", "summary": "s"}),
        ("/api/create-pull-request", {"owner": "o", "repo": "r", "testCode": "t", "fileName": "f"}),
    ],
)
async def test_requires_session(client: AsyncClient, fake_github, path: str, body: dict):
    response = await client.post(path, json=body, headers={"Authorization": "Bearer forged"})

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"
    assert fake_github.requests == []


# =============================================================================
# Summaries
# =============================================================================


async def test_generate_summaries_in_request_order(client: AsyncClient, auth_headers):
    response = await client.post("/api/generate-test-summaries", json={"files": FILES}, headers=auth_headers)

    assert response.status_code == 200
    summaries = response.json()["testSummaries"]
    assert [s["fileName"] for s in summaries] == ["calc.py", "Calculator.js"]
    assert [s["language"] for s in summaries] == ["python", "javascript"]
    assert [s["filePath"] for s in summaries] == ["src/calc.py", "web/Calculator.js"]


async def test_placeholder_summaries_are_marked_mocked(client: AsyncClient, auth_headers):
    response = await client.post("/api/generate-test-summaries", json={"files": FILES[:1]}, headers=auth_headers)

    summary = response.json()["testSummaries"][0]
    assert summary["mocked"] is True
    assert summary["summary"].startswith("Mock AI Response for testing purposes.")


async def test_empty_files_is_bad_request(client: AsyncClient, auth_headers):
    response = await client.post("/api/generate-test-summaries", json={"files": []}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "No files provided", "code": "BAD_REQUEST"}


async def test_missing_files_is_bad_request(client: AsyncClient, auth_headers):
    response = await client.post("/api/generate-test-summaries", json={}, headers=auth_headers)

    assert response.status_code == 400


async def test_summary_failure_returns_no_partial_results(client: AsyncClient, auth_headers, failing_llm):
    response = await client.post("/api/generate-test-summaries", json={"files": FILES}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate test summaries", "code": "INTERNAL_ERROR"}


# =============================================================================
# Test code
# =============================================================================


async def test_generate_test_code_names_file_after_source(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/generate-test-code",
        json={
            "fileName": "Calculator.js",
            "language": "javascript",
            "summary": "Cover add()",
            "originalCode": FILES[1]["content"],
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["fileName"] == "Calculator.test.js"
    assert body["language"] == "javascript"
    assert body["mocked"] is True
    assert body["testCode"]


async def test_generate_test_code_real_completion(client: AsyncClient, auth_headers):
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=Completion(text="def test_add(): ..."))
    app.dependency_overrides[get_llm] = lambda: llm

    response = await client.post(
        "/api/generate-test-code",
        json={"fileName": "calc.py", "language": "python", "summary": "s", "originalCode": "x"},
        headers=auth_headers,
    )

    assert response.json() == {
        "testCode": "def test_add(): ...",
        "fileName": "calc.test.py",
        "language": "python",
        "mocked": False,
    }


async def test_generate_test_code_failure(client: AsyncClient, auth_headers, failing_llm):
    response = await client.post(
        "/api/generate-test-code",
        json={"fileName": "calc.py", "language": "python", "summary": "s"},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate test code"


async def test_generate_test_code_schema_errors_stay_422(client: AsyncClient, auth_headers):
    response = await client.post("/api/generate-test-code", json={"fileName": "calc.py"}, headers=auth_headers)

    assert response.status_code == 422


# =============================================================================
# Pull requests
# =============================================================================


async def test_create_pull_request(client: AsyncClient, auth_headers, fake_github):
    response = await client.post(
        "/api/create-pull-request",
        json={"owner": "octocat", "repo": "hello", "testCode": "test()", "fileName": "calc.test.py"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["pullRequest"]["number"] == 1
    body = fake_github.committed[("generated-tests", "tests/calc.test.py")]
    assert base64.b64decode(body["content"]).decode() == "test()"


async def test_create_pull_request_same_branch_twice_conflicts(client: AsyncClient, auth_headers, fake_github):
    payload = {"owner": "octocat", "repo": "hello", "testCode": "test()", "fileName": "calc.test.py"}

    first = await client.post("/api/create-pull-request", json=payload, headers=auth_headers)
    second = await client.post("/api/create-pull-request", json=payload, headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["code"] == "CONFLICT"
    assert "generated-tests" in second.json()["error"]
    assert len(fake_github.pulls) == 1


async def test_create_pull_request_custom_branch_and_base(client: AsyncClient, auth_headers, fake_github):
    fake_github.branches["develop"] = "d" * 40

    response = await client.post(
        "/api/create-pull-request",
        json={
            "owner": "octocat",
            "repo": "hello",
            "testCode": "test()",
            "fileName": "calc.test.py",
            "branch": "more-tests",
            "base": "develop",
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert fake_github.pulls[0]["head"] == "more-tests"
    assert fake_github.pulls[0]["base"] == "develop"


async def test_create_pull_request_failure_cleans_up_branch(client: AsyncClient, auth_headers, fake_github):
    fake_github.fail[("POST", "/repos/octocat/hello/pulls")] = 422

    response = await client.post(
        "/api/create-pull-request",
        json={"owner": "octocat", "repo": "hello", "testCode": "test()", "fileName": "calc.test.py"},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to create pull request"
    assert fake_github.deleted_branches == ["generated-tests"]
