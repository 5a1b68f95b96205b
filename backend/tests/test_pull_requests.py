"""Pull request creation tests."""

import base64

import httpx
import pytest

from casegen.github import (
    BranchExistsError,
    GitHubClient,
    GitHubError,
    PullRequestPlan,
    open_test_pull_request,
)


@pytest.fixture
async def github(fake_github):
    async with GitHubClient("gho_test", transport=httpx.MockTransport(fake_github.handler)) as client:
        yield client


def make_plan(**overrides) -> PullRequestPlan:
    values = {
        "owner": "octocat",
        "repo": "hello",
        "test_code": "test('adds', () => {});\n",
        "file_name": "Calculator.test.js",
    }
    values.update(overrides)
    return PullRequestPlan(**values)


def test_plan_defaults():
    plan = make_plan()

    assert plan.branch == "generated-tests"
    assert plan.base == "main"
    assert plan.file_path == "tests/Calculator.test.js"


async def test_opens_pull_request(github, fake_github):
    pull = await open_test_pull_request(github, make_plan())

    assert pull["number"] == 1
    assert fake_github.branches["generated-tests"] == fake_github.branches["main"]

    body = fake_github.committed[("generated-tests", "tests/Calculator.test.js")]
    assert base64.b64decode(body["content"]).decode() == "test('adds', () => {});\n"
    assert body["message"] == "Add generated test: Calculator.test.js"

    opened = fake_github.pulls[0]
    assert opened["title"] == "Generated tests: Calculator.test.js"
    assert opened["head"] == "generated-tests"
    assert opened["base"] == "main"
    assert opened["body"].startswith("Auto-generated test cases for improved code coverage.")


async def test_custom_base_branch(github, fake_github):
    fake_github.branches["develop"] = "c" * 40

    await open_test_pull_request(github, make_plan(base="develop", branch="tests-1"))

    assert fake_github.branches["tests-1"] == "c" * 40
    assert fake_github.pulls[0]["base"] == "develop"


async def test_same_branch_twice_conflicts(github, fake_github):
    """The second request for the same branch fails and creates nothing."""
    await open_test_pull_request(github, make_plan())

    with pytest.raises(BranchExistsError):
        await open_test_pull_request(github, make_plan(file_name="Other.test.js"))

    assert len(fake_github.pulls) == 1
    assert ("generated-tests", "tests/Other.test.js") not in fake_github.committed
    assert fake_github.deleted_branches == []


async def test_missing_base_branch_creates_nothing(github, fake_github):
    with pytest.raises(GitHubError):
        await open_test_pull_request(github, make_plan(base="does-not-exist"))

    assert "generated-tests" not in fake_github.branches


async def test_failed_commit_deletes_created_branch(github, fake_github):
    fake_github.fail[("PUT", r"/repos/octocat/hello/contents/.*")] = 409

    with pytest.raises(GitHubError):
        await open_test_pull_request(github, make_plan())

    assert fake_github.deleted_branches == ["generated-tests"]
    assert "generated-tests" not in fake_github.branches


async def test_failed_pull_request_deletes_created_branch(github, fake_github):
    fake_github.fail[("POST", "/repos/octocat/hello/pulls")] = 422

    with pytest.raises(GitHubError) as exc_info:
        await open_test_pull_request(github, make_plan())

    assert exc_info.value.status_code == 422
    assert fake_github.deleted_branches == ["generated-tests"]


async def test_cleanup_disabled_leaves_branch(github, fake_github):
    fake_github.fail[("POST", "/repos/octocat/hello/pulls")] = 500

    with pytest.raises(GitHubError):
        await open_test_pull_request(github, make_plan(), cleanup_branch=False)

    assert fake_github.deleted_branches == []
    assert "generated-tests" in fake_github.branches


async def test_failed_cleanup_still_raises_original_error(github, fake_github):
    fake_github.fail[("POST", "/repos/octocat/hello/pulls")] = 500
    fake_github.fail[("DELETE", r"/repos/octocat/hello/git/refs/heads/.*")] = 500

    with pytest.raises(GitHubError) as exc_info:
        await open_test_pull_request(github, make_plan())

    assert exc_info.value.action == "Create pull request"
