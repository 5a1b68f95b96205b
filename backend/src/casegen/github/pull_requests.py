"""Open a pull request that adds one generated test file.

The sequence is: read the base branch tip, create the work branch, commit
``tests/<file_name>`` to it, open the pull request. If committing or opening
the pull request fails after the branch was created, the branch is deleted
again (when ``cleanup_branch`` is set) and the original error is re-raised.
"""

import logging
from dataclasses import dataclass
from typing import Any

from casegen.constants.github import (
    COMMIT_MESSAGE_TEMPLATE,
    DEFAULT_BASE_BRANCH,
    DEFAULT_BRANCH_NAME,
    PULL_REQUEST_BODY,
    PULL_REQUEST_TITLE_TEMPLATE,
    TESTS_DIRECTORY,
)
from casegen.github.client import GitHubClient
from casegen.github.errors import GitHubError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestPlan:
    """What to push and where."""

    owner: str
    repo: str
    test_code: str
    file_name: str
    branch: str = DEFAULT_BRANCH_NAME
    base: str = DEFAULT_BASE_BRANCH

    @property
    def file_path(self) -> str:
        return f"{TESTS_DIRECTORY}/{self.file_name}"


async def open_test_pull_request(
    client: GitHubClient,
    plan: PullRequestPlan,
    cleanup_branch: bool = True,
) -> dict[str, Any]:
    """Push a generated test to a new branch and open a pull request.

    Args:
        client: Authenticated GitHub client.
        plan: Repository, branch names and test file.
        cleanup_branch: Delete the new branch if a later step fails.

    Returns:
        The pull request object returned by GitHub.

    Raises:
        BranchExistsError: If ``plan.branch`` already exists. Nothing is
            created in that case.
        GitHubError: If any other step fails.
    """
    owner, repo = plan.owner, plan.repo

    base_sha = await client.get_branch_sha(owner, repo, plan.base)
    await client.create_branch(owner, repo, plan.branch, base_sha)
    logger.info(f"Created branch {plan.branch} on {owner}/{repo} at {base_sha[:7]}")

    try:
        await client.put_file(
            owner,
            repo,
            path=plan.file_path,
            content=plan.test_code,
            message=COMMIT_MESSAGE_TEMPLATE.format(file_name=plan.file_name),
            branch=plan.branch,
        )
        pull_request = await client.create_pull_request(
            owner,
            repo,
            title=PULL_REQUEST_TITLE_TEMPLATE.format(file_name=plan.file_name),
            head=plan.branch,
            base=plan.base,
            body=PULL_REQUEST_BODY,
        )
    except GitHubError:
        if cleanup_branch:
            await _delete_orphaned_branch(client, owner, repo, plan.branch)
        else:
            logger.warning(f"Leaving orphaned branch {plan.branch} on {owner}/{repo}")
        raise

    logger.info(f"Opened pull request #{pull_request.get('number')} on {owner}/{repo}")
    return pull_request


async def _delete_orphaned_branch(client: GitHubClient, owner: str, repo: str, branch: str) -> None:
    try:
        await client.delete_branch(owner, repo, branch)
    except GitHubError as e:
        logger.error(f"Failed to delete orphaned branch {branch} on {owner}/{repo}: {e}")
        return
    logger.info(f"Deleted orphaned branch {branch} on {owner}/{repo}")
