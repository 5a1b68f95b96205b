"""GitHub gateway: REST client, OAuth and pull request creation."""

from casegen.github.client import GitHubClient
from casegen.github.errors import BranchExistsError, GitHubError, GitHubNotFoundError, OAuthError
from casegen.github.models import ContentEntry, Repository, User, normalize_contents
from casegen.github.pull_requests import PullRequestPlan, open_test_pull_request

__all__ = [
    "BranchExistsError",
    "ContentEntry",
    "GitHubClient",
    "GitHubError",
    "GitHubNotFoundError",
    "OAuthError",
    "PullRequestPlan",
    "Repository",
    "User",
    "normalize_contents",
    "open_test_pull_request",
]
