"""Errors raised by the GitHub gateway."""

ExtraInfoType = dict[str, str | int | None]


class GitHubError(Exception):
    """A failed call to the GitHub API or OAuth endpoints."""

    def __init__(
        self,
        action: str,
        message: str | None = None,
        status_code: int | None = None,
        extra_info: ExtraInfoType | None = None,
    ):
        self.action = action
        self.status_code = status_code
        info: ExtraInfoType = {"status": status_code, "message": message, **(extra_info or {})}
        msg = f"GitHub request failed: {action}"
        details = ", ".join(f"{key}: {value}" for key, value in info.items() if value is not None)
        if details:
            msg += f" ({details})"
        super().__init__(msg)


class GitHubNotFoundError(GitHubError):
    """The requested resource does not exist or is not visible to the token."""


class BranchExistsError(GitHubError):
    """A branch with the requested name already exists."""

    def __init__(self, owner: str, repo: str, branch: str):
        self.branch = branch
        super().__init__(
            action="Create branch",
            message="Reference already exists",
            status_code=422,
            extra_info={"repository": f"{owner}/{repo}", "branch": branch},
        )


class OAuthError(GitHubError):
    """The OAuth code exchange did not produce an access token."""
