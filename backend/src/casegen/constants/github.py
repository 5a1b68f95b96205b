"""GitHub API and pull request configuration.

Endpoints, OAuth scope and the fixed templates used when opening a pull
request with a generated test file.
"""

# =============================================================================
# Endpoints
# =============================================================================

GITHUB_API_URL = "https://api.github.com"
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"

# The "repo" scope is needed to read private repositories and to push the
# branch that carries generated tests.
GITHUB_OAUTH_SCOPE = "repo"

# =============================================================================
# Listing
# =============================================================================
# GitHub caps per_page at 100. Only the first page is fetched.

REPOSITORY_LIST_LIMIT = 100

# =============================================================================
# Pull Requests
# =============================================================================

DEFAULT_BRANCH_NAME = "generated-tests"
DEFAULT_BASE_BRANCH = "main"
TESTS_DIRECTORY = "tests"

COMMIT_MESSAGE_TEMPLATE = "Add generated test: {file_name}"
PULL_REQUEST_TITLE_TEMPLATE = "Generated tests: {file_name}"
PULL_REQUEST_BODY = (
    "Auto-generated test cases for improved code coverage.\n\n"
    "Generated by Test Case Generator App."
)
