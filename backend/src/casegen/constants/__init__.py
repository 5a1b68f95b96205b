"""Configuration constants.

Re-exports all constants for convenient importing:
    from casegen.constants import DEFAULT_BRANCH_NAME, SESSION_TTL_MINUTES
"""

from casegen.constants.github import *  # noqa: F403
from casegen.constants.languages import *  # noqa: F403
from casegen.constants.llm import *  # noqa: F403
from casegen.constants.sessions import *  # noqa: F403
