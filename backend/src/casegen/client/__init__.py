"""Client side of the workflow: API client, file explorer and wizard."""

from casegen.client.api import ApiClient, ApiError
from casegen.client.explorer import ExplorerEntry, FileExplorer, is_code_file
from casegen.client.wizard import ReviewedTest, Step, Wizard, WizardError

__all__ = [
    "ApiClient",
    "ApiError",
    "ExplorerEntry",
    "FileExplorer",
    "ReviewedTest",
    "Step",
    "Wizard",
    "WizardError",
    "is_code_file",
]
