"""The four-step test generation workflow as an explicit state machine.

Steps only move forward through actions. ``go_back`` may jump to any earlier
step and clears exactly what was gathered after it:

- back to REPOSITORIES clears the repository, files, summaries and tests
- back to FILES keeps the repository and files, clears summaries and tests
- back to SUMMARIES keeps everything but the tests
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from casegen.client.api import ApiClient
from casegen.client.explorer import FileExplorer
from casegen.generation.schemas import (
    CreatePullRequestRequest,
    GeneratedTest,
    GenerateTestCodeRequest,
    SourceFile,
    TestSummary,
)
from casegen.github.models import ContentEntry, Repository

logger = logging.getLogger(__name__)


class Step(IntEnum):
    REPOSITORIES = 0
    FILES = 1
    SUMMARIES = 2
    TESTS = 3


class WizardError(Exception):
    """An action was attempted that the current step does not allow."""

    pass


@dataclass(frozen=True)
class ReviewedTest:
    """Generated test code together with the summary it came from."""

    test: GeneratedTest
    summary: TestSummary


class Wizard:
    """Workflow state for one signed-in user."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.step = Step.REPOSITORIES
        self.repository: Repository | None = None
        self.explorer: FileExplorer | None = None
        self.selected_files: list[SourceFile] = []
        self.summaries: list[TestSummary] = []
        self.tests: list[ReviewedTest] = []

    def _require(self, *steps: Step) -> None:
        if self.step not in steps:
            allowed = ", ".join(s.name for s in steps)
            raise WizardError(f"Not allowed at step {self.step.name} (needs {allowed})")

    async def select_repository(self, repository: Repository) -> FileExplorer:
        """Pick a repository and show its root listing."""
        self._require(Step.REPOSITORIES)
        explorer = FileExplorer(self.api, repository.owner.login, repository.name)
        await explorer.load()

        self.repository = repository
        self.explorer = explorer
        self.selected_files = []
        self.summaries = []
        self.tests = []
        self.step = Step.FILES
        logger.info(f"Selected repository {repository.full_name}")
        return explorer

    def is_selected(self, path: str) -> bool:
        return any(f.path == path for f in self.selected_files)

    async def toggle_file(self, entry: ContentEntry) -> bool:
        """Select or deselect a file by path.

        Content is fetched from the download URL only when a file is selected.

        Returns:
            True if the file is now selected.
        """
        self._require(Step.FILES)
        if entry.is_dir:
            raise WizardError(f"Cannot select directory {entry.path}")

        if self.is_selected(entry.path):
            self.selected_files = [f for f in self.selected_files if f.path != entry.path]
            return False

        content = entry.content or ""
        if entry.download_url:
            content = await self.api.fetch_file_content(entry.download_url)
        self.selected_files.append(SourceFile(name=entry.name, content=content, path=entry.path))
        return True

    async def generate_summaries(self) -> list[TestSummary]:
        """Request summaries for the selected files and move to review."""
        self._require(Step.FILES)
        if not self.selected_files:
            raise WizardError("Select at least one file")

        self.summaries = await self.api.generate_test_summaries(self.selected_files)
        self.tests = []
        self.step = Step.SUMMARIES
        return self.summaries

    def original_code(self, summary: TestSummary) -> str:
        """Source text of the selected file a summary was made for.

        Matched by path. Summaries without a path fall back to the file name.
        """
        for source in self.selected_files:
            if summary.file_path:
                if source.path == summary.file_path:
                    return source.content
            elif source.name == summary.file_name:
                return source.content
        return ""

    async def generate_test(self, summary: TestSummary) -> ReviewedTest:
        """Generate test code for one summary and add it to the review list."""
        self._require(Step.SUMMARIES, Step.TESTS)
        test = await self.api.generate_test_code(
            GenerateTestCodeRequest(
                file_name=summary.file_name,
                language=summary.language,
                summary=summary.summary,
                original_code=self.original_code(summary),
            )
        )
        return self.add_generated_test(test, summary)

    def add_generated_test(self, test: GeneratedTest, summary: TestSummary) -> ReviewedTest:
        self._require(Step.SUMMARIES, Step.TESTS)
        reviewed = ReviewedTest(test=test, summary=summary)
        self.tests.append(reviewed)
        self.step = Step.TESTS
        return reviewed

    async def create_pull_request(self, reviewed: ReviewedTest, branch: str | None = None) -> dict[str, Any]:
        """Open a pull request for a reviewed test in the selected repository."""
        self._require(Step.TESTS)
        repository = self.repository
        if repository is None:
            raise WizardError("No repository selected")
        return await self.api.create_pull_request(
            CreatePullRequestRequest(
                owner=repository.owner.login,
                repo=repository.name,
                test_code=reviewed.test.test_code,
                file_name=reviewed.test.file_name,
                branch=branch,
            )
        )

    def go_back(self, target: Step) -> None:
        """Return to an earlier step, discarding what came after it."""
        if target >= self.step:
            raise WizardError(f"Cannot go back from {self.step.name} to {target.name}")

        if target == Step.REPOSITORIES:
            self.repository = None
            self.explorer = None
            self.selected_files = []
        if target <= Step.FILES:
            self.summaries = []
        self.tests = []
        self.step = target
