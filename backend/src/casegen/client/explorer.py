"""Flat, lazily expanded view of a repository tree."""

import logging
from dataclasses import dataclass

from casegen.client.api import ApiClient
from casegen.github.models import ContentEntry

logger = logging.getLogger(__name__)

CODE_EXTENSIONS = (
    ".js", ".ts", ".tsx", ".jsx", ".py", ".java", ".cpp", ".c", ".cs", ".go", ".rs", ".php", ".rb",
)


def is_code_file(file_name: str) -> bool:
    """Whether a file looks like source code worth offering for test generation."""
    return file_name.lower().endswith(CODE_EXTENSIONS)


@dataclass(frozen=True)
class ExplorerEntry:
    """A listing entry and its nesting depth in the displayed list."""

    entry: ContentEntry
    level: int

    @property
    def path(self) -> str:
        return self.entry.path


class FileExplorer:
    """Displayed file list for one repository.

    Directories expand by fetching their children and splicing them in right
    after the directory. Collapsing removes every entry below the directory,
    so expanding and collapsing again restores the list exactly.
    """

    def __init__(self, api: ApiClient, owner: str, repo: str):
        self.api = api
        self.owner = owner
        self.repo = repo
        self.entries: list[ExplorerEntry] = []
        self._expanded: set[str] = set()

    async def load(self) -> list[ExplorerEntry]:
        """Load the repository root, replacing whatever was shown."""
        contents = await self.api.get_repository_contents(self.owner, self.repo)
        self.entries = [ExplorerEntry(entry, 0) for entry in contents]
        self._expanded.clear()
        return self.entries

    def is_expanded(self, path: str) -> bool:
        return path in self._expanded

    async def toggle(self, directory: ContentEntry) -> None:
        """Expand a collapsed directory or collapse an expanded one."""
        if not directory.is_dir:
            raise ValueError(f"Not a directory: {directory.path}")
        if directory.path in self._expanded:
            self.collapse(directory.path)
        else:
            await self.expand(directory.path)

    async def expand(self, path: str) -> None:
        index = self._index_of(path)
        if index is None:
            logger.warning(f"Cannot expand {path}: not in the displayed list")
            return

        children = await self.api.get_repository_contents(self.owner, self.repo, path)
        level = path.count("/") + 1
        self.entries[index + 1 : index + 1] = [ExplorerEntry(child, level) for child in children]
        self._expanded.add(path)

    def collapse(self, path: str) -> None:
        prefix = path + "/"
        self.entries = [item for item in self.entries if not item.path.startswith(prefix)]
        self._expanded = {p for p in self._expanded if p != path and not p.startswith(prefix)}

    def _index_of(self, path: str) -> int | None:
        for i, item in enumerate(self.entries):
            if item.path == path:
                return i
        return None
