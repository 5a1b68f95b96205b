"""Boundary models for GitHub responses.

User and repository payloads are validated for the fields the client relies
on and otherwise passed through untouched. Directory listings are narrowed to
a closed file/dir variant.
"""

import base64
import binascii
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class User(BaseModel):
    """The authenticated GitHub account."""

    model_config = ConfigDict(extra="allow")

    id: int
    login: str
    name: str | None = None
    avatar_url: str | None = None
    email: str | None = None


class RepositoryOwner(BaseModel):
    model_config = ConfigDict(extra="allow")

    login: str
    avatar_url: str | None = None


class Repository(BaseModel):
    """A repository visible to the authenticated account."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    updated_at: str | None = None
    private: bool = False
    owner: RepositoryOwner


class ContentEntry(BaseModel):
    """A single file or directory in a repository listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    type: Literal["file", "dir"]
    size: int | None = None
    sha: str | None = None
    download_url: str | None = None
    content: str | None = Field(None, description="Decoded file text, only for single-file reads")

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


def _decode_content(raw: dict[str, Any]) -> str | None:
    if raw.get("encoding") != "base64" or not isinstance(raw.get("content"), str):
        return None
    try:
        return base64.b64decode(raw["content"]).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug(f"Could not decode content of {raw.get('path')}, leaving it unset")
        return None


def _to_entry(raw: Any) -> ContentEntry | None:
    if not isinstance(raw, dict):
        return None
    if raw.get("type") not in ("file", "dir"):
        logger.debug(f"Skipping {raw.get('type')} entry {raw.get('path')}")
        return None
    try:
        return ContentEntry(
            name=raw.get("name"),
            path=raw.get("path"),
            type=raw["type"],
            size=raw.get("size"),
            sha=raw.get("sha"),
            download_url=raw.get("download_url"),
            content=_decode_content(raw) if raw["type"] == "file" else None,
        )
    except ValidationError:
        logger.debug(f"Skipping malformed listing entry: {raw!r}")
        return None


def normalize_contents(raw: Any) -> list[ContentEntry]:
    """Normalize a contents API response into a list of entries.

    A directory path yields a list from GitHub, a file path a single object.
    Both come back as a list. Symlinks, submodules and entries missing a name
    or path are dropped.

    Args:
        raw: Parsed JSON from ``GET /repos/{owner}/{repo}/contents/{path}``.

    Returns:
        Entries in upstream order.
    """
    items = raw if isinstance(raw, list) else [raw]
    entries = []
    for item in items:
        entry = _to_entry(item)
        if entry is not None:
            entries.append(entry)
    return entries
