"""Request and response schemas for test generation.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceFile(CamelModel):
    """A selected file sent for summarising."""

    name: str = Field(..., description="File name, used for language inference")
    content: str = Field("", description="Full source text")
    path: str = Field("", description="Repository-relative path")


class GenerateSummariesRequest(CamelModel):
    """Request to summarise test cases for several files."""

    files: list[SourceFile] = Field(default_factory=list)


class TestSummary(CamelModel):
    """Suggested test cases for one file."""

    file_name: str = Field(..., description="Source file name, the correlation key")
    language: str = Field(..., description="Inferred language, 'unknown' if unmapped")
    summary: str = Field(..., description="Generated test case summary")
    file_path: str = Field(..., description="Repository-relative path of the source file")
    mocked: bool = Field(False, description="True when produced by the placeholder generator")


class GenerateSummariesResponse(CamelModel):
    """Summaries in the same order as the requested files."""

    test_summaries: list[TestSummary]


class GenerateTestCodeRequest(CamelModel):
    """Request to turn a summary into test code."""

    file_name: str
    language: str
    summary: str
    original_code: str = ""


class GeneratedTest(CamelModel):
    """Generated test code for one source file."""

    test_code: str
    file_name: str = Field(..., description="Test file name, <base>.test.<ext>")
    language: str
    mocked: bool = False


class CreatePullRequestRequest(CamelModel):
    """Request to open a pull request adding a generated test."""

    owner: str
    repo: str
    test_code: str
    file_name: str
    branch: str | None = Field(None, description="Work branch, defaults to 'generated-tests'")
    base: str | None = Field(None, description="Target branch, defaults to 'main'")


class CreatePullRequestResponse(CamelModel):
    """The pull request object as returned by GitHub."""

    pull_request: dict[str, Any]
