"""Prompt building and test generation."""

from casegen.generation.languages import (
    get_file_extension,
    get_language_from_extension,
    get_test_file_name,
)
from casegen.generation.prompts import get_summary_prompt, get_test_code_prompt
from casegen.generation.service import TestGenerationService

__all__ = [
    "TestGenerationService",
    "get_file_extension",
    "get_language_from_extension",
    "get_summary_prompt",
    "get_test_code_prompt",
    "get_test_file_name",
]
