# backend/src/casegen/generation/prompts.py
"""Prompt templates for test summary and test code generation."""

from dataclasses import dataclass
from typing import Any


@dataclass
class PromptTemplate:
    """A template for generating prompts with variable substitution."""

    template: str

    def render(self, **kwargs: Any) -> str:
        """Render the template with the given variables.

        Args:
            **kwargs: Variables to substitute into the template.

        Returns:
            The rendered template string.

        Raises:
            KeyError: If a required variable is missing.
        """
        return self.template.format(**kwargs)


# =============================================================================
# Test Summary Template
# =============================================================================

SUMMARY_TEMPLATE = PromptTemplate(
    """Analyze the following code and generate a comprehensive test case summary:

File: {file_name}
Language: {language}
Code:
{content}

Please provide:
1. A brief description of what this code does
2. List of test scenarios that should be covered
3. Edge cases to consider
4. Suggested test framework (JUnit, Jest, pytest, etc.)
5. Mock requirements if any

Format the response as a structured summary."""
)


# =============================================================================
# Test Code Template
# =============================================================================

TEST_CODE_TEMPLATE = PromptTemplate(
    """Based on the following test summary and original code, generate complete, executable test code:

Original File: {file_name}
Language: {language}
Test Summary: {summary}
Original Code: {original_code}

Generate comprehensive test code that:
1. Uses appropriate testing framework for {language}
2. Covers all scenarios mentioned in the summary
3. Includes proper setup and teardown
4. Has clear, descriptive test names
5. Includes comments explaining complex test logic

Return only the test code, properly formatted and ready to run."""
)


def get_summary_prompt(file_name: str, language: str, content: str) -> str:
    """Generate a prompt asking for a test case summary of one file.

    Args:
        file_name: Name of the source file.
        language: Language inferred from the file name (may be "unknown").
        content: Source text.

    Returns:
        The rendered prompt string.
    """
    return SUMMARY_TEMPLATE.render(file_name=file_name, language=language, content=content)


def get_test_code_prompt(file_name: str, language: str, summary: str, original_code: str) -> str:
    """Generate a prompt asking for executable test code.

    Args:
        file_name: Name of the source file.
        language: Language of the source file.
        summary: Test case summary produced earlier for this file.
        original_code: Source text.

    Returns:
        The rendered prompt string.
    """
    return TEST_CODE_TEMPLATE.render(
        file_name=file_name,
        language=language,
        summary=summary,
        original_code=original_code,
    )
