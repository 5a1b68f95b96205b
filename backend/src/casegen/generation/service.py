"""Test summary and test code generation."""

import asyncio
import logging

from casegen.generation.languages import get_language_from_extension, get_test_file_name
from casegen.generation.prompts import get_summary_prompt, get_test_code_prompt
from casegen.generation.schemas import (
    GeneratedTest,
    GenerateTestCodeRequest,
    SourceFile,
    TestSummary,
)
from casegen.llm.client import LLMClient

logger = logging.getLogger(__name__)


class TestGenerationService:
    """Builds prompts per file and delegates generation to the LLM client.

    Summaries for several files are produced one after another by default.
    With ``parallel_limit`` above one they run concurrently, bounded by a
    semaphore. Either way results keep the order of the input, and the first
    failure aborts the whole batch.
    """

    def __init__(self, llm: LLMClient, parallel_limit: int = 1):
        self.llm = llm
        self.parallel_limit = max(1, parallel_limit)

    async def summarize_file(self, source: SourceFile) -> TestSummary:
        """Generate a test case summary for one file."""
        language = get_language_from_extension(source.name)
        prompt = get_summary_prompt(source.name, language, source.content)
        completion = await self.llm.complete(prompt)
        logger.info(f"Generated test summary for {source.path or source.name} ({language})")
        return TestSummary(
            file_name=source.name,
            language=language,
            summary=completion.text,
            file_path=source.path,
            mocked=completion.mocked,
        )

    async def generate_summaries(self, files: list[SourceFile]) -> list[TestSummary]:
        """Generate summaries for several files, preserving their order.

        Raises:
            LLMError: If any generation fails. No partial results are returned.
        """
        if self.parallel_limit == 1:
            return [await self.summarize_file(source) for source in files]

        semaphore = asyncio.Semaphore(self.parallel_limit)

        async def bounded(source: SourceFile) -> TestSummary:
            async with semaphore:
                return await self.summarize_file(source)

        tasks = [asyncio.ensure_future(bounded(source)) for source in files]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def generate_test_code(self, request: GenerateTestCodeRequest) -> GeneratedTest:
        """Generate test code from a summary and the original source."""
        prompt = get_test_code_prompt(
            request.file_name,
            request.language,
            request.summary,
            request.original_code,
        )
        completion = await self.llm.complete(prompt)
        test_name = get_test_file_name(request.file_name, request.language)
        logger.info(f"Generated test code {test_name} for {request.file_name}")
        return GeneratedTest(
            test_code=completion.text,
            file_name=test_name,
            language=request.language,
            mocked=completion.mocked,
        )
