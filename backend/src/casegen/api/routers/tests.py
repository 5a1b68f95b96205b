"""Test summary, test code and pull request endpoints."""

import logging

from fastapi import APIRouter, Depends

from casegen.api.deps import (
    GitHubClientFactory,
    get_generation_service,
    get_github_client_factory,
    get_settings,
    require_session,
)
from casegen.api.errors import BranchConflict, UpstreamFailure, ValidationFailure
from casegen.config import Settings
from casegen.generation.schemas import (
    CreatePullRequestRequest,
    CreatePullRequestResponse,
    GeneratedTest,
    GenerateSummariesRequest,
    GenerateSummariesResponse,
    GenerateTestCodeRequest,
)
from casegen.generation.service import TestGenerationService
from casegen.github.errors import BranchExistsError, GitHubError
from casegen.github.pull_requests import PullRequestPlan, open_test_pull_request
from casegen.llm.client import LLMError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tests"])


@router.post(
    "/generate-test-summaries",
    response_model=GenerateSummariesResponse,
    dependencies=[Depends(require_session)],
)
async def generate_test_summaries(
    request: GenerateSummariesRequest,
    service: TestGenerationService = Depends(get_generation_service),
) -> GenerateSummariesResponse:
    """Suggest test cases for each selected file, in request order."""
    if not request.files:
        raise ValidationFailure("No files provided")

    try:
        summaries = await service.generate_summaries(request.files)
    except LLMError as e:
        logger.exception("Error generating test summaries")
        raise UpstreamFailure("Failed to generate test summaries") from e
    return GenerateSummariesResponse(test_summaries=summaries)


@router.post(
    "/generate-test-code",
    response_model=GeneratedTest,
    dependencies=[Depends(require_session)],
)
async def generate_test_code(
    request: GenerateTestCodeRequest,
    service: TestGenerationService = Depends(get_generation_service),
) -> GeneratedTest:
    """Turn one summary into test code."""
    try:
        return await service.generate_test_code(request)
    except LLMError as e:
        logger.exception("Error generating test code")
        raise UpstreamFailure("Failed to generate test code") from e


@router.post("/create-pull-request", response_model=CreatePullRequestResponse)
async def create_pull_request(
    request: CreatePullRequestRequest,
    token: str = Depends(require_session),
    github: GitHubClientFactory = Depends(get_github_client_factory),
    settings: Settings = Depends(get_settings),
) -> CreatePullRequestResponse:
    """Commit a generated test to a new branch and open a pull request."""
    plan = PullRequestPlan(
        owner=request.owner,
        repo=request.repo,
        test_code=request.test_code,
        file_name=request.file_name,
        branch=request.branch or settings.github.default_branch_name,
        base=request.base or settings.github.default_base_branch,
    )
    try:
        async with github(token) as client:
            pull_request = await open_test_pull_request(
                client, plan, cleanup_branch=settings.github.cleanup_orphaned_branch
            )
    except BranchExistsError as e:
        logger.warning(f"Branch {plan.branch} already exists on {plan.owner}/{plan.repo}")
        raise BranchConflict(f"Branch '{plan.branch}' already exists") from e
    except GitHubError as e:
        logger.exception("Error creating pull request")
        raise UpstreamFailure("Failed to create pull request") from e
    return CreatePullRequestResponse(pull_request=pull_request)
