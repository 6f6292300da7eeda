"""FastAPI routes for story video generation."""

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from storyreel.core.config import settings
from storyreel.core.exceptions import (
    IncompleteTimeline,
    InvalidInput,
    RenderError,
    StoryPipelineError,
    UpstreamError,
)
from storyreel.core.logging_config import get_logger
from storyreel.models.schemas import CreateStoryResponse, ErrorResponse, JobRecord
from storyreel.services.story_pipeline import StoryPipeline
from storyreel.storage.repository import JobRepository
from storyreel.utils.text_utils import truncate_for_preview

router = APIRouter(tags=["stories"])

ERROR_STATUS_CODES = {
    InvalidInput: 422,
    UpstreamError: 502,
    IncompleteTimeline: 500,
    RenderError: 500,
}


def get_story_pipeline() -> StoryPipeline:
    """Pipeline dependency (overridden in tests)."""
    return StoryPipeline(settings, get_logger("storyreel.pipeline"))


def get_job_repository() -> JobRepository:
    """Repository dependency (overridden in tests)."""
    return JobRepository(settings, get_logger("storyreel.repository"))


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get(
    "/create-story",
    response_model=CreateStoryResponse,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def create_story(
    url: str = Query(..., description="Page to turn into a story video"),
    pipeline: StoryPipeline = Depends(get_story_pipeline),
):
    """
    Generate a narrated story video from a URL.

    Pipeline:
    Summarize → Partition → Image/Voice/Subtitles per segment → Timeline → Render plan → ffmpeg
    """
    logger = get_logger(__name__, url=url)
    logger.info(f"Received story request for {url}")

    try:
        result = await run_in_threadpool(pipeline.run, url)
    except StoryPipelineError as e:
        status_code = ERROR_STATUS_CODES.get(type(e), 500)
        logger.error(f"Story generation failed ({type(e).__name__}): {e.message}")
        return error_response(status_code, e.message)
    except Exception as e:
        logger.opt(exception=e).error("Unexpected error generating story: {}", e)
        return error_response(500, f"Story generation failed: {e}")

    base_url = pipeline.settings.public_base_url.rstrip("/")
    return CreateStoryResponse(
        id=result.job_id,
        summary=truncate_for_preview(result.summary, pipeline.settings.summary_preview_chars),
        video_url=f"{base_url}/stories/{result.job_id}/{result.output_path.name}",
        files=result.files,
        degraded=result.degraded,
        degradations=result.degradations,
    )


@router.get("/jobs/{job_id}", response_model=JobRecord, responses={404: {"model": ErrorResponse}})
async def get_job(job_id: str, repository: JobRepository = Depends(get_job_repository)):
    """Get the manifest of a job, including its state and any failure message."""
    record = repository.load_job(job_id)
    if record is None:
        return error_response(404, f"Job {job_id} not found")
    return record
