# routers/analysis.py
import asyncio
from io import BytesIO
from typing import Iterator

from fastapi import APIRouter, File, Form, Query, UploadFile
from fastapi.responses import StreamingResponse

from resume_analyzer.models.models import AnalysisResult, ReportPayload, Strategy, UploadedDocument
from resume_analyzer.models.response import AnalyzeResponse, InterviewResponse
from resume_analyzer.models.settings import get_settings
from resume_analyzer.services.graph import run_analysis, run_interview_prep
from resume_analyzer.services.report import render_report
from resume_analyzer.utils.exceptions import UploadTooLarge, ValidationError
from resume_analyzer.utils.logging_config import get_logger

router = APIRouter(tags=["analysis"])
logger = get_logger(__name__)

STREAM_CHUNK_SIZE = 64 * 1024


async def read_upload(resume: UploadFile, job_description: str) -> UploadedDocument:
    """Validate the multipart input before it enters the pipeline."""
    processing = get_settings().processing
    if len(job_description or "") > processing.max_job_description_chars:
        raise ValidationError(
            f"Job description exceeds {processing.max_job_description_chars} characters",
            field="jobDescription",
        )

    content = await resume.read(processing.max_upload_bytes + 1)
    if len(content) > processing.max_upload_bytes:
        raise UploadTooLarge(
            f"Resume exceeds the {processing.max_upload_bytes} byte upload limit",
            limit=processing.max_upload_bytes,
        )
    if not content:
        raise ValidationError("No file uploaded", field="resume")

    return UploadedDocument(
        content=content,
        filename=resume.filename or "",
        content_type=resume.content_type or "",
    )


def to_response(result: AnalysisResult) -> AnalyzeResponse:
    response = AnalyzeResponse(strategy=result.strategy.value, fallback_reason=result.ai_error)
    if result.ai is not None:
        return response.model_copy(update=result.ai.model_dump(exclude_unset=True, exclude_none=True))
    if result.skill_match is not None:
        response.skills = result.skill_match.found_skills
        response.skill_strength = result.skill_match.skill_strength
    if result.fit is not None:
        response.fit_score = result.fit.fit_score
        response.matching_skills = result.fit.matching_skills
        response.missing_skills = result.fit.missing_skills
    return response


@router.post("/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True, response_model_by_alias=True)
async def analyze(
    resume: UploadFile = File(...),
    job_description: str = Form("", alias="jobDescription"),
    strategy: Strategy = Query(Strategy.DETERMINISTIC, description="Scoring strategy: deterministic or ai"),
    fallback: bool = Query(False, description="Fall back to deterministic scoring when the AI path fails"),
):
    """Score a resume against an optional job description"""
    document = await read_upload(resume, job_description)
    logger.info(f"Analyzing '{document.filename}' ({len(document.content)} bytes) with strategy={strategy.value}")
    result = await run_analysis(document, job_description, strategy=strategy, fallback=fallback)
    return to_response(result)


@router.post("/interview", response_model=InterviewResponse, response_model_by_alias=True)
async def interview(
    resume: UploadFile = File(...),
    job_description: str = Form("", alias="jobDescription"),
):
    """Generate interview preparation questions for a resume"""
    document = await read_upload(resume, job_description)
    logger.info(f"Generating interview prep for '{document.filename}'")
    text = await run_interview_prep(document, job_description)
    return InterviewResponse(interview_prep=text)


def _stream(buffer: BytesIO) -> Iterator[bytes]:
    try:
        while True:
            chunk = buffer.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    except Exception as e:
        # Headers are already sent; nothing left to convert into an error response
        logger.error(f"Report stream failed mid-response: {e}", exc_info=True)
        raise


@router.post("/report")
async def report(payload: ReportPayload):
    """Render the supplied results into a downloadable PDF"""
    buffer = BytesIO()
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, render_report, payload, buffer)
    buffer.seek(0)
    return StreamingResponse(
        _stream(buffer),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="resume_report.pdf"'},
    )
