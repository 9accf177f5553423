"""
Reasoning Adapter: prompts the external reasoning service and parses its replies
"""
import asyncio
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from resume_analyzer.helpers.prompts import (
    ATS_PROMPT,
    ATS_SYSTEM_PROMPT,
    INTERVIEW_PROMPT,
    INTERVIEW_SYSTEM_PROMPT,
)
from resume_analyzer.models.models import AIAssessment, Transcript
from resume_analyzer.models.settings import LLMSettings, ProcessingSettings, get_settings
from resume_analyzer.utils.exceptions import MalformedUpstreamResponse
from resume_analyzer.utils.logging_config import PerformanceMonitor, get_logger
from resume_analyzer.utils.utils import chat_complete, find_json_span, parse_json_object

logger = get_logger(__name__)


def build_messages(system: str, prompt: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]


def parse_assessment(raw: str) -> AIAssessment:
    """Pull the first JSON object out of a free-form reply and validate it."""
    result = parse_json_object(find_json_span(raw))
    if not result.ok:
        logger.warning(f"Unparseable assessment reply: {result.error}")
        raise MalformedUpstreamResponse(f"Assessment reply unusable: {result.error}", raw_response=raw)
    try:
        return AIAssessment.model_validate(result.data)
    except PydanticValidationError as e:
        logger.warning(f"Assessment reply failed validation: {e.error_count()} error(s)")
        raise MalformedUpstreamResponse(
            "Assessment reply does not match the expected shape", raw_response=raw, cause=e
        ) from e


class ReasoningAdapter:
    """Builds task prompts and calls the reasoning service; never retries."""

    def __init__(self, llm: Optional[LLMSettings] = None, processing: Optional[ProcessingSettings] = None):
        settings = get_settings() if llm is None or processing is None else None
        self.llm = llm or settings.llm
        self.processing = processing or settings.processing

    async def _complete(self, messages: List[Dict[str, str]], operation: str) -> str:
        loop = asyncio.get_running_loop()
        with PerformanceMonitor(f"Reasoning call ({operation}, model={self.llm.model})", logger, threshold_ms=10000):
            return await loop.run_in_executor(None, chat_complete, messages, self.llm)

    async def assess(self, transcript: Transcript, job_description: str = "") -> AIAssessment:
        prompt = ATS_PROMPT.format(
            resume=transcript.text[:self.processing.resume_excerpt_chars],
            job_description=job_description or "(none provided)",
        )
        raw = await self._complete(build_messages(ATS_SYSTEM_PROMPT, prompt), "assessment")
        assessment = parse_assessment(raw)
        logger.info(f"AI assessment parsed with fields: {sorted(assessment.present_fields())}")
        return assessment

    async def interview_prep(self, transcript: Transcript, job_description: str = "") -> str:
        prompt = INTERVIEW_PROMPT.format(
            resume=transcript.text[:self.processing.interview_excerpt_chars],
            job_description=job_description or "(none provided)",
        )
        return await self._complete(build_messages(INTERVIEW_SYSTEM_PROMPT, prompt), "interview prep")
