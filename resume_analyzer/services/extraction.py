"""
Text extraction service: turns an uploaded PDF or image into a Transcript
"""
import asyncio
from typing import Dict, Optional

from resume_analyzer.helpers.parsing import TextExtractor, build_extractors, uploaded_file
from resume_analyzer.models.models import DocumentKind, Transcript, UploadedDocument
from resume_analyzer.models.settings import get_settings
from resume_analyzer.utils.exceptions import ExceptionContext, ExtractionFailure, UnsupportedFormat
from resume_analyzer.utils.logging_config import PerformanceMonitor, get_logger

logger = get_logger(__name__)


def _extract_sync(document: UploadedDocument, extractor: TextExtractor) -> str:
    with ExceptionContext(
        f"{extractor.kind.value} text extraction",
        logger=logger,
        wrap_as=ExtractionFailure,
        upload_name=document.filename,
        document_kind=extractor.kind.value,
    ):
        with uploaded_file(document) as path:
            with PerformanceMonitor(f"Extracting {extractor.kind.value} '{document.filename}'", logger, threshold_ms=5000):
                return extractor.extract(path)


async def extract_text(
    document: UploadedDocument,
    kind: DocumentKind,
    extractors: Optional[Dict[DocumentKind, TextExtractor]] = None,
) -> Transcript:
    """Extract a case-preserving transcript; blocking work runs in the default executor."""
    if kind == DocumentKind.UNSUPPORTED:
        raise UnsupportedFormat(filename=document.filename, content_type=document.content_type)

    extractors = extractors or build_extractors(get_settings().processing.ocr_language)
    extractor = extractors[kind]

    loop = asyncio.get_running_loop()
    text = await loop.run_in_executor(None, _extract_sync, document, extractor)
    text = text or ""
    logger.info(f"Extracted {len(text)} characters from {kind.value} '{document.filename}'")
    return Transcript(text=text, source_kind=kind)
