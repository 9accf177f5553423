import asyncio
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from resume_analyzer.helpers.parsing import (
    ImageTextExtractor,
    classify_document,
    uploaded_file,
)
from resume_analyzer.models.models import DocumentKind, UploadedDocument
from resume_analyzer.services.extraction import extract_text
from resume_analyzer.utils.exceptions import ExtractionFailure, UnsupportedFormat

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestDocumentClassifier:
    """Test cases for document classification"""

    def test_pdf_by_content_type(self):
        assert classify_document("resume", "application/pdf") == DocumentKind.PDF

    def test_pdf_by_extension_with_lying_content_type(self):
        """Extension alone is enough even when the content type disagrees"""
        assert classify_document("Resume.PDF", "application/octet-stream") == DocumentKind.PDF

    def test_image_by_content_type_prefix(self):
        assert classify_document("scan", "image/webp") == DocumentKind.IMAGE

    @pytest.mark.parametrize("name", ["cv.png", "cv.jpg", "cv.JPEG"])
    def test_image_by_extension(self, name):
        assert classify_document(name, "") == DocumentKind.IMAGE

    @pytest.mark.parametrize("content_type", [DOCX_TYPE, "application/octet-stream", "text/plain", ""])
    def test_docx_is_unsupported(self, content_type):
        assert classify_document("resume.docx", content_type) == DocumentKind.UNSUPPORTED

    def test_missing_signals(self):
        assert classify_document(None, None) == DocumentKind.UNSUPPORTED


class TestUploadedFile:
    """Test cases for the scoped temp file"""

    def test_file_removed_after_use(self):
        doc = UploadedDocument(content=b"abc", filename="cv.pdf", content_type="application/pdf")
        with uploaded_file(doc) as path:
            assert path.exists()
            assert path.suffix == ".pdf"
            assert path.read_bytes() == b"abc"
        assert not path.exists()

    def test_file_removed_on_error(self):
        doc = UploadedDocument(content=b"abc", filename="cv.png")
        with pytest.raises(RuntimeError):
            with uploaded_file(doc) as path:
                raise RuntimeError("boom")
        assert not path.exists()


class TestTextExtraction:
    """Test cases for PDF and OCR extraction"""

    def test_pdf_extraction(self, resume_pdf):
        doc = UploadedDocument(content=resume_pdf, filename="cv.pdf", content_type="application/pdf")
        transcript = asyncio.run(extract_text(doc, DocumentKind.PDF))

        assert transcript.source_kind == DocumentKind.PDF
        assert "Experienced React and Node developer" in transcript.text

    def test_corrupt_pdf_raises_and_cleans_up(self):
        created = []
        real_mkstemp = tempfile.mkstemp

        def spy(*args, **kwargs):
            fd, name = real_mkstemp(*args, **kwargs)
            created.append(name)
            return fd, name

        doc = UploadedDocument(content=b"definitely not a pdf", filename="cv.pdf", content_type="application/pdf")
        with patch("resume_analyzer.helpers.parsing.tempfile.mkstemp", side_effect=spy):
            with pytest.raises(ExtractionFailure) as exc_info:
                asyncio.run(extract_text(doc, DocumentKind.PDF))

        assert exc_info.value.details["document_kind"] == "pdf"
        assert len(created) == 1
        assert not os.path.exists(created[0])

    def test_image_extraction_uses_english_ocr(self, resume_png):
        doc = UploadedDocument(content=resume_png, filename="scan.png", content_type="image/png")
        with patch("resume_analyzer.helpers.parsing.pytesseract.image_to_string", return_value="Python and Docker engineer") as ocr:
            transcript = asyncio.run(extract_text(doc, DocumentKind.IMAGE))

        assert transcript.text == "Python and Docker engineer"
        assert transcript.source_kind == DocumentKind.IMAGE
        assert ocr.call_args.kwargs["lang"] == "eng"

    def test_unreadable_image_raises(self):
        doc = UploadedDocument(content=b"\x00\x01garbage", filename="scan.png", content_type="image/png")
        with pytest.raises(ExtractionFailure):
            asyncio.run(extract_text(doc, DocumentKind.IMAGE))

    def test_ocr_engine_failure_is_wrapped(self, resume_png):
        doc = UploadedDocument(content=resume_png, filename="scan.jpg", content_type="image/jpeg")
        with patch("resume_analyzer.helpers.parsing.pytesseract.image_to_string", side_effect=OSError("tesseract missing")):
            with pytest.raises(ExtractionFailure) as exc_info:
                asyncio.run(extract_text(doc, DocumentKind.IMAGE))

        assert isinstance(exc_info.value.cause, OSError)

    def test_unsupported_kind_never_extracts(self):
        doc = UploadedDocument(content=b"PK\x03\x04", filename="cv.docx", content_type=DOCX_TYPE)
        with patch("resume_analyzer.services.extraction.build_extractors") as build:
            with pytest.raises(UnsupportedFormat):
                asyncio.run(extract_text(doc, DocumentKind.UNSUPPORTED))
        build.assert_not_called()

    def test_custom_ocr_language(self, resume_png, tmp_path):
        path = Path(tmp_path) / "scan.png"
        path.write_bytes(resume_png)
        with patch("resume_analyzer.helpers.parsing.pytesseract.image_to_string", return_value="texte") as ocr:
            assert ImageTextExtractor(language="fra").extract(path) == "texte"
        assert ocr.call_args.kwargs["lang"] == "fra"
