import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator

import pytesseract
from pdfminer.high_level import extract_text as pdf_extract
from PIL import Image

from resume_analyzer.models.models import DocumentKind, UploadedDocument

PDF_CONTENT_TYPE = "application/pdf"
IMAGE_CONTENT_PREFIX = "image/"
PDF_EXTENSIONS = (".pdf",)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


def classify_document(filename: str, content_type: str) -> DocumentKind:
    """Either the extension or the declared content type is enough to decide."""
    ext = Path(filename or "").suffix.lower()
    mime = (content_type or "").strip().lower()

    if mime == PDF_CONTENT_TYPE or ext in PDF_EXTENSIONS:
        return DocumentKind.PDF
    if mime.startswith(IMAGE_CONTENT_PREFIX) or ext in IMAGE_EXTENSIONS:
        return DocumentKind.IMAGE
    return DocumentKind.UNSUPPORTED


@contextmanager
def uploaded_file(document: UploadedDocument) -> Iterator[Path]:
    """Write the upload to a temp file that is removed on every exit path."""
    suffix = Path(document.filename or "").suffix.lower()
    fd, name = tempfile.mkstemp(prefix="resume_", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(document.content)
        yield Path(name)
    finally:
        if os.path.exists(name):
            os.remove(name)


class TextExtractor:
    kind: DocumentKind = DocumentKind.UNSUPPORTED

    def extract(self, path: Path) -> str:
        raise NotImplementedError


class PdfTextExtractor(TextExtractor):
    kind = DocumentKind.PDF

    def extract(self, path: Path) -> str:
        return pdf_extract(str(path))


class ImageTextExtractor(TextExtractor):
    kind = DocumentKind.IMAGE

    def __init__(self, language: str = "eng"):
        self.language = language

    def extract(self, path: Path) -> str:
        with Image.open(path) as image:
            image.load()
            return pytesseract.image_to_string(image, lang=self.language)


def build_extractors(ocr_language: str = "eng") -> Dict[DocumentKind, TextExtractor]:
    return {
        DocumentKind.PDF: PdfTextExtractor(),
        DocumentKind.IMAGE: ImageTextExtractor(language=ocr_language),
    }
