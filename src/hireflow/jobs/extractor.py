"""Resume document to text extraction."""

import io
from typing import Optional

from pypdf import PdfReader

from hireflow.config import settings
from hireflow.core.errors import DocumentUnreadable
from hireflow.utils.logging import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


class TextExtractor:
    """Turns an uploaded resume blob into plain text.

    PDF documents are read with pypdf; anything else must be UTF-8 text.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self.logger = logger.bind(component="text_extractor")
        self.max_bytes = settings.max_resume_bytes if max_bytes is None else max_bytes

    def extract(self, document: bytes) -> str:
        """
        Extract plain text from a resume document.

        Raises:
            DocumentUnreadable: empty, oversized, corrupt or undecodable input
        """
        if not document:
            raise DocumentUnreadable("document is empty")

        if len(document) > self.max_bytes:
            raise DocumentUnreadable(
                f"document is {len(document)} bytes, limit is {self.max_bytes}"
            )

        if document.lstrip()[:4] == PDF_MAGIC:
            text = self._extract_pdf(document)
        else:
            text = self._extract_plain(document)

        self.logger.debug("Resume text extracted", size_bytes=len(document), text_length=len(text))
        return text

    def _extract_pdf(self, document: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(document))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            self.logger.warning("PDF extraction failed", error=str(e), error_type=type(e).__name__)
            raise DocumentUnreadable(f"corrupt PDF ({type(e).__name__})") from e
        if not pages:
            raise DocumentUnreadable("corrupt PDF (no pages)")
        return "\n".join(pages).strip()

    def _extract_plain(self, document: bytes) -> str:
        try:
            return document.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise DocumentUnreadable("not a PDF or UTF-8 text document") from e
