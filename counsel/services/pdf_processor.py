"""
Service for text extraction from PDF documents.
"""

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from typing import List
import io
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """
    Handles text extraction from PDF documents.
    """

    @staticmethod
    def extract_text_by_page(pdf_content: bytes) -> List[str]:
        """
        Extracts text from each page of a PDF document.

        Args:
            pdf_content: The binary content of the PDF file.

        Returns:
            A list of strings, where each string is the text from a single page.
            Unreadable documents yield an empty list.
        """
        try:
            reader = PdfReader(io.BytesIO(pdf_content))
            return [(page.extract_text() or "") for page in reader.pages]
        except (PyPdfError, ValueError, OSError) as e:
            logger.error("Error extracting PDF pages: %s", e)
            return []

    @classmethod
    def extract_text(cls, pdf_content: bytes) -> str:
        """Extracts the text of all pages joined by a single space."""
        return " ".join(cls.extract_text_by_page(pdf_content))
