"""
Service for ingesting PDFs into the document index.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from counsel.config import settings
from counsel.services.pdf_processor import PDFProcessor
from counsel.services.search_service import DocumentSearchService, search_service

logger = logging.getLogger(__name__)


class DocumentProcessingError(Exception):
    """Raised when an uploaded document cannot be indexed"""


def chunk_text(text: str, chunk_size: int = 200) -> List[str]:
    """Split text into consecutive groups of `chunk_size` words."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    words = text.split()
    return [
        " ".join(words[i:i + chunk_size])
        for i in range(0, len(words), chunk_size)
    ]


class DocumentService:
    """Extracts, chunks, embeds and indexes uploaded PDFs."""

    def __init__(
        self,
        search: Optional[DocumentSearchService] = None,
        pdf_processor: Optional[PDFProcessor] = None,
        chunk_size: int = 200,
    ):
        self.search = search or search_service
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.chunk_size = chunk_size

    async def process_document(self, pdf_content: bytes, file_name: str) -> int:
        """
        Index a PDF.

        Returns:
            Number of chunks uploaded

        Raises:
            DocumentProcessingError: if the PDF has no extractable text
        """
        text = self.pdf_processor.extract_text(pdf_content)
        chunks = chunk_text(text, self.chunk_size)
        if not chunks:
            raise DocumentProcessingError(
                f"No extractable text found in {file_name}"
            )

        logger.info("Indexing %s as %d chunks", file_name, len(chunks))
        return await self.search.index_chunks(file_name, chunks)

    async def load_pdfs_from_folder(self, pdf_folder: str) -> Dict[str, int]:
        """
        Load all PDFs from a folder into the index.

        Returns:
            Dictionary with stats (total, success, failed, skipped)
        """
        folder = Path(pdf_folder)
        stats = {"total": 0, "success": 0, "failed": 0, "skipped": 0}

        if not folder.exists():
            logger.error("Folder not found: %s", folder)
            return stats

        pdf_files = sorted(folder.glob("*.pdf"))
        if not pdf_files:
            logger.warning("No PDF files found in %s", folder)
            return stats

        logger.info("Found %d PDF files to process in %s", len(pdf_files), folder)
        stats["total"] = len(pdf_files)

        for i, pdf_file in enumerate(pdf_files, 1):
            logger.info("[%d/%d] Processing: %s", i, len(pdf_files), pdf_file.name)
            try:
                added = await self.process_document(pdf_file.read_bytes(), pdf_file.name)
            except DocumentProcessingError as e:
                logger.warning("Skipped: %s", e)
                stats["skipped"] += 1
                continue
            except Exception as e:
                logger.error("Error processing %s: %s", pdf_file.name, e)
                stats["failed"] += 1
                continue

            if added > 0:
                stats["success"] += 1
            else:
                logger.warning("Failed to add: %s", pdf_file.name)
                stats["failed"] += 1

        return stats


document_service = DocumentService(chunk_size=settings.CHUNK_SIZE_WORDS)
