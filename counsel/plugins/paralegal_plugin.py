"""
Paralegal plugin: notes, summaries and entity indexes built from document chunks.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from counsel.prompts import (
    DOC_NOTES_PROMPT,
    EXTRACT_KEY_INFO_PROMPT,
    SUMMARIZE_PROMPT,
    render,
)
from counsel.services import gemini_service

logger = logging.getLogger(__name__)

PARALEGAL_TASKS = ("notes", "summarize", "extract")

NO_CONTENT_TO_ANALYZE = "No content to analyze."
NO_CONTENT_TO_SUMMARIZE = "No content to summarize."


class ParalegalPlugin:
    """Prompt-templated operations over retrieved document chunks."""

    def __init__(self, llm: Optional[Callable[[str], Awaitable[str]]] = None):
        self._llm = llm or gemini_service.generate_text

    async def _run(self, template: str, chunks: List[str], query: str, fallback: str) -> str:
        prompt = render(template, query=query, chunks="\n".join(chunks))
        result = await self._llm(prompt)
        logger.debug("Paralegal result: %s...", (result or "")[:50])
        return result or fallback

    async def generate_doc_notes(self, chunks: List[str], query: str) -> str:
        """Generates professional legal notes from document chunks."""
        logger.info("Generating notes for query: %s (%d chunks)", query, len(chunks or []))
        if not chunks:
            logger.warning(NO_CONTENT_TO_ANALYZE)
            return NO_CONTENT_TO_ANALYZE
        return await self._run(DOC_NOTES_PROMPT, chunks, query, "Error generating notes.")

    async def summarize_context(self, chunks: List[str], query: str) -> str:
        """Summarizes document chunks into a concise legal brief summary."""
        logger.info("Summarizing context for query: %s (%d chunks)", query, len(chunks or []))
        if not chunks:
            logger.warning(NO_CONTENT_TO_SUMMARIZE)
            return NO_CONTENT_TO_SUMMARIZE
        return await self._run(SUMMARIZE_PROMPT, chunks, query, "Error generating summary.")

    async def extract_key_info(self, chunks: List[str], query: str) -> str:
        """Extracts key entities from document chunks as a legal reference index."""
        logger.info("Extracting key info for query: %s (%d chunks)", query, len(chunks or []))
        if not chunks:
            logger.warning(NO_CONTENT_TO_ANALYZE)
            return NO_CONTENT_TO_ANALYZE
        return await self._run(
            EXTRACT_KEY_INFO_PROMPT, chunks, query, "Error extracting key information."
        )

    async def run_task(self, task: str, chunks: List[str], query: str) -> str:
        """Dispatch to the operation named by `task`."""
        if task == "summarize":
            return await self.summarize_context(chunks, query)
        if task == "extract":
            return await self.extract_key_info(chunks, query)
        if task == "notes":
            return await self.generate_doc_notes(chunks, query)
        raise ValueError(f"Unknown paralegal task: {task}")


paralegal_plugin = ParalegalPlugin()
