"""
Examine plugin: passage-level legal argument analysis over indexed documents
and recent web sources.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from counsel.config import settings
from counsel.models.search import DocumentChunk
from counsel.prompts import LEGAL_ANALYSIS_PROMPT, render
from counsel.services import gemini_service
from counsel.services.search_service import DocumentSearchService, search_service
from counsel.services.web_search_service import (
    WebSearchService,
    format_web_results,
    web_search_service,
)

logger = logging.getLogger(__name__)


def format_document_chunks(chunks: List[DocumentChunk]) -> str:
    lines = []
    for chunk in chunks:
        lines.append(f"### Doc ID: {chunk.document_id}")
        lines.append(f"**Content**: {chunk.content}")
        lines.append(f"**Score**: {chunk.score:.2f}")
        lines.append("")
    return "\n".join(lines)


class ExaminePlugin:
    """Examines documents and web sources to build precise legal arguments."""

    def __init__(
        self,
        search: Optional[DocumentSearchService] = None,
        web_search: Optional[WebSearchService] = None,
        llm: Optional[Callable[[str], Awaitable[str]]] = None,
        max_chunks: int = 5,
    ):
        self.search = search or search_service
        self.web_search = web_search or web_search_service
        self._llm = llm or gemini_service.generate_text
        self.max_chunks = max_chunks

    async def find_relevant_passages(self, query: str) -> str:
        """
        Build an HTML legal argument analysis for the query.

        Never raises: failures are reported as an HTML error block.
        """
        logger.info("Starting analysis for query: %s", query)
        try:
            chunks = await self.vector_search_docs(query)
            if not chunks:
                logger.warning("No relevant documents found for query: %s", query)

            # Live search only; curated starting points are a research concern
            web_results = await self.web_search.search(query, allow_fallback=False)
            web_content = format_web_results(web_results)

            analysis = await self.generate_legal_analysis(query, chunks, web_content)
            logger.info("Completed analysis for query: %s", query)
            return analysis
        except Exception as e:
            logger.exception("Error processing query: %s", query)
            return (
                f'<div class="error">An error occurred: {e}. '
                "Please refine your query or check document availability.</div>"
            )

    async def vector_search_docs(self, query: str) -> List[DocumentChunk]:
        try:
            chunks = await self.search.search(query, top_k=self.max_chunks)
        except Exception as e:
            logger.error("Error during vector search: %s", e)
            return []

        if chunks:
            average = sum(c.score for c in chunks) / len(chunks)
            logger.info(
                "Found %d document chunks with confidence score: %.2f", len(chunks), average
            )
        return chunks[:self.max_chunks]

    async def generate_legal_analysis(
        self, query: str, chunks: List[DocumentChunk], web_content: str
    ) -> str:
        logger.info("Generating legal analysis for query: %s", query)
        average_score = sum(c.score for c in chunks) / len(chunks) if chunks else 0.0
        try:
            prompt = render(
                LEGAL_ANALYSIS_PROMPT,
                query=query,
                document_chunks=format_document_chunks(chunks),
                web=web_content,
                document_count=str(len(chunks)),
                average_score=f"{average_score:.2f}",
                timestamp=datetime.now().isoformat(timespec="seconds"),
            )
            analysis = await self._llm(prompt)
        except Exception as e:
            logger.error("Error generating legal analysis: %s", e)
            return f'<div class="error">Error generating legal analysis: {e}</div>'

        return analysis or '<div class="error">Error generating legal analysis.</div>'


examine_plugin = ExaminePlugin(max_chunks=settings.RAG_TOP_K)
