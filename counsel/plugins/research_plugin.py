"""
Research plugin: structured notes from indexed documents, combined with web
sources into an HTML legal research brief.
"""

import json
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from counsel.config import settings
from counsel.models.search import DocumentChunk
from counsel.prompts import RESEARCH_BRIEF_PROMPT, STRUCTURED_NOTES_PROMPT, render
from counsel.services import gemini_service
from counsel.services.search_service import DocumentSearchService, search_service
from counsel.services.web_search_service import (
    WebSearchService,
    format_web_results,
    web_search_service,
)
from counsel.utils.text_helpers import parse_json_reply

logger = logging.getLogger(__name__)

EMPTY_NOTES = "{}"


class ResearchPlugin:
    """Performs legal research with structured notes and web synthesis."""

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

    async def perform_legal_research(self, query: str) -> str:
        """
        Build a research brief for a legal question.

        Never raises: failures are reported as an HTML error block.
        """
        logger.info("Starting legal research for query: %s", query)
        try:
            notes_json = await self.generate_structured_notes(query)
            logger.info("Generated structured notes: %s", notes_json[:50])

            web_results = await self.web_search.search(query)
            web_content = format_web_results(web_results)

            brief = await self.generate_research_brief(query, notes_json, web_content)
            logger.info("Completed legal research for query: %s", query)
            return brief
        except Exception as e:
            logger.exception("Error performing legal research for query: %s", query)
            return (
                f"<div class='error'>An error occurred: {e}. "
                "Please refine your query or check document availability.</div>"
            )

    async def load_relevant_documents(self, query: str) -> List[DocumentChunk]:
        try:
            chunks = await self.search.search(query, top_k=self.max_chunks)
        except Exception as e:
            logger.error("Error loading documents: %s", e)
            return []
        return chunks[:self.max_chunks]

    async def generate_structured_notes(self, query: str) -> str:
        """
        Ask the LLM for JSON notes (timeline, keyPoints, questions) over the
        most relevant chunks. Returns "{}" when there is nothing usable.
        """
        chunks = await self.load_relevant_documents(query)
        contents = [c.content for c in chunks if c.content]
        if not contents:
            logger.warning("No relevant documents found for notes generation")
            return EMPTY_NOTES

        prompt = render(STRUCTURED_NOTES_PROMPT, query=query, chunks="\n".join(contents))
        reply = await self._llm(prompt)

        try:
            notes = parse_json_reply(reply)
        except ValueError:
            logger.warning("Invalid JSON from notes generation, returning empty object")
            return EMPTY_NOTES

        logger.info("Structured notes generated successfully")
        return json.dumps(notes, indent=2)

    async def generate_research_brief(self, query: str, notes_json: str, web_content: str) -> str:
        logger.info("Generating research brief for query: %s", query)
        try:
            prompt = render(
                RESEARCH_BRIEF_PROMPT,
                query=query,
                notes=notes_json,
                web=web_content,
                date=datetime.now().strftime("%B %d, %Y"),
            )
            brief = await self._llm(prompt)
        except Exception as e:
            logger.error("Error generating research brief: %s", e)
            return f"<div class='error'>Error generating research brief: {e}</div>"

        return brief or "<div class='error'>Error generating research brief.</div>"


research_plugin = ResearchPlugin(max_chunks=settings.RAG_TOP_K)
