"""
Orchestrator Service

Routes a user query to the plugin for the selected mode and degrades to a
plain legal-assistant chat answer whenever a plugin fails or produces
nothing usable:
1. DeepResearch -> ResearchPlugin brief
2. CrossExamine -> ExaminePlugin analysis
3. Paralegal -> document retrieval, LLM task selection, ParalegalPlugin task
4. None -> enhanced chat
"""

import logging
from typing import Awaitable, Callable, List, Optional

from counsel.config import settings
from counsel.plugins.examine_plugin import ExaminePlugin, examine_plugin
from counsel.plugins.paralegal_plugin import (
    NO_CONTENT_TO_ANALYZE,
    NO_CONTENT_TO_SUMMARIZE,
    PARALEGAL_TASKS,
    ParalegalPlugin,
    paralegal_plugin,
)
from counsel.plugins.research_plugin import ResearchPlugin, research_plugin
from counsel.prompts import (
    CHAT_PROMPT,
    FALLBACK_CHAT_PROMPT,
    PARALEGAL_INTENT_PROMPT,
    render,
)
from counsel.schemas.query import AppMode, QueryRequest, QueryResponse
from counsel.services import gemini_service
from counsel.services.search_service import DocumentSearchService, search_service
from counsel.utils.text_helpers import shorten

logger = logging.getLogger(__name__)

EMPTY_QUERY_REPLY = (
    "Your query appears to be empty. Please provide a question or topic to explore."
)
NO_DOCUMENTS_PREFIX = (
    "No relevant documents were found for your query. Here's what I can tell you:"
)
NO_MEANINGFUL_CONTENT_PREFIX = (
    "I found some documents, but couldn't extract meaningful content. "
    "Here's what I can tell you:"
)
EMPTY_CHAT_REPLY = "I apologize, but I couldn't process that request effectively."

PARALEGAL_REPLIES = {
    "notes": ("Generated notes from documents for '{}'.", "Structured Notes"),
    "summarize": ("Generated summary based on documents for '{}'.", "Document Summary"),
    "extract": ("Extracted key information from documents for '{}'.", "Key Entities"),
}


def is_invalid_canvas(content: Optional[str]) -> bool:
    """Blank canvases, empty JSON and plugin error blocks are not shown."""
    return (
        not content
        or not content.strip()
        or content.strip() == "{}"
        or "An error occurred" in content
    )


def is_placeholder_content(content: Optional[str]) -> bool:
    return (
        not content
        or not content.strip()
        or content.strip() == "{}"
        or NO_CONTENT_TO_ANALYZE.rstrip(".") in content
        or NO_CONTENT_TO_SUMMARIZE.rstrip(".") in content
    )


class OrchestratorService:
    """Dispatches queries by mode with a fallback chain to general chat."""

    def __init__(
        self,
        research: Optional[ResearchPlugin] = None,
        examine: Optional[ExaminePlugin] = None,
        paralegal: Optional[ParalegalPlugin] = None,
        search: Optional[DocumentSearchService] = None,
        llm: Optional[Callable[[str], Awaitable[str]]] = None,
        top_k: int = 5,
        history_limit: int = 10,
    ):
        self.research = research or research_plugin
        self.examine = examine or examine_plugin
        self.paralegal = paralegal or paralegal_plugin
        self.search = search or search_service
        self._llm = llm or gemini_service.generate_text
        self.top_k = top_k
        self.history_limit = history_limit

    async def process_query(self, request: QueryRequest) -> QueryResponse:
        """Process a user query based on the requested mode."""
        if request is None or not request.query or not request.query.strip():
            logger.warning("Invalid query request received. Query cannot be null or empty.")
            return QueryResponse(response=EMPTY_QUERY_REPLY)

        logger.info("Processing query: '%s', Mode: %s", request.query, request.mode.value)

        try:
            if request.mode == AppMode.DEEP_RESEARCH:
                return await self.execute_with_fallback(
                    request,
                    self._run_research,
                    "An error occurred during research.",
                )
            if request.mode == AppMode.CROSS_EXAMINE:
                return await self.execute_with_fallback(
                    request,
                    self._run_examine,
                    "An error occurred during examination.",
                )
            if request.mode == AppMode.PARALEGAL:
                return await self.execute_paralegal_mode(request)
            return await self.execute_enhanced_chat(request)
        except Exception as e:
            logger.exception(
                "Unhandled error processing query: %s in Mode %s. Exception: %s - %s",
                request.query, request.mode.value, type(e).__name__, e,
            )
            return await self.execute_enhanced_chat(
                request,
                is_fallback=True,
                fallback_prefix="An unexpected error occurred. Falling back to basic mode.",
            )

    async def _run_research(self, request: QueryRequest) -> QueryResponse:
        logger.info("Calling ResearchPlugin.perform_legal_research")
        content = await self.research.perform_legal_research(request.query)
        return QueryResponse(
            response=f"Generated research brief based on your query about '{shorten(request.query)}'.",
            canvas_content=content,
            canvas_title="Legal Research Brief",
        )

    async def _run_examine(self, request: QueryRequest) -> QueryResponse:
        logger.info("Calling ExaminePlugin.find_relevant_passages")
        content = await self.examine.find_relevant_passages(request.query)
        return QueryResponse(
            response=f"Found relevant passages based on your query about '{shorten(request.query)}'.",
            canvas_content=content,
            canvas_title="Legal Analysis",
        )

    async def execute_with_fallback(
        self,
        request: QueryRequest,
        action: Callable[[QueryRequest], Awaitable[QueryResponse]],
        error_message: str,
    ) -> QueryResponse:
        """Run a plugin action and fall back to chat on error or unusable content."""
        try:
            response = await action(request)
        except Exception as e:
            logger.error(
                "Error executing action: %s. Exception: %s - %s",
                error_message, type(e).__name__, e,
            )
            return await self.execute_enhanced_chat(
                request, is_fallback=True, fallback_prefix=error_message
            )

        if is_invalid_canvas(response.canvas_content):
            logger.warning(
                "Action returned invalid or empty content: %s",
                (response.canvas_content or "")[:100],
            )
            return await self.execute_enhanced_chat(request, is_fallback=True)

        return response

    async def detect_paralegal_task(self, query: str) -> str:
        """Ask the LLM which paralegal task the query implies; defaults to notes."""
        desired_task = "notes"
        try:
            logger.info("Invoking LLM to determine paralegal task for query: %s", query)
            reply = await self._llm(render(PARALEGAL_INTENT_PROMPT, query=query))
            intent = (reply or "").strip().strip("'\".").lower()
            if intent in PARALEGAL_TASKS:
                desired_task = intent
            logger.info("LLM determined paralegal task as: %s", desired_task)
        except Exception as e:
            logger.warning("LLM call to determine paralegal task failed. Defaulting to 'notes': %s", e)
        return desired_task

    async def execute_paralegal_mode(self, request: QueryRequest) -> QueryResponse:
        logger.info("Processing Paralegal request for query: %s", request.query)

        # Step 1: retrieve document chunks
        try:
            results = await self.search.search(request.query, top_k=self.top_k)
            chunks: List[str] = [c.content for c in results if c.content]
            logger.info("RAG found %d relevant document chunks.", len(chunks))
        except Exception:
            logger.exception("Error during RAG phase for Paralegal mode. Falling back to enhanced chat.")
            return await self.execute_enhanced_chat(request, is_fallback=True)

        # Step 2: nothing indexed for this query
        if not chunks:
            logger.warning(
                "No relevant document chunks found for query: %s. Falling back to enhanced chat.",
                request.query,
            )
            return await self.execute_enhanced_chat(
                request, is_fallback=True, fallback_prefix=NO_DOCUMENTS_PREFIX
            )

        # Step 3: choose the task
        desired_task = await self.detect_paralegal_task(request.query)

        # Step 4: run it
        logger.info("Executing paralegal task '%s'.", desired_task)
        try:
            content = await self.paralegal.run_task(desired_task, chunks, request.query)
        except Exception:
            logger.exception(
                "Error executing paralegal plugin task '%s'. Falling back to enhanced chat.",
                desired_task,
            )
            return await self.execute_enhanced_chat(request, is_fallback=True)

        if is_placeholder_content(content):
            logger.warning(
                "Paralegal plugin task '%s' returned empty or placeholder content. "
                "Falling back to enhanced chat.",
                desired_task,
            )
            return await self.execute_enhanced_chat(
                request, is_fallback=True, fallback_prefix=NO_MEANINGFUL_CONTENT_PREFIX
            )

        reply_template, title = PARALEGAL_REPLIES[desired_task]
        return QueryResponse(
            response=reply_template.format(shorten(request.query)),
            canvas_content=content,
            canvas_title=title,
        )

    def _format_history(self, chat_history: Optional[List[str]]) -> str:
        lines = [line for line in (chat_history or []) if line and line.strip()]
        if not lines or self.history_limit <= 0:
            return ""
        lines = lines[-self.history_limit:]
        return "Conversation so far:\n" + "\n".join(lines) + "\n\n"

    async def execute_enhanced_chat(
        self,
        request: QueryRequest,
        is_fallback: bool = False,
        fallback_prefix: Optional[str] = None,
    ) -> QueryResponse:
        """Answer as a general legal assistant. Never returns an empty reply."""
        logger.info(
            "Executing enhanced chat for query: %s, isFallback: %s", request.query, is_fallback
        )
        history = self._format_history(request.chat_history)

        if is_fallback:
            logger.info("Using fallback mode for enhanced chat")
            prompt = render(
                FALLBACK_CHAT_PROMPT,
                history=history,
                query=request.query,
                prefix=f"{fallback_prefix}\n\n" if fallback_prefix else "",
            )
        else:
            prompt = render(CHAT_PROMPT, history=history, query=request.query)

        try:
            reply = await self._llm(prompt)
        except Exception:
            logger.exception("Error in enhanced chat mode. Falling back to absolute basic chat.")
            return QueryResponse(
                response=(
                    f"I understand you're asking about: '{shorten(request.query)}'. "
                    "However, I'm currently experiencing some technical issues. "
                    "Please try again or rephrase your question."
                )
            )

        if not reply or not reply.strip():
            reply = EMPTY_CHAT_REPLY
        return QueryResponse(response=reply)


orchestrator_service = OrchestratorService(
    top_k=settings.RAG_TOP_K,
    history_limit=settings.CHAT_HISTORY_LIMIT,
)
