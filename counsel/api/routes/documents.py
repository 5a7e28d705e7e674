"""
Document endpoints: PDF indexing, vector search and direct plugin access.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import HTMLResponse

from counsel.config import settings
from counsel.dependencies import (
    get_document_service,
    get_examine_plugin,
    get_paralegal_plugin,
    get_research_plugin,
    get_search_service,
)
from counsel.plugins.examine_plugin import ExaminePlugin
from counsel.plugins.paralegal_plugin import PARALEGAL_TASKS, ParalegalPlugin
from counsel.plugins.research_plugin import ResearchPlugin
from counsel.schemas.documents import CanvasResult, DocumentSearchHit, UploadResponse
from counsel.services.document_service import DocumentProcessingError, DocumentService
from counsel.services.search_service import DocumentSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])

PARALEGAL_RESULTS = {
    "summarize": ("Summary generated.", "Document Summary"),
    "extract": ("Entities extracted.", "Key Entities"),
    "notes": ("Notes generated.", "Structured Notes"),
}


def _require_query(query: Optional[str]) -> str:
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Query is required."
        )
    return query


@router.post("/upload", response_model=UploadResponse)
async def upload(
    file: UploadFile = File(...),
    documents: DocumentService = Depends(get_document_service),
):
    """
    Upload a PDF and add its chunks to the vector index.

    Supported formats: .pdf
    """
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded."
        )
    if not (file.filename or "").lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are supported."
        )

    logger.info("Uploading file: %s", file.filename)
    try:
        chunks = await documents.process_document(content, file.filename)
    except DocumentProcessingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Upload error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing PDF: {e}",
        )

    return UploadResponse(
        message="PDF processed and indexed successfully.",
        file_name=file.filename,
        chunks=chunks,
    )


@router.get("/search", response_model=List[DocumentSearchHit])
async def search(
    query: Optional[str] = Query(None),
    search_service: DocumentSearchService = Depends(get_search_service),
):
    """Vector search over indexed chunks."""
    query = _require_query(query)
    logger.info("Search query: %s", query)
    try:
        chunks = await search_service.search(query, top_k=settings.DOCUMENT_SEARCH_TOP_K)
    except Exception as e:
        logger.error("Search error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error searching documents: {e}",
        )

    logger.info("Search found %d results.", len(chunks))
    return [
        DocumentSearchHit(
            id=c.id, document_id=c.document_id, content=c.content, score=c.score
        )
        for c in chunks
    ]


@router.post("/paralegal", response_model=CanvasResult)
async def paralegal(
    query: Optional[str] = Query(None),
    task: Optional[str] = Query(None),
    search_service: DocumentSearchService = Depends(get_search_service),
    plugin: ParalegalPlugin = Depends(get_paralegal_plugin),
):
    """Run a paralegal task (summarize, extract or notes) over retrieved chunks."""
    if not query or not task:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Query and task are required."
        )

    task = task.lower()
    if task not in PARALEGAL_TASKS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Task must be 'summarize', 'extract', or 'notes'.",
        )

    logger.info("Paralegal task: query='%s', task='%s'", query, task)
    try:
        chunks = await search_service.search(query, top_k=settings.DOCUMENT_SEARCH_TOP_K)
        contents = [c.content for c in chunks if c.content]
        logger.info("Found %d content chunks for paralegal task.", len(contents))

        if not contents:
            return CanvasResult(
                chat_response="No relevant content found.",
                canvas_content="",
                canvas_title=task,
            )

        result = await plugin.run_task(task, contents, query)
    except Exception as e:
        logger.exception("Paralegal error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing paralegal task: {e}",
        )

    chat_response, title = PARALEGAL_RESULTS[task]
    return CanvasResult(chat_response=chat_response, canvas_content=result, canvas_title=title)


@router.post("/research", response_class=HTMLResponse)
async def research(
    query: Optional[str] = Query(None),
    case_context: Optional[str] = Query(None, alias="caseContext"),
    plugin: ResearchPlugin = Depends(get_research_plugin),
):
    """Produce an HTML legal research brief."""
    query = _require_query(query)
    logger.info("Research task: query='%s', caseContext='%s'", query, case_context)

    brief = await plugin.perform_legal_research(query)
    if not brief or "An error occurred" in brief:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=brief or "An unknown error occurred during research.",
        )
    return HTMLResponse(content=brief)


@router.post("/examine", response_model=CanvasResult)
async def examine(
    query: Optional[str] = Query(None),
    plugin: ExaminePlugin = Depends(get_examine_plugin),
):
    """Analyse documents and web sources for legal arguments."""
    query = _require_query(query)
    logger.info("Examine task: query='%s'", query)

    analysis = await plugin.find_relevant_passages(query)
    if not analysis or "An error occurred" in analysis:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=analysis or "An unknown error occurred during examination.",
        )
    return CanvasResult(
        chat_response="Examination completed.",
        canvas_content=analysis,
        canvas_title="Legal Analysis",
    )
