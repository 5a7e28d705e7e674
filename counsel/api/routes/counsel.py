"""
Counsel endpoints: mode-routed queries and document upload for the client.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from counsel.dependencies import get_document_service, get_orchestrator
from counsel.schemas.documents import UploadResponse
from counsel.schemas.query import QueryRequest, QueryResponse
from counsel.services.document_service import DocumentProcessingError, DocumentService
from counsel.services.orchestrator_service import OrchestratorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/counsel", tags=["Counsel"])


@router.post("/query", response_model=QueryResponse)
async def query(
    request: QueryRequest,
    orchestrator: OrchestratorService = Depends(get_orchestrator),
):
    """Route a query to the plugin for its mode and return chat + canvas content."""
    if not request.query:
        logger.warning("Invalid query request received.")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query cannot be null or empty.",
        )

    logger.info("Processing query: %s, Mode: %s", request.query, request.mode.value)
    try:
        return await orchestrator.process_query(request)
    except Exception:
        logger.exception("Error processing query: %s", request.query)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while processing the query.",
        )


@router.post("/documents/upload", response_model=UploadResponse)
async def upload_document(
    request: Request,
    documents: DocumentService = Depends(get_document_service),
):
    """Index the first PDF of a multipart upload."""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        logger.warning("Invalid form content type for document upload.")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Expected multipart form data.",
        )

    form = await request.form()
    upload = next(
        (value for _, value in form.multi_items() if isinstance(value, UploadFile)),
        None,
    )
    content = await upload.read() if upload is not None else b""
    if upload is None or not content:
        logger.warning("No file uploaded or file is empty.")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded or file is empty.",
        )

    file_name = upload.filename or ""
    if not file_name.lower().endswith(".pdf"):
        logger.warning("Uploaded file is not a PDF: %s", file_name)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are supported.",
        )

    logger.info("Processing document upload: %s", file_name)
    try:
        chunks = await documents.process_document(content, file_name)
    except DocumentProcessingError as e:
        logger.warning("Document rejected: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Error processing document upload: %s", file_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while uploading the document.",
        )

    logger.info("Document uploaded successfully: %s", file_name)
    return UploadResponse(
        message="Document uploaded successfully.",
        file_name=file_name,
        chunks=chunks,
    )
