"""
Document search service

Bridges the embedding model and the FAISS index:
1. Embeds queries and finds the nearest indexed chunks
2. Embeds new chunks and uploads them to the index
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from counsel.models.search import DocumentChunk
from counsel.services.embedding_service import EmbeddingService, embedding_service
from counsel.utils.faiss_store import FAISSVectorStore, get_vector_store

logger = logging.getLogger(__name__)


class DocumentSearchService:
    """Vector search over uploaded documents."""

    def __init__(
        self,
        vector_store: Optional[FAISSVectorStore] = None,
        embedder: Optional[EmbeddingService] = None,
    ):
        self._vector_store = vector_store
        self.embedder = embedder or embedding_service

    @property
    def vector_store(self) -> FAISSVectorStore:
        if self._vector_store is None:
            self._vector_store = get_vector_store()
        return self._vector_store

    async def search(self, query: str, top_k: int = 5) -> List[DocumentChunk]:
        """
        Retrieve the chunks most similar to the query.

        Errors from the embedding model or the index propagate to the caller.
        """
        logger.info("Searching documents for query: %s", query[:50])
        # Both the model and FAISS are synchronous, run in thread pool
        vector = await asyncio.to_thread(self.embedder.embed_query, query)
        hits = await asyncio.to_thread(self.vector_store.search, vector, top_k)

        chunks = [
            DocumentChunk(
                id=str(hit.get("id", "")),
                document_id=str(hit.get("document_id", "")),
                content=hit.get("content") or "",
                score=float(hit.get("score", 0.0)),
            )
            for hit in hits
        ]
        chunks = [c for c in chunks if c.content]
        logger.info("Found %d document chunks", len(chunks))
        return chunks[:top_k]

    async def index_chunks(self, file_name: str, chunks: List[str]) -> int:
        """
        Embed chunks of one document and upload them to the index.

        Returns:
            Number of chunks indexed
        """
        if not chunks:
            return 0

        embeddings = await asyncio.to_thread(self.embedder.embed, chunks)
        records = [
            {
                "id": str(uuid.uuid4()),
                "document_id": f"{file_name}_{i}",
                "content": chunk,
                "embedding": embedding,
            }
            for i, (chunk, embedding) in enumerate(zip(chunks, embeddings))
        ]
        result = await asyncio.to_thread(self.vector_store.add, records)
        logger.info("Uploaded %d chunks for %s", result.get("added", 0), file_name)
        return result.get("added", 0)


# Global search service instance
search_service = DocumentSearchService()
