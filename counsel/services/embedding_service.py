"""
Service for embedding generation used by indexing and retrieval.
"""

from typing import List, Optional
import logging

from sentence_transformers import SentenceTransformer

from counsel.config import settings

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Turns text into normalized dense vectors with a sentence-transformers model.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        # Defer heavy model loading until actually needed (lazy load)
        self.model: Optional[SentenceTransformer] = None

    def _ensure_model(self) -> SentenceTransformer:
        if self.model is None:
            logger.info("Loading embedding model '%s'", self.model_name)
            try:
                self.model = SentenceTransformer(self.model_name)
            except Exception as e:
                logger.error("Failed to load embedding model: %s", e)
                raise
        return self.model

    def embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generates one normalized embedding per input text.
        """
        if not texts:
            return []
        model = self._ensure_model()
        embeddings = model.encode(texts, normalize_embeddings=True)
        return [vector.tolist() for vector in embeddings]

    def embed_query(self, text: str) -> List[float]:
        return self.embed([text])[0]


embedding_service = EmbeddingService(settings.EMBEDDING_MODEL)
