import logging
import os
import pickle
import threading
from typing import List, Any, Dict, Sequence

import faiss
import numpy as np

from counsel.config import settings

logger = logging.getLogger(__name__)


class FAISSVectorStore:
    """FAISS-backed index of document chunks.

    Vectors are expected to be L2-normalized so the squared L2 distance
    returned by the flat index maps onto cosine similarity.
    """

    def __init__(
        self,
        index_name: str = "counsel_documents",
        dimension: int = 384,
        path: str = "./vector_store",
    ):
        self.index_name = index_name
        self.dimension = dimension
        self.path = path
        self.index = None
        self.documents: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def _get_index_path(self):
        """Get path for saving/loading index"""
        return os.path.join(self.path, f"{self.index_name}.faiss")

    def _get_docs_path(self):
        """Get path for saving/loading documents"""
        return os.path.join(self.path, f"{self.index_name}_docs.pkl")

    def ensure_index(self) -> None:
        """Load the index from disk, or create an empty one if none exists."""
        if self.index is not None:
            return

        index_path = self._get_index_path()
        docs_path = self._get_docs_path()

        if os.path.exists(index_path) and os.path.exists(docs_path):
            logger.info("Loading FAISS index '%s' from %s", self.index_name, self.path)
            self.index = faiss.read_index(index_path)
            with open(docs_path, "rb") as f:
                self.documents = pickle.load(f)
            if self.index.d != self.dimension:
                raise ValueError(
                    f"Index '{self.index_name}' has dimension {self.index.d}, "
                    f"expected {self.dimension}"
                )
            logger.info("Loaded FAISS index with %d chunks", len(self.documents))
        else:
            logger.warning("FAISS index '%s' not found. Creating index...", self.index_name)
            self.index = faiss.IndexFlatL2(self.dimension)  # L2 distance
            self.documents = []

    def _save_index(self):
        """Save index and documents to disk"""
        os.makedirs(self.path, exist_ok=True)
        faiss.write_index(self.index, self._get_index_path())
        with open(self._get_docs_path(), "wb") as f:
            pickle.dump(self.documents, f)

    def _as_matrix(self, vectors: Sequence[Sequence[float]]) -> "np.ndarray":
        matrix = np.asarray(vectors, dtype="float32")
        if matrix.ndim != 2 or matrix.shape[1] != self.dimension:
            raise ValueError(
                f"Expected vectors of dimension {self.dimension}, got shape {matrix.shape}"
            )
        return matrix

    def add(self, records: List[Dict[str, Any]]) -> Dict[str, int]:
        """
        Add chunk records to the index.

        Args:
            records: dicts with 'id', 'document_id', 'content' and 'embedding'

        Returns:
            Dict with count of added and total chunks
        """
        if not records:
            return {"added": 0, "total": self.count()}

        matrix = self._as_matrix([r["embedding"] for r in records])

        with self._lock:
            self.ensure_index()
            self.index.add(matrix)
            for record in records:
                self.documents.append(
                    {k: v for k, v in record.items() if k != "embedding"}
                )
            self._save_index()
            total = len(self.documents)

        logger.info("Indexed %d chunks (%d total)", len(records), total)
        return {"added": len(records), "total": total}

    def search(self, vector: Sequence[float], top_k: int = 5) -> List[Dict[str, Any]]:
        """
        Search for the chunks nearest to a query vector.

        Returns:
            List of chunk dicts with 'score' (0-1, higher is better) and 'distance'
        """
        query = self._as_matrix([vector])

        with self._lock:
            self.ensure_index()
            if not self.documents:
                return []
            distances, indices = self.index.search(query, min(top_k, len(self.documents)))
            documents = list(self.documents)

        results = []
        for idx, distance in zip(indices[0], distances[0]):
            if 0 <= idx < len(documents):
                doc = documents[idx].copy()
                # Normalized vectors: dist^2 = 2 - 2*cos_sim
                doc["score"] = max(0.0, 1.0 - (float(distance) / 2.0))
                doc["distance"] = float(distance)
                results.append(doc)
        return results

    def count(self) -> int:
        """Get number of chunks in the store"""
        with self._lock:
            self.ensure_index()
            return len(self.documents)

    def reset(self):
        """Clear all chunks"""
        with self._lock:
            self.index = faiss.IndexFlatL2(self.dimension)
            self.documents = []
            self._save_index()


# Global instance
_vector_store = None


def get_vector_store() -> FAISSVectorStore:
    """Get or create the global vector store instance"""
    global _vector_store
    if _vector_store is None:
        _vector_store = FAISSVectorStore(
            index_name=settings.VECTOR_INDEX_NAME,
            dimension=settings.EMBEDDING_DIMENSION,
            path=settings.VECTOR_STORE_PATH,
        )
    return _vector_store
