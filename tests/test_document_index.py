from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from unittest.mock import AsyncMock, MagicMock

from counsel.services.document_service import (
    DocumentProcessingError,
    DocumentService,
    chunk_text,
)
from counsel.services.pdf_processor import PDFProcessor
from counsel.services.search_service import DocumentSearchService
from counsel.utils.faiss_store import FAISSVectorStore

DIM = 4


def unit(*values):
    vector = np.asarray(values, dtype="float32")
    return (vector / np.linalg.norm(vector)).tolist()


class KeywordEmbedder:
    """Deterministic embedder: one axis per keyword."""

    KEYWORDS = ("rent", "fee", "witness", "deadline")

    def embed(self, texts):
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text):
        text = text.lower()
        counts = [text.count(k) + 0.01 for k in self.KEYWORDS]
        return unit(*counts)


# --- chunking --------------------------------------------------------------

def test_chunk_text_groups_words():
    words = [f"w{i}" for i in range(450)]

    chunks = chunk_text("  ".join(words), chunk_size=200)

    assert len(chunks) == 3
    assert chunks[0].split() == words[:200]
    assert chunks[2].split() == words[400:]


def test_chunk_text_empty_and_invalid():
    assert chunk_text(" \n\t ") == []
    with pytest.raises(ValueError):
        chunk_text("text", chunk_size=0)


def test_pdf_processor_unreadable_bytes():
    assert PDFProcessor.extract_text_by_page(b"not a pdf") == []
    assert PDFProcessor.extract_text(b"not a pdf") == ""


# --- FAISS store -----------------------------------------------------------

def test_store_add_and_search(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))

    result = store.add([
        {"id": "a", "document_id": "doc.pdf_0", "content": "rent", "embedding": unit(1, 0, 0, 0)},
        {"id": "b", "document_id": "doc.pdf_1", "content": "fee", "embedding": unit(0, 1, 0, 0)},
    ])

    assert result == {"added": 2, "total": 2}
    hits = store.search(unit(1, 0.1, 0, 0), top_k=5)
    assert [h["id"] for h in hits] == ["a", "b"]
    assert hits[0]["score"] > 0.9
    assert 0.0 <= hits[1]["score"] < hits[0]["score"]
    assert "embedding" not in hits[0]


def test_store_persists_to_disk(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))
    store.add([{"id": "a", "document_id": "d_0", "content": "rent", "embedding": unit(1, 0, 0, 0)}])

    reloaded = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))

    assert reloaded.count() == 1
    assert reloaded.search(unit(1, 0, 0, 0), top_k=1)[0]["content"] == "rent"


def test_store_dimension_checks(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))
    store.add([{"id": "a", "document_id": "d_0", "content": "x", "embedding": unit(1, 0, 0, 0)}])

    with pytest.raises(ValueError):
        store.search([1.0, 0.0], top_k=1)
    with pytest.raises(ValueError):
        FAISSVectorStore(index_name="t", dimension=8, path=str(tmp_path)).ensure_index()


def test_store_empty_search_and_reset(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))
    assert store.search(unit(1, 0, 0, 0)) == []

    store.add([{"id": "a", "document_id": "d_0", "content": "x", "embedding": unit(1, 0, 0, 0)}])
    store.reset()

    assert store.count() == 0


def test_store_count_is_consistent_across_threads(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))
    store.add([{"id": "a", "document_id": "d_0", "content": "x", "embedding": unit(1, 0, 0, 0)}])
    reloaded = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))

    with ThreadPoolExecutor(max_workers=4) as pool:
        counts = list(pool.map(lambda _: reloaded.count(), range(8)))

    assert counts == [1] * 8
    assert reloaded.index.ntotal == 1


# --- search service --------------------------------------------------------

@pytest.mark.asyncio
async def test_index_then_search(tmp_path):
    store = FAISSVectorStore(index_name="t", dimension=DIM, path=str(tmp_path))
    service = DocumentSearchService(vector_store=store, embedder=KeywordEmbedder())

    added = await service.index_chunks("lease.pdf", [
        "rent is due monthly and rent is paid by check",
        "a late fee applies",
        "the witness was present",
    ])
    hits = await service.search("what is the late fee", top_k=2)

    assert added == 3
    assert len(hits) == 2
    assert hits[0].content == "a late fee applies"
    assert hits[0].document_id == "lease.pdf_1"
    assert hits[0].score >= hits[1].score


@pytest.mark.asyncio
async def test_search_drops_empty_content():
    store = MagicMock()
    store.search.return_value = [
        {"id": "1", "document_id": "d_0", "content": "", "score": 0.9},
        {"id": "2", "document_id": "d_1", "content": "kept", "score": 0.5},
    ]
    service = DocumentSearchService(vector_store=store, embedder=KeywordEmbedder())

    hits = await service.search("q")

    assert [h.content for h in hits] == ["kept"]


@pytest.mark.asyncio
async def test_search_errors_propagate():
    embedder = MagicMock()
    embedder.embed_query.side_effect = RuntimeError("model missing")
    service = DocumentSearchService(vector_store=MagicMock(), embedder=embedder)

    with pytest.raises(RuntimeError):
        await service.search("q")


# --- document service ------------------------------------------------------

@pytest.mark.asyncio
async def test_process_document_chunks_and_indexes():
    processor = MagicMock()
    processor.extract_text.return_value = " ".join(["word"] * 450)
    search = MagicMock()
    search.index_chunks = AsyncMock(return_value=3)
    service = DocumentService(search=search, pdf_processor=processor, chunk_size=200)

    added = await service.process_document(b"%PDF", "contract.pdf")

    assert added == 3
    file_name, chunks = search.index_chunks.await_args.args
    assert file_name == "contract.pdf"
    assert [len(c.split()) for c in chunks] == [200, 200, 50]


@pytest.mark.asyncio
async def test_process_document_without_text_raises():
    processor = MagicMock()
    processor.extract_text.return_value = "   "
    search = MagicMock()
    search.index_chunks = AsyncMock()
    service = DocumentService(search=search, pdf_processor=processor)

    with pytest.raises(DocumentProcessingError):
        await service.process_document(b"%PDF", "scan.pdf")
    search.index_chunks.assert_not_awaited()


@pytest.mark.asyncio
async def test_load_pdfs_from_folder(tmp_path):
    (tmp_path / "a.pdf").write_bytes(b"a")
    (tmp_path / "b.pdf").write_bytes(b"b")
    (tmp_path / "c.pdf").write_bytes(b"c")
    (tmp_path / "notes.txt").write_text("ignored")

    texts = {b"a": "some text", b"b": "", b"c": "boom"}
    processor = MagicMock()
    processor.extract_text.side_effect = lambda content: texts[content]

    async def index_chunks(file_name, chunks):
        if file_name == "c.pdf":
            raise RuntimeError("faiss write failed")
        return len(chunks)

    search = MagicMock()
    search.index_chunks = index_chunks
    service = DocumentService(search=search, pdf_processor=processor)

    stats = await service.load_pdfs_from_folder(str(tmp_path))

    assert stats == {"total": 3, "success": 1, "failed": 1, "skipped": 1}


@pytest.mark.asyncio
async def test_load_pdfs_missing_folder():
    service = DocumentService(search=MagicMock(), pdf_processor=MagicMock())

    stats = await service.load_pdfs_from_folder("/non/existent/path")

    assert stats["total"] == 0
