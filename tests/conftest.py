from typing import List, Optional

import pytest

from counsel.models.search import DocumentChunk


class FakeLLM:
    """Async stand-in for gemini_service.generate_text that records prompts.

    `reply` is either a string or a callable taking the prompt.
    """

    def __init__(self, reply="", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply(prompt) if callable(self.reply) else self.reply


class FakeSearch:
    """Async stand-in for DocumentSearchService.search."""

    def __init__(self, chunks=None, error: Optional[Exception] = None):
        self.chunks = chunks or []
        self.error = error
        self.calls = []

    async def search(self, query: str, top_k: int = 5) -> List[DocumentChunk]:
        self.calls.append((query, top_k))
        if self.error:
            raise self.error
        return self.chunks[:top_k]


class FakeWebSearch:
    def __init__(self, results=None, error: Optional[Exception] = None):
        self.results = results or []
        self.error = error
        self.calls = []

    async def search(self, query: str, allow_fallback: bool = True):
        self.calls.append((query, allow_fallback))
        if self.error:
            raise self.error
        return self.results


def make_chunks(*contents: str, score: float = 0.8) -> List[DocumentChunk]:
    return [
        DocumentChunk(id=f"id-{i}", document_id=f"lease.pdf_{i}", content=c, score=score)
        for i, c in enumerate(contents)
    ]


@pytest.fixture
def chunks():
    return make_chunks(
        "The tenant shall pay rent on the first day of each month.",
        "Late payments incur a fee of 5% after a ten day grace period.",
    )
