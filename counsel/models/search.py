"""
Retrieval models shared by the plugins and the orchestrator
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class DocumentChunk(BaseModel):
    """A chunk of an indexed document returned by vector search"""
    id: str = ""
    document_id: str = ""
    content: str = ""
    score: float = 0.0


class WebResult(BaseModel):
    """A single web search hit"""
    title: str = ""
    description: str = ""
    url: str = ""
    published_date: Optional[datetime] = None
    source: str = ""
