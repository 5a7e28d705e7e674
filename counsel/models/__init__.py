from counsel.models.search import DocumentChunk, WebResult

__all__ = ["DocumentChunk", "WebResult"]
