"""
Configuration settings for Counsel Backend
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    APP_NAME: str = "Counsel Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    LOG_LEVEL: str = "INFO"

    # Google Gemini API
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_URL: str = (
        "https://generativelanguage.googleapis.com/v1/models/{model}:generateContent"
    )
    GEMINI_TIMEOUT_SECONDS: float = 60.0
    DEBUG_MOCK_GEMINI: bool = False

    # Brave Search API (web results for research/examine, date lookups)
    BRAVE_SEARCH_API_KEY: str = ""
    BRAVE_SEARCH_URL: str = "https://api.search.brave.com/res/v1/web/search"
    BRAVE_TIMEOUT_SECONDS: float = 15.0
    MAX_WEB_RESULTS: int = 5

    # Embeddings / FAISS vector index
    EMBEDDING_MODEL: str = "all-MiniLM-L6-v2"
    EMBEDDING_DIMENSION: int = 384
    VECTOR_STORE_PATH: str = "./vector_store"
    VECTOR_INDEX_NAME: str = "counsel_documents"

    # Retrieval
    CHUNK_SIZE_WORDS: int = 200
    RAG_TOP_K: int = 5
    DOCUMENT_SEARCH_TOP_K: int = 10
    CHAT_HISTORY_LIMIT: int = 10

    # CORS Configuration - Allow all localhost ports in development
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated origins to list"""
        origins = [origin.strip()
                   for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]
        # In development, explicitly add common localhost ports
        if self.DEBUG:
            for host in ("localhost", "127.0.0.1"):
                for port in (3000, 5173, self.PORT):
                    origin = f"http://{host}:{port}"
                    if origin not in origins:
                        origins.append(origin)
        return origins

    @property
    def gemini_mock_mode(self) -> bool:
        """True when LLM calls should be answered locally"""
        return self.DEBUG_MOCK_GEMINI or not self.GOOGLE_API_KEY

    model_config = {"env_file": ".env",
                    "case_sensitive": True, "extra": "allow"}


# Global settings instance
settings = Settings()
