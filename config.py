import os
import logging

logger = logging.getLogger(__name__)


class Settings:
    """Application settings loaded from environment variables."""

    # API Keys
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-pro")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    UNIVERSITY_TABLE: str = os.getenv("UNIVERSITY_TABLE", "universities")

    # Pagination
    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
    MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "500"))

    # Server
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    ALLOWED_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @classmethod
    def validate(cls):
        """Validate required environment variables."""
        if not cls.DATABASE_URL:
            logger.warning("DATABASE_URL not set. Searches will return empty results.")
        if not cls.GEMINI_API_KEY:
            logger.info("GEMINI_API_KEY not set. Comparison narratives use the built-in summary.")

settings = Settings()
