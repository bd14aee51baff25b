"""Application configuration.

Environment variables override all defaults. A `.env` file next to the
backend directory is loaded for local development.
"""

import os
from pathlib import Path
from typing import List


# Load .env for local development (safe no-op if not installed)
try:
    from dotenv import load_dotenv  # type: ignore

    _BACKEND_DIR = Path(__file__).resolve().parents[2]
    load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)
except ImportError:
    pass


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings:
    # Storage: "memory" keeps records for the process lifetime only,
    # "sql" persists them through SQLAlchemy at DATABASE_URL.
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory").lower()
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./catchbook.db")

    # Groq API Key (Must be set via .env, never in code)
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    GROQ_VISION_MODEL: str = os.getenv(
        "GROQ_VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct"
    )
    GROQ_TEXT_MODEL: str = os.getenv("GROQ_TEXT_MODEL", "llama-3.3-70b-versatile")

    # The single identity every route acts for (no sessions)
    DEFAULT_USER_ID: str = os.getenv("DEFAULT_USER_ID", "default-user")
    DEFAULT_USER_NAME: str = os.getenv("DEFAULT_USER_NAME", "山田太郎")
    DEFAULT_USER_PHONE: str = os.getenv("DEFAULT_USER_PHONE", "090-1234-5678")
    DEFAULT_USER_ADDRESS: str = os.getenv("DEFAULT_USER_ADDRESS", "愛知県知多郡南知多町篠島")

    # Record defaults applied by the create endpoints
    DEFAULT_DESTINATION: str = os.getenv("DEFAULT_DESTINATION", "篠島漁協")
    DEFAULT_SPECIES: str = os.getenv("DEFAULT_SPECIES", "その他")
    DEFAULT_QUANTITY: str = os.getenv("DEFAULT_QUANTITY", "0kg")
    DEFAULT_CATEGORY: str = os.getenv("DEFAULT_CATEGORY", "その他")

    # Uploads are read fully into memory before being forwarded
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # CORS (specific origins only, no wildcards)
    CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5000,http://127.0.0.1:5000,"
            "http://localhost:5173,http://127.0.0.1:5173",
        )
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"


settings = Settings()
