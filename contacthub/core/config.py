"""
Application settings loaded from the environment.
"""

import json
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    # Render gives 'postgresql://', asyncpg needs 'postgresql+asyncpg://'
    url = os.getenv("DATABASE_URL") or os.getenv("DATABASE_URL_ASYNC") or "sqlite+aiosqlite:///./contacthub.db"
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings:
    """
    Runtime configuration.

    Every value comes from an environment variable (or a .env file) so the
    same build runs locally, in tests and on the server.
    """

    def __init__(self):
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        self.DATABASE_URL: str = _database_url()
        # "sql" uses DATABASE_URL, "memory" keeps everything in process
        self.STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sql").lower()

        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 15))

        self.CORS_ORIGINS: List[str] = json.loads(os.getenv("CORS_ORIGINS", '["*"]'))

        # Pending contact requests older than this are expired by the admin sweep
        self.REQUEST_EXPIRY_DAYS: int = int(os.getenv("REQUEST_EXPIRY_DAYS", 30))

        if self.STORAGE_BACKEND not in ("sql", "memory"):
            raise ValueError(f"Unknown STORAGE_BACKEND '{self.STORAGE_BACKEND}' (expected 'sql' or 'memory')")


settings = Settings()
