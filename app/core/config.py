# File: app/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, field_validator


def _split_csv(value: str) -> List[str]:
    return [i.strip() for i in value.split(",") if i.strip()]


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "Database Optimization API"
    VERSION: str = "0.1.0"

    api_prefix: str = "/api"
    debug: bool = os.getenv("DEBUG", "0") == "1"

    # CORS
    backend_cors_origins: List[str] = _split_csv(
        os.getenv("BACKEND_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./blog.db")
    sql_echo: bool = os.getenv("SQL_ECHO", "0") == "1"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Pagination
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "2000"))

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return _split_csv(v)
        if isinstance(v, list):
            return v
        return []


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
