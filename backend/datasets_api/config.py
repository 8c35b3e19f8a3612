"""Runtime configuration for the dataset statistics service."""
from __future__ import annotations

import json
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEFAULT_DATABASE_URL = "sqlite:///./dataset_logs.db"
DEFAULT_REGISTRY_URL = "https://ashyq.data.gov.kz/api/v0/registry"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Dataset Popularity API"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 4000

    secret_key: str = Field(..., min_length=1, repr=False)

    database_url: Optional[str] = None
    pg_user: Optional[str] = None
    pg_password: Optional[str] = Field(None, repr=False)
    pg_host: Optional[str] = None
    pg_port: int = 5432
    pg_database: Optional[str] = None

    # comma-separated, or a JSON list
    cors_origins: str = "http://localhost:6108"

    registry_url: str = DEFAULT_REGISTRY_URL
    registry_timeout: float = Field(10.0, gt=0)

    @property
    def cors_origins_list(self) -> List[str]:
        s = (self.cors_origins or "").strip()
        if not s:
            return []
        if s.startswith("["):
            return [str(x) for x in json.loads(s)]
        return [part.strip() for part in s.split(",") if part.strip()]

    @property
    def sqlalchemy_url(self) -> str | URL:
        if self.database_url:
            return self.database_url
        if self.pg_host:
            return URL.create(
                "postgresql+psycopg2",
                username=self.pg_user,
                password=self.pg_password,
                host=self.pg_host,
                port=self.pg_port,
                database=self.pg_database,
            )
        return DEFAULT_DATABASE_URL
