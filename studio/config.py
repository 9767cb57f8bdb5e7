"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via environment variables or a .env file.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Relational store (TiDB / MySQL protocol) ───────────────────────────
    tidb_host: str = "tidb"
    tidb_port: int = 4000
    tidb_user: str = "root"
    tidb_password: str = ""
    tidb_database: str = "industry_studio"
    # Full SQLAlchemy async URL; takes precedence over the tidb_* parts
    database_url: Optional[str] = None

    @property
    def db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+aiomysql://{self.tidb_user}:{self.tidb_password}"
            f"@{self.tidb_host}:{self.tidb_port}/{self.tidb_database}"
        )

    # ── Redis (feed view cache) ────────────────────────────────────────────
    redis_enabled: bool = True
    redis_host: str = "redis"
    redis_port: int = 6379
    feed_cache_ttl: int = 300            # seconds a rendered feed stays cached

    # ── MinIO (S3-compatible) ──────────────────────────────────────────────
    # Disabled by default: posts get the placeholder image instead
    media_storage_enabled: bool = False
    minio_endpoint: str = "minio:9000"
    minio_access_key: str = "minioadmin"
    minio_secret_key: str = "minioadmin"
    minio_bucket: str = "media"
    placeholder_image_url: str = "/placeholder.svg?height=600&width=600"

    # ── Content generation (OpenRouter chat completions) ───────────────────
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    generation_model: str = "deepseek/deepseek-chat-v3-0324:free"
    generation_temperature: float = 0.7
    generation_max_tokens: int = 2000
    generation_timeout_seconds: float = 120.0

    # ── Feed ───────────────────────────────────────────────────────────────
    feed_page_size: int = 10
    feed_comment_preview: int = 3
    explore_page_size: int = 12

    # ── Observability ──────────────────────────────────────────────────────
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    service_name: str = "industry-studio-api"
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
