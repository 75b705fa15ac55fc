"""Application configuration using Pydantic settings.

Store credentials are only checked when the store is actually built, so the
HTTP layer can be imported (and tested) without them.
"""

from typing import Annotated

from pydantic import PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    STOCK_PRICES_TABLE: str = "stock_prices"
    STOCK_SUMMARIES_TABLE: str = "stock_summaries"
    STORE_PAGE_SIZE: PositiveInt = 1000
    STORE_TIMEOUT_SECONDS: PositiveFloat = 10.0

    # Server
    REQUEST_TIMEOUT_SECONDS: PositiveFloat = 30.0
    LOG_LEVEL: str = "INFO"

    # CORS, comma-separated in the environment
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("SUPABASE_URL", mode="after")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("SUPABASE_KEY", mode="after")
    @classmethod
    def _strip_key(cls, value: str) -> str:
        return value.strip()

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def require_store_credentials(self) -> None:
        """Raise RuntimeError naming the first missing Supabase variable."""
        for name in ("SUPABASE_URL", "SUPABASE_KEY"):
            if not getattr(self, name):
                raise RuntimeError(f"Missing required environment variable: {name}")
