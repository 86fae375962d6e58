"""
Centralised configuration via Pydantic Settings.

Reads from .env in dev and from the process environment in production.
The original variable names (STRING_CONEXAO, BANCO, COLLECTION, GEMINI_API_KEY)
are still accepted so existing deployments keep working.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SUMMARY_PROMPT = (
    "Crie uma descrição resumida desta imagem, sem introdução, formatação ou quebra de linha."
)
DETAIL_PROMPT = (
    "Crie uma descrição detalhada desta imagem, sem introdução, formatação ou quebra de linha."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Application ─────────────────────────────────────────
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    cors_origin: str = "*"

    # ── Database ────────────────────────────────────────────
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("MONGODB_URI", "STRING_CONEXAO"),
    )
    mongodb_database: str = Field(
        default="imersao-instabytes",
        validation_alias=AliasChoices("MONGODB_DATABASE", "BANCO"),
    )
    mongodb_collection: str = Field(
        default="posts",
        validation_alias=AliasChoices("MONGODB_COLLECTION", "COLLECTION"),
    )
    mongodb_timeout_ms: int = 5000

    # ── Storage ─────────────────────────────────────────────
    upload_dir: Path = Path("uploads")
    public_dir: Path = Path("public")

    # ── LLM: Gemini ────────────────────────────────────────
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    model_describer: str = "gemini-1.5-flash"
    description_fallback: str = "Auto descrição indisponível."
    summary_prompt: str = SUMMARY_PROMPT
    detail_prompt: str = DETAIL_PROMPT

    # ── Rate limiting (routes that call the AI service) ─────
    rate_limit_enabled: bool = True
    ai_rate_limit: str = "30/minute"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
