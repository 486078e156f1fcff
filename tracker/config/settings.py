"""
Environment-based configuration using pydantic-settings.
The API origin is injected here at startup, never hardcoded in components.
"""
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracker.config.variants import Variant, VariantProfile, build_profile


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Core ────────────────────────────────────────────────────────────────
    ENV: str = "production"
    LOG_LEVEL: str = "INFO"
    BOT_TOKEN: str = ""

    # ── Catalog API ─────────────────────────────────────────────────────────
    CATALOG_VARIANT: Variant = Variant.PRIMARY
    API_BASE_URL: Optional[str] = None

    # ── Rendering ───────────────────────────────────────────────────────────
    PLACEHOLDER_COVER_URL: str = "https://via.placeholder.com/50"
    LEGACY_DEFAULT_COVER: str = "default-cover.jpg"
    CONFIRM_TIMEOUT_SECONDS: float = 120.0
    MAX_CHATS: int = 1000                 # per-chat views kept in memory

    # ── HTTP client ──────────────────────────────────────────────────────────
    HTTP_TIMEOUT_SECONDS: int = 30
    HTTP_RETRY_ATTEMPTS: int = 1          # 1 = single attempt, no retry
    HTTP_RETRY_BACKOFF: float = 1.5

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip().rstrip("/")
        return v or None

    @field_validator("MAX_CHATS")
    @classmethod
    def at_least_one_chat(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_CHATS must be >= 1")
        return v

    @field_validator("HTTP_RETRY_ATTEMPTS")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("HTTP_RETRY_ATTEMPTS must be >= 1")
        return v

    @property
    def profile(self) -> VariantProfile:
        return build_profile(self.CATALOG_VARIANT, legacy_cover=self.LEGACY_DEFAULT_COVER)

    @property
    def api_base_url(self) -> str:
        return self.API_BASE_URL or self.profile.default_base_url


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
