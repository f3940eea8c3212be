"""Application configuration."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from namer.models import AVAILABLE_TLDS


def sanitize_env_value(value: str | None) -> str | None:
    """Trim whitespace, a leading BOM and wrapping quotes from an env value."""

    if value is None:
        return None
    cleaned = str(value).strip().lstrip("\ufeff")
    if cleaned[:1] in {"'", '"'}:
        cleaned = cleaned[1:]
    if cleaned[-1:] in {"'", '"'}:
        cleaned = cleaned[:-1]
    return cleaned


class Settings(BaseSettings):
    """Environment-driven settings validated at startup."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Optional so the health endpoint can report a missing credential.
    mistral_api_key: str | None = Field(default=None, alias="MISTRAL_API_KEY")
    mistral_model: str = Field(default="mistral-small-latest", alias="MISTRAL_MODEL")
    mistral_base_url: str = Field(default="https://api.mistral.ai/v1", alias="MISTRAL_BASE_URL")
    request_timeout_seconds: float = Field(default=30.0, alias="REQUEST_TIMEOUT_SECONDS")

    dns_resolver_url: str = Field(default="https://dns.google/resolve", alias="DNS_RESOLVER_URL")
    dns_timeout_seconds: float = Field(default=5.0, alias="DNS_TIMEOUT_SECONDS")
    dns_max_concurrency: int = Field(default=16, alias="DNS_MAX_CONCURRENCY")

    # Comma-separated TLDs checked when the user has not forced any.
    default_tlds: str = Field(default=".com,.io,.ai", alias="DEFAULT_TLDS")

    brainstorm_max_wall_seconds: float = Field(default=25.0, alias="BRAINSTORM_MAX_WALL_SECONDS")
    brainstorm_rare_tld_max_wall_seconds: float = Field(
        default=35.0,
        alias="BRAINSTORM_RARE_TLD_MAX_WALL_SECONDS",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    @field_validator("mistral_api_key", mode="before")
    @classmethod
    def _sanitize_api_key(cls, value: str | None) -> str | None:
        return sanitize_env_value(value) or None

    @field_validator("mistral_model", "mistral_base_url", mode="before")
    @classmethod
    def _sanitize_value(cls, value: str) -> str:
        return sanitize_env_value(value) or ""

    @property
    def has_api_key(self) -> bool:
        return bool(self.mistral_api_key)


def load_settings() -> Settings:
    """Load and validate settings."""

    return Settings()


def selected_tlds(settings: Settings) -> list[str]:
    """Return the default TLD selection, each with a leading dot.

    Falls back to the first three entries of AVAILABLE_TLDS when
    DEFAULT_TLDS is empty.
    """
    out: list[str] = []
    for raw in settings.default_tlds.split(","):
        tld = raw.strip().lower()
        if not tld:
            continue
        tld = tld if tld.startswith(".") else f".{tld}"
        if tld not in out:
            out.append(tld)
    return out or list(AVAILABLE_TLDS[:3])
