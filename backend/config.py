import logging
from functools import lru_cache
from typing import Annotated, Optional

from google import genai
from google.genai import types
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

# Tried in order; the first model that returns a usable answer wins.
DEFAULT_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
]
DEFAULT_TIMEOUT = 8.0


class ConfigurationError(Exception):
    """Raised when required credentials are not configured."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    gemini_api_key: Optional[str] = Field(default=None, validation_alias="GEMINI_API_KEY", repr=False)
    books_api_key: Optional[str] = Field(default=None, validation_alias="GOOGLE_BOOKS_API_KEY", repr=False)
    models: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MODELS),
        validation_alias="ARCHIVIST_MODELS",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, validation_alias="ARCHIVIST_TIMEOUT")
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias="ARCHIVIST_ALLOWED_ORIGINS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("gemini_api_key", "books_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v):
        return v or None

    @field_validator("models", mode="before")
    @classmethod
    def split_models(cls, v):
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        return v or list(DEFAULT_MODELS)

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        return v or ["*"]

    @field_validator("timeout", mode="before")
    @classmethod
    def positive_timeout(cls, v):
        if v is None or v == "":
            return DEFAULT_TIMEOUT
        try:
            timeout = float(v)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid ARCHIVIST_TIMEOUT=%r", v)
            return DEFAULT_TIMEOUT
        if timeout <= 0:
            logger.warning("Ignoring non-positive ARCHIVIST_TIMEOUT=%r", v)
            return DEFAULT_TIMEOUT
        return timeout

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return (v or "INFO").upper()

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        if not self.books_api_key:
            missing.append("GOOGLE_BOOKS_API_KEY")
        return missing

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            logger.error("Missing API keys in environment: %s", ", ".join(missing))
            raise ConfigurationError("Server Configuration Error: Missing Keys")


def get_settings() -> Settings:
    """
    Reads configuration from the environment and .env.
    Called once per request, so key changes apply without a restart.
    """
    return Settings()


@lru_cache(maxsize=8)
def get_client(api_key: str, timeout: float = DEFAULT_TIMEOUT) -> genai.Client:
    # HttpOptions.timeout is in milliseconds.
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=int(timeout * 1000)),
    )
