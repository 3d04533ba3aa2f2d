# ruff: noqa: E501
import os
from pathlib import Path
from typing import Annotated, Any

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Logging ---
    LOG_LEVEL: Annotated[str, Field(default="DEBUG", description="Logging level for the application (e.g., DEBUG, INFO, WARNING).")]
    LOG_LLM_RAW: Annotated[bool, Field(default=False, description="If True, log a raw preview of every LLM response.")]

    # --- LLM & Generation ---
    LLM_API_URL: Annotated[str, Field(default="https://generativelanguage.googleapis.com/v1beta/openai/", description="Base URL of the OpenAI-compatible generation API.")]
    LLM_API_KEY: Annotated[str, Field(default="", description="API key for the generation provider.")]
    TEXT_MODEL: Annotated[str, Field(default="gemini-3-flash-preview", description="Model identifier used for plan and alternatives generation.")]
    IMAGE_MODEL: Annotated[str, Field(default="gemini-2.5-flash-image", description="Model identifier used for exercise image generation.")]
    IMAGE_SIZE: Annotated[str, Field(default="1024x1024", description="Requested size of generated exercise images (square).")]
    IMAGE_RESPONSE_FORMAT: Annotated[str, Field(default="b64_json", description="Image response format sent to the API; empty string omits the parameter.")]
    LLM_TIMEOUT: Annotated[float | None, Field(default=None, description="Optional request timeout in seconds; None keeps the SDK default.")]
    LLM_TEMPERATURE: Annotated[float | None, Field(default=None, description="Sampling temperature for text generation; None keeps the model default.")]

    # --- Cache (Redis) ---
    REDIS_URL: Annotated[str, Field(default="redis://127.0.0.1:6379", description="Full connection URL for Redis.")]
    REDIS_DB: Annotated[int, Field(default=1, description="Redis database index used for cached images and preferences.")]
    REDIS_SOCKET_TIMEOUT: Annotated[float, Field(default=5.0, description="Socket timeout in seconds for Redis operations.")]
    REDIS_CONNECT_TIMEOUT: Annotated[float, Field(default=3.0, description="Connect timeout in seconds for Redis.")]
    CACHE_PREFIX: Annotated[str, Field(default="routine", description="Prefix prepended to every Redis key.")]

    # --- Image Store ---
    IMAGE_STORE_BACKEND: Annotated[str, Field(default="redis", description="Persistent image tier: 'redis', 'file' or 'memory' (no persistent tier).")]
    IMAGE_STORE_DIR: Annotated[str, Field(default=str(Path.home() / ".routine_coach" / "images"), description="Directory used by the file image store.")]
    PREFERENCES_FILE: Annotated[str, Field(default=str(Path.home() / ".routine_coach" / "preferences.json"), description="File holding the last-used preferences when IMAGE_STORE_BACKEND is 'file'.")]

    # --- Misc ---
    TUTORIAL_SEARCH_URL: Annotated[str, Field(default="https://www.youtube.com/results?search_query=", description="Search URL prefix used to build exercise tutorial links.")]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @field_validator("LLM_API_KEY", mode="before")
    @classmethod
    def _populate_llm_api_key(cls, value: str | None) -> str:
        if value:
            return value
        for env_name in ("GEMINI_API_KEY", "API_KEY", "OPENAI_API_KEY"):
            fallback = os.environ.get(env_name)
            if fallback:
                return fallback
        return ""

    @field_validator("IMAGE_STORE_BACKEND", mode="before")
    @classmethod
    def _normalize_backend(cls, value: Any) -> str:
        backend = str(value or "redis").strip().lower()
        if backend not in {"redis", "file", "memory"}:
            raise ValueError(f"Unsupported IMAGE_STORE_BACKEND: {value!r}")
        return backend

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        if not self.LLM_API_KEY:
            logger.warning("LLM_API_KEY is not configured; generation requests will fail.")

    @model_validator(mode="after")
    def _compute_derived_fields(self) -> "Settings":
        self.CACHE_PREFIX = self.CACHE_PREFIX.strip().rstrip(":") or "routine"
        if self.LLM_API_URL and not self.LLM_API_URL.endswith("/"):
            self.LLM_API_URL = f"{self.LLM_API_URL}/"
        return self


settings = Settings()  # noqa
