from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Chatbot Atelier Lichen", alias="APP_NAME")
    environment: Literal["local", "dev", "staging", "prod"] = Field(
        default="local", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    gemini_vision_model: str = Field(
        default="gemini-2.5-flash", alias="GEMINI_VISION_MODEL"
    )
    gemini_image_model: str = Field(
        default="imagen-4.0-generate-001", alias="GEMINI_IMAGE_MODEL"
    )
    # Square render, the 1024x1024 equivalent.
    image_aspect_ratio: str = Field(default="1:1", alias="IMAGE_ASPECT_RATIO")

    temperature: float = Field(default=0.7, alias="TEMPERATURE")
    max_tokens: int = Field(default=700, alias="MAX_TOKENS")
    vision_max_tokens: int = Field(default=800, alias="VISION_MAX_TOKENS")

    image_features_enabled: bool = Field(
        default=True, alias="IMAGE_FEATURES_ENABLED"
    )
    render_after_analysis: bool = Field(default=True, alias="RENDER_AFTER_ANALYSIS")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=10000, alias="PORT")

    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "https://menuiserie-lichen.fr",
            "https://www.menuiserie-lichen.fr",
            "http://localhost:3000",
        ],
        alias="CORS_ORIGINS",
    )

    upload_dir: Path = Field(default=Path("tmp"), alias="UPLOAD_DIR")
    max_files: int = Field(default=5, alias="MAX_FILES")
    max_request_bytes: int = Field(default=25 * 1024 * 1024, alias="MAX_REQUEST_BYTES")


@lru_cache
def get_settings() -> Settings:
    return Settings()
