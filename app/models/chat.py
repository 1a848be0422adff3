from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: str  # http(s) URL or data URI

    @field_validator("image_url", mode="before")
    @classmethod
    def _unwrap_url(cls, value: Any) -> Any:
        # Also accept the {"url": "..."} object form.
        if isinstance(value, dict):
            return value.get("url")
        return value


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str | list[ContentPart] = ""

    @property
    def text(self) -> str:
        """Plain-text view of the content, image parts left out."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text for p in self.content if isinstance(p, TextPart))


class UploadedFile(BaseModel):
    """A multipart file staged on disk for the duration of one request."""

    original_name: str
    mime_type: str
    size_bytes: int
    temporary_path: Path

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class CompletionRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    temperature: float = 0.7
    max_tokens: int = 700


class CompletionResult(BaseModel):
    reply_text: str
    image_url: str | None = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    error: str | None = None

    @classmethod
    def from_result(cls, result: CompletionResult) -> "ChatResponse":
        return cls(reply=result.reply_text, image_url=result.image_url)
