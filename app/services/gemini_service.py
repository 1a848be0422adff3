from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes

from google import genai
from google.genai import types

from app.core.settings import Settings, get_settings
from app.models.chat import ChatMessage, CompletionRequest, ImagePart, TextPart
from app.services.prompts import CONVERSATION_OPENER

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"


def _decode_data_uri(uri: str) -> tuple[str, bytes] | None:
    """Split a base64 `data:` URI into (mime_type, payload)."""
    if not uri.startswith("data:") or ";base64," not in uri:
        return None
    header, payload = uri[len("data:"):].split(";base64,", 1)
    return header or DEFAULT_IMAGE_MIME_TYPE, base64.b64decode(payload)


def _guess_image_type(url: str) -> str:
    mime_type, _ = mimetypes.guess_type(url.split("?", 1)[0])
    if mime_type and mime_type.startswith("image/"):
        return mime_type
    return DEFAULT_IMAGE_MIME_TYPE


def _to_parts(message: ChatMessage) -> list[types.Part]:
    if isinstance(message.content, str):
        return [types.Part.from_text(text=message.content)]

    parts: list[types.Part] = []
    for item in message.content:
        if isinstance(item, TextPart):
            parts.append(types.Part.from_text(text=item.text))
        elif isinstance(item, ImagePart):
            decoded = _decode_data_uri(item.image_url)
            if decoded is not None:
                mime_type, data = decoded
                parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))
            else:
                parts.append(
                    types.Part.from_uri(
                        file_uri=item.image_url,
                        mime_type=_guess_image_type(item.image_url),
                    )
                )
    return parts


def build_contents(
    messages: list[ChatMessage],
) -> tuple[str | None, list[types.Content]]:
    """Map chat messages onto Gemini's system instruction + contents."""
    system_lines: list[str] = []
    contents: list[types.Content] = []

    for msg in messages:
        if msg.role == "system":
            system_lines.append(msg.text)
            continue
        role = "model" if msg.role == "assistant" else "user"
        contents.append(types.Content(role=role, parts=_to_parts(msg)))

    # Gemini rejects a request made of a system instruction alone.
    if not contents:
        contents.append(
            types.Content(
                role="user", parts=[types.Part.from_text(text=CONVERSATION_OPENER)]
            )
        )

    system_instruction = "\n\n".join(system_lines) if system_lines else None
    return system_instruction, contents


class GeminiService:
    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

        if not self._settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is not configured")

        self._client = genai.Client(api_key=self._settings.gemini_api_key)

    async def complete(self, request: CompletionRequest) -> str | None:
        """Run one chat completion; None when the model returned no text."""
        system_instruction, contents = build_contents(request.messages)
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
        )

        def _send() -> str | None:
            response = self._client.models.generate_content(
                model=request.model,
                contents=contents,
                config=config,
            )
            text = getattr(response, "text", None)
            if isinstance(text, str) and text.strip():
                return text
            return None

        try:
            return await asyncio.to_thread(_send)
        except Exception:
            logger.exception("Gemini completion failed (model=%s)", request.model)
            raise

    async def generate_image(self, prompt: str) -> str | None:
        """Render one image.

        Returns the inline bytes as a data URI the browser can display, else
        the stored image URI (only set when Vertex output storage is
        configured), else None.
        """

        def _send() -> str | None:
            response = self._client.models.generate_images(
                model=self._settings.gemini_image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    aspect_ratio=self._settings.image_aspect_ratio,
                ),
            )

            generated = response.generated_images or []
            image = generated[0].image if generated else None
            if image is None:
                logger.warning("Image generation returned no image: %s", response)
                return None
            if image.image_bytes:
                encoded = base64.b64encode(image.image_bytes).decode("ascii")
                return f"data:{image.mime_type or DEFAULT_IMAGE_MIME_TYPE};base64,{encoded}"
            if image.gcs_uri:
                return image.gcs_uri
            logger.warning("Image generation returned neither URI nor bytes")
            return None

        try:
            return await asyncio.to_thread(_send)
        except Exception:
            logger.exception(
                "Gemini image generation failed (model=%s)",
                self._settings.gemini_image_model,
            )
            raise
