from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from app.core.settings import Settings, get_settings
from app.models.chat import (
    ChatMessage,
    ChatResponse,
    CompletionRequest,
    CompletionResult,
    ImagePart,
    TextPart,
    UploadedFile,
)
from app.services import prompts
from app.services.file_summarizer import summarize_file
from app.services.gemini_service import GeminiService
from app.services.intent import (
    ResponseMode,
    decide_response_mode,
    is_image_request,
    matches_design_intent,
)

logger = logging.getLogger(__name__)

_MESSAGES = TypeAdapter(list[ChatMessage])


def decode_messages(raw: Any) -> list[ChatMessage]:
    """Turn the `messages` field into chat history.

    Accepts a list or its JSON text. Anything malformed yields an empty
    conversation instead of failing the request.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Could not decode messages field; using empty history")
            return []
    if not isinstance(raw, list):
        return []
    try:
        return _MESSAGES.validate_python(raw)
    except ValidationError as e:
        logger.warning("Invalid chat history; using empty history: %s", e)
        return []


def build_attachment_context(summaries: list[str]) -> ChatMessage | None:
    if not summaries:
        return None
    return ChatMessage(
        role="user",
        content=prompts.ATTACHMENTS_HEADER + "\n\n".join(summaries),
    )


class ChatService:
    def __init__(
        self,
        gemini_service: GeminiService,
        settings: Settings | None = None,
    ) -> None:
        self._gemini = gemini_service
        self._settings = settings or get_settings()

    async def handle(
        self,
        messages: list[ChatMessage],
        uploads: list[UploadedFile],
    ) -> ChatResponse:
        user_message = messages[-1].text if messages else ""

        # One attachment at a time, off the event loop.
        summaries = [
            await asyncio.to_thread(summarize_file, upload) for upload in uploads
        ]
        context = build_attachment_context(summaries)

        first_image = next((u for u in uploads if u.is_image), None)
        mode = decide_response_mode(
            has_image=first_image is not None,
            design_intent=matches_design_intent(user_message),
            image_request=is_image_request(user_message),
            image_features_enabled=self._settings.image_features_enabled,
        )
        logger.info(
            "Chat request: mode=%s messages=%d attachments=%d",
            mode.value,
            len(messages),
            len(uploads),
        )

        if mode is ResponseMode.IMAGE_ANALYZE:
            return await self._analyze_image(user_message, first_image)
        if mode is ResponseMode.IMAGE_GENERATE:
            return await self._generate_image(user_message)
        return await self._complete_text(messages, context)

    async def _analyze_image(
        self, user_message: str, image: UploadedFile
    ) -> ChatResponse:
        try:
            data = await asyncio.to_thread(image.temporary_path.read_bytes)
            encoded = base64.b64encode(data).decode("ascii")
            request = CompletionRequest(
                model=self._settings.gemini_vision_model,
                messages=[
                    ChatMessage(role="system", content=prompts.VISION_PERSONA),
                    ChatMessage(
                        role="user",
                        content=[
                            TextPart(text=user_message),
                            ImagePart(
                                image_url=f"data:{image.mime_type};base64,{encoded}"
                            ),
                        ],
                    ),
                ],
                temperature=self._settings.temperature,
                max_tokens=self._settings.vision_max_tokens,
            )
            reply = await self._gemini.complete(request)
        except Exception as e:
            logger.exception("Image analysis failed")
            return ChatResponse(reply=prompts.ANALYSIS_FAILED, error=str(e))

        if not reply:
            return ChatResponse(reply=prompts.NO_LAYOUT_SUGGESTION)

        result = CompletionResult(reply_text=reply)
        if self._settings.render_after_analysis:
            # The render is a bonus; the analysis stands on its own.
            try:
                result.image_url = await self._gemini.generate_image(
                    prompts.RENDER_PROMPT.format(description=reply)
                )
            except Exception:
                logger.exception("Render after image analysis failed")
        return ChatResponse.from_result(result)

    async def _generate_image(self, user_message: str) -> ChatResponse:
        try:
            image_url = await self._gemini.generate_image(user_message)
        except Exception as e:
            logger.exception("Image generation failed")
            return ChatResponse(reply=prompts.GENERATION_FAILED, error=str(e))

        if not image_url:
            logger.warning("Image generation returned no usable image reference")
            return ChatResponse(reply=prompts.GENERATION_WITHOUT_LINK)

        return ChatResponse.from_result(
            CompletionResult(reply_text=prompts.IMAGE_GENERATED, image_url=image_url)
        )

    async def _complete_text(
        self,
        messages: list[ChatMessage],
        context: ChatMessage | None,
    ) -> ChatResponse:
        # The persona is the only system message sent upstream.
        outbound = [ChatMessage(role="system", content=prompts.CHAT_PERSONA)]
        outbound.extend(m for m in messages if m.role != "system")
        if context is not None:
            outbound.append(context)

        request = CompletionRequest(
            model=self._settings.gemini_model,
            messages=outbound,
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_tokens,
        )
        try:
            reply = await self._gemini.complete(request)
        except Exception as e:
            logger.exception("Text completion failed")
            return ChatResponse(reply=prompts.COMPLETION_FAILED, error=str(e))

        return ChatResponse(reply=reply or prompts.NO_RESPONSE)
