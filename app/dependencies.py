from __future__ import annotations

from fastapi import Depends, Request

from app.core.settings import Settings
from app.services.chat_service import ChatService
from app.services.gemini_service import GeminiService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gemini_service(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> GeminiService:
    # One client per application, created on first use.
    service = getattr(request.app.state, "gemini_service", None)
    if service is None:
        service = GeminiService(settings=settings)
        request.app.state.gemini_service = service
    return service


def get_chat_service(
    settings: Settings = Depends(get_app_settings),
    gemini_service: GeminiService = Depends(get_gemini_service),
) -> ChatService:
    return ChatService(gemini_service=gemini_service, settings=settings)
