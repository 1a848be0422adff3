import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile

from app.core.settings import Settings
from app.dependencies import get_app_settings, get_chat_service
from app.models.chat import ChatResponse
from app.services.chat_service import ChatService, decode_messages
from app.services.uploads import UploadLimitError, stage_uploads

logger = logging.getLogger(__name__)

router = APIRouter()

FILE_FIELDS = ("files[]", "files")
FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _form_files(form: FormData) -> list[UploadFile]:
    return [
        item
        for field in FILE_FIELDS
        for item in form.getlist(field)
        if isinstance(item, UploadFile)
    ]


async def _read_json_messages(request: Request) -> Any:
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Chat request body is not JSON; using empty history")
        return None
    if isinstance(body, dict):
        return body.get("messages")
    return body


async def _relay(
    raw_messages: Any,
    files: list[UploadFile],
    settings: Settings,
    chat_service: ChatService,
):
    if len(files) > settings.max_files:
        return _error(400, f"At most {settings.max_files} files per request")

    async with stage_uploads(files, settings) as uploads:
        return await chat_service.handle(decode_messages(raw_messages), uploads)


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
)
async def chat_endpoint(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    chat_service: ChatService = Depends(get_chat_service),
):
    declared_length = request.headers.get("content-length", "")
    if declared_length.isdigit() and int(declared_length) > settings.max_request_bytes:
        return _error(413, f"Request exceeds {settings.max_request_bytes} bytes")

    try:
        if request.headers.get("content-type", "").startswith(FORM_TYPES):
            # Closing the form closes its spooled upload files.
            async with request.form() as form:
                return await _relay(
                    form.get("messages"), _form_files(form), settings, chat_service
                )
        return await _relay(
            await _read_json_messages(request), [], settings, chat_service
        )
    except UploadLimitError as e:
        return _error(413, str(e))
    except Exception as e:
        logger.exception("Chat endpoint failed")
        return _error(500, f"Internal server error: {e}")
