from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

READY_MESSAGE = "Chatbot Atelier Lichen : prêt à répondre !"


@router.get("/", response_class=PlainTextResponse)
def root_ready_check() -> str:
    return READY_MESSAGE


@router.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}
