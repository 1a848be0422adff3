from __future__ import annotations

import os

# create_app() refuses to start without a credential; app.main builds one at import.
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient

from app.core.settings import Settings
from app.dependencies import get_gemini_service
from app.main import create_app
from app.models.chat import UploadedFile


class FakeGeminiService:
    """Records every call; replies and failures are set per test."""

    def __init__(self) -> None:
        self.reply: str | None = "ok"
        self.image_url: str | None = "https://images.example/render.png"
        self.complete_error: Exception | None = None
        self.image_error: Exception | None = None
        self.completions = []
        self.image_prompts: list[str] = []

    async def complete(self, request):
        self.completions.append(request)
        if self.complete_error is not None:
            raise self.complete_error
        return self.reply

    async def generate_image(self, prompt: str):
        self.image_prompts.append(prompt)
        if self.image_error is not None:
            raise self.image_error
        return self.image_url


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def fake_gemini() -> FakeGeminiService:
    return FakeGeminiService()


@pytest.fixture
def client(settings, fake_gemini) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_gemini_service] = lambda: fake_gemini
    return TestClient(app)


@pytest.fixture
def make_upload(tmp_path):
    def _make(name: str, mime_type: str, data: bytes) -> UploadedFile:
        path = tmp_path / name
        path.write_bytes(data)
        return UploadedFile(
            original_name=name,
            mime_type=mime_type,
            size_bytes=len(data),
            temporary_path=path,
        )

    return _make
