import asyncio
import io
import logging

import pytest
from starlette.datastructures import Headers, UploadFile

from app.services.uploads import UploadLimitError, release_uploads, stage_uploads


def _upload(name: str, data: bytes, content_type: str | None = "text/plain") -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(file=io.BytesIO(data), filename=name, headers=headers)


def test_staged_files_are_deleted_on_exit(settings):
    async def scenario():
        async with stage_uploads(
            [_upload("a.txt", b"hello"), _upload("b.bin", b"\x00\x01", None)],
            settings,
        ) as staged:
            assert [u.original_name for u in staged] == ["a.txt", "b.bin"]
            assert staged[0].mime_type == "text/plain"
            assert staged[1].mime_type == "application/octet-stream"
            assert staged[0].size_bytes == 5
            assert staged[0].temporary_path.read_bytes() == b"hello"
            assert all(u.temporary_path.parent == settings.upload_dir for u in staged)
            return staged

    staged = asyncio.run(scenario())

    assert not any(u.temporary_path.exists() for u in staged)
    assert list(settings.upload_dir.iterdir()) == []


def test_staged_files_are_deleted_when_handler_raises(settings):
    async def scenario():
        async with stage_uploads([_upload("a.txt", b"hello")], settings):
            raise RuntimeError("handler failed")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())

    assert list(settings.upload_dir.iterdir()) == []


def test_size_limit_is_enforced(settings):
    settings.max_request_bytes = 8

    async def scenario():
        async with stage_uploads(
            [_upload("a.txt", b"12345"), _upload("b.txt", b"67890")], settings
        ):
            pass

    with pytest.raises(UploadLimitError):
        asyncio.run(scenario())

    assert list(settings.upload_dir.iterdir()) == []


def test_release_failures_are_logged_not_raised(tmp_path, caplog):
    directory = tmp_path / "not-a-file"
    directory.mkdir()

    with caplog.at_level(logging.WARNING, logger="app.services.uploads"):
        release_uploads([directory, tmp_path / "already-gone"])

    assert "Could not delete temporary upload" in caplog.text
