from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from pathlib import Path

from starlette.datastructures import UploadFile

from app.core.settings import Settings
from app.models.chat import UploadedFile

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class UploadLimitError(ValueError):
    """Raised when the staged attachments exceed the request size limit."""


def release_uploads(paths: Iterable[Path]) -> None:
    """Delete staged files. Failures are logged and otherwise ignored."""
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete temporary upload %s: %s", path, e)


def _copy_to_fd(upload: UploadFile, fd: int) -> int:
    with os.fdopen(fd, "wb") as handle:
        shutil.copyfileobj(upload.file, handle)
        return handle.tell()


@asynccontextmanager
async def stage_uploads(
    files: Sequence[UploadFile],
    settings: Settings,
) -> AsyncIterator[list[UploadedFile]]:
    """Copy multipart files to disk for the lifetime of one request.

    Every file written here is deleted exactly once when the block exits,
    whether the request succeeded, failed in a handled way or blew up.
    """
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    staged: list[UploadedFile] = []
    total_bytes = 0

    try:
        for upload in files:
            fd, name = tempfile.mkstemp(dir=upload_dir, prefix="upload-")
            path = Path(name)
            written.append(path)

            await upload.seek(0)
            size = await asyncio.to_thread(_copy_to_fd, upload, fd)
            total_bytes += size
            if total_bytes > settings.max_request_bytes:
                raise UploadLimitError(
                    f"Attachments exceed {settings.max_request_bytes} bytes"
                )

            staged.append(
                UploadedFile(
                    original_name=upload.filename or path.name,
                    mime_type=upload.content_type or DEFAULT_MIME_TYPE,
                    size_bytes=size,
                    temporary_path=path,
                )
            )

        yield staged
    finally:
        release_uploads(written)
