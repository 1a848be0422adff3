from __future__ import annotations

import logging
import re

from pypdf import PdfReader

from app.models.chat import UploadedFile

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 300
TRUNCATION_MARKER = "..."

_WHITESPACE = re.compile(r"\s+")


def _excerpt(text: str) -> str:
    return f"{text[:EXCERPT_LENGTH]}{TRUNCATION_MARKER}"


def _summarize_text(upload: UploadedFile) -> str:
    content = upload.temporary_path.read_text(encoding="utf-8", errors="replace")
    return f'Fichier texte "{upload.original_name}" : {_excerpt(content)}'


def _summarize_pdf(upload: UploadedFile) -> str:
    reader = PdfReader(upload.temporary_path)
    text = " ".join(page.extract_text() or "" for page in reader.pages)
    text = _WHITESPACE.sub(" ", text).strip()
    return f'PDF "{upload.original_name}" : {_excerpt(text)}'


def _summarize_image(upload: UploadedFile) -> str:
    size_kb = round(upload.temporary_path.stat().st_size / 1024)
    return f'Image "{upload.original_name}" ({size_kb} Ko, {upload.mime_type}) jointe.'


def summarize_file(upload: UploadedFile) -> str:
    """Return a short synopsis of an attachment for the model's context.

    Never raises: an attachment that cannot be read or parsed yields a fixed
    "unreadable" label so the rest of the request carries on.
    """
    mime_type = upload.mime_type
    try:
        if mime_type.startswith("text/"):
            return _summarize_text(upload)
        if mime_type == "application/pdf":
            return _summarize_pdf(upload)
        if mime_type.startswith("image/"):
            return _summarize_image(upload)
        return f'Fichier "{upload.original_name}" ({mime_type}) joint.'
    except Exception as e:
        logger.warning("Could not read attachment %s: %s", upload.original_name, e)
        return f'Fichier "{upload.original_name}" illisible.'
