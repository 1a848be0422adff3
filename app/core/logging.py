from __future__ import annotations

import logging

from app.core.settings import Settings

# SDK loggers that log every outbound request at INFO.
_CHATTY_LOGGERS = ("httpx", "google_genai.models", "google_genai._api_client")


def configure_logging(settings: Settings) -> None:
    level_name = (settings.log_level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
