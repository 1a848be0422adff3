from __future__ import annotations

import enum
import re

IMAGE_REQUEST_KEYWORDS = (
    "image",
    "render",
    "rendu",
    "visualize",
    "visualise",
    "illustration",
    "photo",
    "drawing",
    "dessin",
    "preview",
    "aperçu",
)

_DESIGN_INTENT = re.compile(
    r"layout|agencement|render|rendu|furniture|meuble|arrangement|am[ée]nagement|d[ée]cor",
    re.IGNORECASE,
)


class ResponseMode(str, enum.Enum):
    TEXT_ONLY = "text_only"
    IMAGE_GENERATE = "image_generate"
    IMAGE_ANALYZE = "image_analyze"


def is_image_request(text: str | None) -> bool:
    """True when the user asks for a picture to be produced."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in IMAGE_REQUEST_KEYWORDS)


def matches_design_intent(text: str | None) -> bool:
    return bool(_DESIGN_INTENT.search(text or ""))


def decide_response_mode(
    *,
    has_image: bool,
    design_intent: bool,
    image_request: bool,
    image_features_enabled: bool = True,
) -> ResponseMode:
    """Pick the single external-call path for a request.

    An attached image together with a furnishing/layout question wins over a
    plain image request; everything else is answered as text. With image
    features disabled the service only ever answers as text.
    """
    if not image_features_enabled:
        return ResponseMode.TEXT_ONLY
    if has_image and design_intent:
        return ResponseMode.IMAGE_ANALYZE
    if image_request:
        return ResponseMode.IMAGE_GENERATE
    return ResponseMode.TEXT_ONLY
