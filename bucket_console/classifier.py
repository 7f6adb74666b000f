"""Severity classification for queue payloads."""

import json

from bucket_console.models import ERROR, INFO, LEVELS, WARN

ERROR_MARKERS = ("error", "exception", "fail")
WARN_MARKERS = ("warn", "caution")


def classify_level(payload: dict | None) -> str:
    """Return INFO, WARN or ERROR for a decoded payload.

    An explicit ``level`` field wins when it names one of the known levels
    (case-insensitive). Otherwise the whole payload is serialized and searched
    for error and warning markers. Empty payloads are INFO.
    """
    if not payload:
        return INFO

    level = payload.get("level")
    if isinstance(level, str) and level.upper() in LEVELS:
        return level.upper()

    text = json.dumps(payload, default=str).lower()
    if any(marker in text for marker in ERROR_MARKERS):
        return ERROR
    if any(marker in text for marker in WARN_MARKERS):
        return WARN
    return INFO
