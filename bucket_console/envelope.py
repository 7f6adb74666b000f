"""Unwrap SNS notifications delivered through SQS into flat records.

A queue message body is a JSON-encoded SNS envelope whose ``Message`` field is
itself a JSON-encoded application payload. Malformed outer JSON raises
:class:`EnvelopeError`; malformed inner JSON degrades to an empty payload.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from bucket_console.errors import EnvelopeError

NO_MESSAGE_CONTENT = "No message content"
UNKNOWN = "unknown"

# Ordered candidate sources per LogEntry field: ("payload" | "envelope", key).
MESSAGE_SOURCES = (("payload", "message"), ("envelope", "Message"))
FUNCTION_SOURCES = (("payload", "function"),)
REQUEST_ID_SOURCES = (("payload", "requestId"), ("envelope", "MessageId"))


@dataclass(frozen=True)
class Envelope:
    message_id: str
    timestamp: str
    raw_message: str | None
    payload: dict = field(default_factory=dict)
    envelope: dict = field(default_factory=dict)

    def first_of(self, sources, default: str) -> str:
        """Return the first truthy value among ``sources``, else ``default``."""
        scopes = {"payload": self.payload, "envelope": self.envelope}
        for scope, key in sources:
            value = scopes[scope].get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value, default=str)
        return default


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_payload(raw_message: Any) -> dict:
    if not isinstance(raw_message, str):
        return {}
    try:
        payload = json.loads(raw_message)
    except (ValueError, RecursionError):
        return {}
    return payload if isinstance(payload, dict) else {}


def unwrap(message: dict, index: int) -> Envelope:
    """Parse one raw queue message (``{"MessageId", "Body"}``) into an Envelope.

    Args:
        message: The message dict as returned by the queue.
        index: Position of the message within its batch, used for the
            ``msg-<index>`` fallback identifier.

    Raises:
        EnvelopeError: If the body is absent, not JSON, or not a JSON object.
    """
    body = message.get("Body")
    if not body:
        raise EnvelopeError("message has no body")

    try:
        envelope = json.loads(body)
    except (ValueError, RecursionError) as exc:
        raise EnvelopeError(f"invalid envelope JSON: {exc}") from exc
    if not isinstance(envelope, dict):
        raise EnvelopeError(f"expected a JSON object, got {type(envelope).__name__}")

    raw_message = envelope.get("Message")
    timestamp = envelope.get("Timestamp")
    return Envelope(
        message_id=message.get("MessageId") or f"msg-{index}",
        timestamp=timestamp if isinstance(timestamp, str) and timestamp else utc_now_iso(),
        raw_message=raw_message if isinstance(raw_message, str) else None,
        payload=_parse_payload(raw_message),
        envelope=envelope,
    )
