"""Poll the log queue and normalize each message into a LogEntry."""

import logging
import threading

from bucket_console.classifier import classify_level
from bucket_console.envelope import (
    FUNCTION_SOURCES,
    MESSAGE_SOURCES,
    NO_MESSAGE_CONTENT,
    REQUEST_ID_SOURCES,
    UNKNOWN,
    unwrap,
    utc_now_iso,
)
from bucket_console.errors import EnvelopeError, PollInProgressError
from bucket_console.models import ERROR, INFO, WARN, LogEntry

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 100


def placeholder_entries() -> list[LogEntry]:
    """Entries shown when no queue is configured."""
    now = utc_now_iso()
    return [
        LogEntry(
            id="placeholder-1",
            timestamp=now,
            level=INFO,
            message="No log queue is configured. Set SQS_QUEUE_URL or queue.url "
                    "in config.yaml to stream logs.",
            lambda_function="placeholder",
            request_id="placeholder-req-1",
        ),
        LogEntry(
            id="placeholder-2",
            timestamp=now,
            level=WARN,
            message="SQS_QUEUE_URL environment variable is missing. Check your "
                    "environment or config file.",
            lambda_function="configChecker",
            request_id="placeholder-req-2",
        ),
    ]


def error_entry(message: dict, index: int) -> LogEntry:
    body = message.get("Body")
    excerpt = body[:EXCERPT_LENGTH] + "..." if body else "No content"
    return LogEntry(
        id=message.get("MessageId") or f"msg-{index}",
        timestamp=utc_now_iso(),
        level=ERROR,
        message="Error parsing message: " + excerpt,
        lambda_function="parser",
        request_id=message.get("MessageId") or UNKNOWN,
    )


def _normalize(message: dict, index: int) -> LogEntry:
    env = unwrap(message, index)
    return LogEntry(
        id=env.message_id,
        timestamp=env.timestamp,
        level=classify_level(env.payload),
        message=env.first_of(MESSAGE_SOURCES, NO_MESSAGE_CONTENT),
        lambda_function=env.first_of(FUNCTION_SOURCES, UNKNOWN),
        request_id=env.first_of(REQUEST_ID_SOURCES, UNKNOWN),
    )


def to_entry(message: dict, index: int) -> LogEntry:
    """Normalize one queue message. Any failure becomes an ERROR entry for that message only."""
    try:
        return _normalize(message, index)
    except EnvelopeError as exc:
        logger.warning("Could not parse message %s: %s", message.get("MessageId"), exc)
    except Exception:
        logger.exception("Unexpected failure normalizing message %s", message.get("MessageId"))
    return error_entry(message, index)


class LogPoller:
    """Stateless poller: each call to :meth:`poll` is one independent cycle.

    ``queue`` is anything with ``receive(max_messages, wait_seconds)``; ``None``
    means no queue is configured and placeholder entries are returned instead.
    """

    def __init__(self, queue, max_messages: int = 10, wait_seconds: int = 1):
        self._queue = queue
        self._max_messages = max_messages
        self._wait_seconds = wait_seconds
        self._in_flight = threading.Lock()

    def fork(self) -> "LogPoller":
        """A poller over the same queue with its own in-flight guard."""
        return LogPoller(self._queue, self._max_messages, self._wait_seconds)

    @property
    def configured(self) -> bool:
        return self._queue is not None

    def poll(self) -> list[LogEntry]:
        """Run one poll cycle.

        Raises:
            PollInProgressError: If another poll has not finished yet.
            QueueError: If the queue could not be read. No partial results.
        """
        if not self._in_flight.acquire(blocking=False):
            raise PollInProgressError("a poll is already in progress")
        try:
            if self._queue is None:
                logger.info("No queue configured, returning placeholder entries")
                return placeholder_entries()

            messages = self._queue.receive(self._max_messages, self._wait_seconds)
            entries = [to_entry(message, i) for i, message in enumerate(messages)]
            logger.info("Polled %d message(s) from queue", len(entries))
            return entries
        finally:
            self._in_flight.release()
