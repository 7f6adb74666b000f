"""Read-only SQS queue adapter."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from bucket_console.errors import QueueError

logger = logging.getLogger(__name__)


class SqsQueue:
    """Receives messages from one SQS queue. Messages are never deleted."""

    def __init__(self, client=None, queue_url: str = "", client_factory=None):
        self._client = client
        self._client_factory = client_factory
        self.queue_url = queue_url

    @property
    def client(self):
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def receive(self, max_messages: int = 10, wait_seconds: int = 1) -> list[dict]:
        try:
            response = self.client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_seconds,
                AttributeNames=["All"],
                MessageAttributeNames=["All"],
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("SQS receive failed for %s: %s", self.queue_url, exc)
            raise QueueError(f"SQS error: {exc}") from exc

        messages = response.get("Messages") or []
        logger.debug("SQS returned %d message(s)", len(messages))
        return messages
