"""Lazily created boto3 clients shared by the whole process."""

import logging
import threading

import boto3

from bucket_console.sqs import SqsQueue
from bucket_console.storage import ObjectStore

logger = logging.getLogger(__name__)


class ServiceHandles:
    """Owns the S3 and SQS clients for one configuration.

    Clients are built on first use and reused afterwards. Explicit credentials
    from config are passed through; otherwise boto3's default chain applies.
    """

    def __init__(self, config, session_factory=boto3.session.Session):
        self._aws = config["aws"]
        self._storage = config["storage"]
        self._queue = config["queue"]
        self._session_factory = session_factory
        self._session = None
        self._clients: dict = {}
        self._lock = threading.Lock()

    def _client(self, service: str):
        with self._lock:
            if service not in self._clients:
                if self._session is None:
                    self._session = self._session_factory(
                        region_name=self._aws.get("region"),
                        aws_access_key_id=self._aws.get("access_key_id") or None,
                        aws_secret_access_key=self._aws.get("secret_access_key") or None,
                    )
                logger.info("Creating %s client in %s", service, self._aws.get("region"))
                self._clients[service] = self._session.client(service)
            return self._clients[service]

    @property
    def bucket_configured(self) -> bool:
        return bool(self._storage.get("bucket"))

    @property
    def queue_configured(self) -> bool:
        return bool(self._queue.get("url"))

    def object_store(self) -> ObjectStore:
        """The S3 wrapper; its client is created on the first storage call."""
        return ObjectStore(
            bucket=self._storage.get("bucket") or "",
            client_factory=lambda: self._client("s3"),
        )

    def log_queue(self) -> SqsQueue | None:
        """The SQS adapter, or None when no queue URL is configured."""
        if not self.queue_configured:
            return None
        return SqsQueue(queue_url=self._queue["url"], client_factory=lambda: self._client("sqs"))
