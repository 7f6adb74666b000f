"""S3 object store wrapper and the upload/listing logic built on it."""

import logging
import re
import time

from botocore.exceptions import BotoCoreError, ClientError

from bucket_console.errors import StorageError
from bucket_console.models import StoredFile

logger = logging.getLogger(__name__)

UPLOAD_STAMP = re.compile(r"^\d+-")


class ObjectStore:
    """Thin wrapper over a boto3 S3 client bound to one bucket.

    Every botocore failure is re-raised as :class:`StorageError`. Pass either a
    ready ``client`` or a ``client_factory`` that is called on first use.
    """

    def __init__(self, client=None, bucket: str = "", client_factory=None):
        self._client = client
        self._client_factory = client_factory
        self.bucket = bucket

    @property
    def client(self):
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def list(self, prefix: str = "") -> list[dict]:
        """Return ``[{key, size, last_modified}]`` for all objects under ``prefix``."""
        objects = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for item in page.get("Contents", []):
                    objects.append({
                        "key": item["Key"],
                        "size": item.get("Size", 0),
                        "last_modified": item.get("LastModified"),
                    })
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"list failed for {self.bucket}/{prefix}: {exc}") from exc
        return objects

    def put(self, key: str, data: bytes, content_type: str | None = None) -> None:
        kwargs = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            kwargs["ContentType"] = content_type
        try:
            self.client.put_object(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"put failed for {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"delete failed for {key}: {exc}") from exc

    def temporary_url(self, key: str, ttl_seconds: int = 3600) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"presign failed for {key}: {exc}") from exc


def display_name(key: str) -> str:
    """Last path segment of ``key`` without its upload timestamp prefix."""
    return UPLOAD_STAMP.sub("", key.rsplit("/", 1)[-1], count=1)


def _basename(filename: str) -> str:
    return re.split(r"[\\/]", filename)[-1]


class FileManager:
    """Uploads, lists and deletes files under a fixed key prefix."""

    def __init__(self, store, prefix: str = "uploads/", url_ttl_seconds: int = 3600, clock=time.time):
        self._store = store
        self._prefix = prefix
        self._url_ttl = url_ttl_seconds
        self._clock = clock

    def make_key(self, filename: str) -> str:
        return f"{self._prefix}{int(self._clock() * 1000)}-{_basename(filename)}"

    def upload(self, filename: str, data: bytes, content_type: str | None = None) -> dict:
        key = self.make_key(filename)
        self._store.put(key, data, content_type)
        logger.info("Uploaded %s (%d bytes) as %s", filename, len(data), key)
        return {"fileName": filename, "key": key}

    def list_files(self) -> list[StoredFile]:
        files = []
        for obj in self._store.list(self._prefix):
            last_modified = obj.get("last_modified")
            files.append(StoredFile(
                id=obj["key"],
                name=display_name(obj["key"]),
                size=obj.get("size") or 0,
                last_modified=last_modified.isoformat() if last_modified else "",
                url=self._store.temporary_url(obj["key"], self._url_ttl),
            ))
        logger.info("Listed %d file(s) under %s", len(files), self._prefix)
        return files

    def delete(self, file_id: str) -> None:
        self._store.delete(file_id)
        logger.info("Deleted %s", file_id)
