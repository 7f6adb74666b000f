"""Log entry and stored file models."""

from dataclasses import dataclass

INFO = "INFO"
WARN = "WARN"
ERROR = "ERROR"

LEVELS = (INFO, WARN, ERROR)


@dataclass(frozen=True)
class LogEntry:
    id: str
    timestamp: str
    level: str
    message: str
    lambda_function: str = "unknown"
    request_id: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "lambdaFunction": self.lambda_function,
            "requestId": self.request_id,
        }


@dataclass(frozen=True)
class StoredFile:
    id: str
    name: str
    size: int
    last_modified: str
    url: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "lastModified": self.last_modified,
            "url": self.url,
        }
