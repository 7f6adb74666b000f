import pytest

from bucket_console.app import create_app
from bucket_console.config import Config
from bucket_console.poller import LogPoller
from bucket_console.storage import FileManager
from tests.fakes import FakeObjectStore, FakeQueue, sns_body


@pytest.fixture
def config():
    return Config.from_dict({"logs": {"background_poll": False}})


@pytest.fixture
def sample_messages():
    return [
        {"MessageId": "m-1", "Body": sns_body({"level": "info", "message": "File upload initiated",
                                                 "function": "fileUploadHandler", "requestId": "req-1"})},
        {"MessageId": "m-2", "Body": sns_body({"message": "File size exceeds recommended limit, caution",
                                                 "function": "fileValidationHandler"})},
        {"MessageId": "m-3", "Body": sns_body({"message": "Failed to delete file: permission denied",
                                                 "function": "fileDeleteHandler", "requestId": "req-3"})},
    ]


@pytest.fixture
def queue(sample_messages):
    return FakeQueue(sample_messages)


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def file_manager(store):
    return FileManager(store, prefix="uploads/", clock=lambda: 1700000000.123)


@pytest.fixture
def app(config, file_manager, queue):
    """Create a Flask test app wired to in-memory collaborators."""
    application = create_app(config, file_manager=file_manager, poller=LogPoller(queue))
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
