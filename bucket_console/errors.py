"""Exception taxonomy for the console."""


class ConsoleError(Exception):
    """Base class for console failures."""


class EnvelopeError(ConsoleError):
    """Raised when a queue message body cannot be parsed as an envelope."""


class QueueError(ConsoleError):
    """Raised when the message queue cannot be reached or rejects a request."""


class PollInProgressError(ConsoleError):
    """Raised when a poll is requested while another one is still running."""


class StorageError(ConsoleError):
    """Raised when an object-store operation fails."""
