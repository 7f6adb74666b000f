"""Filter predicates for log entries: level and free-text search."""

from typing import Callable, Iterable

from bucket_console.models import LogEntry

ALL_LEVELS = "ALL"


def filter_by_level(entry: LogEntry, level: str) -> bool:
    """True if entry matches the given level (case-insensitive). ALL matches everything."""
    level = level.upper()
    return level == ALL_LEVELS or entry.level == level


def filter_by_search(entry: LogEntry, term: str) -> bool:
    """True if term appears in the message, function or request id (case-insensitive)."""
    term = term.lower()
    return (
        term in entry.message.lower()
        or term in entry.lambda_function.lower()
        or term in entry.request_id.lower()
    )


def build_filter_chain(level: str | None = None, search: str | None = None) -> Callable[[LogEntry], bool]:
    """Combine the active filters into a single callable that ANDs them."""
    predicates = []

    if level:
        predicates.append(lambda entry, l=level: filter_by_level(entry, l))

    if search:
        predicates.append(lambda entry, s=search: filter_by_search(entry, s))

    if not predicates:
        return lambda entry: True

    def combined(entry: LogEntry) -> bool:
        return all(p(entry) for p in predicates)

    return combined


def filter_entries(entries: Iterable[LogEntry], level: str | None = None,
                   search: str | None = None) -> list[LogEntry]:
    keep = build_filter_chain(level, search)
    return [entry for entry in entries if keep(entry)]
