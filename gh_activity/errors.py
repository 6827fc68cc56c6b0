"""
gh_activity/errors.py — Error types raised while loading activity data.

Queries over a built EntityGraph never fail; every error below belongs to
ingestion and aborts the whole run.
"""

from __future__ import annotations


class GhActivityError(Exception):
    """Base class for all gh_activity errors."""


class MalformedRecord(GhActivityError, ValueError):
    """Raised when a record's required field is missing or not a 64-bit int."""

    def __init__(
        self,
        source: str,
        record_number: int | None,
        field: str,
        value: str | None,
    ) -> None:
        """Record where the bad value was found for diagnostics."""
        self.source = source
        self.record_number = record_number
        self.field = field
        self.value = value
        location = source if record_number is None else f"{source} record {record_number}"
        if value is None:
            detail = f"missing required field '{field}'"
        else:
            detail = f"field '{field}' is not a 64-bit integer: {value!r}"
        super().__init__(f"{location}: {detail}")

    def at(self, record_number: int) -> MalformedRecord:
        """Return a copy of this error bound to a record number."""
        return MalformedRecord(self.source, record_number, self.field, self.value)


class SourceUnavailable(GhActivityError, OSError):
    """Raised when a required source cannot be opened or read."""

    def __init__(self, source: str, path: str | None, reason: str) -> None:
        """Attach the source identity and the underlying reason."""
        self.source = source
        self.path = path
        self.reason = reason
        where = f"{source} ({path})" if path else source
        super().__init__(f"{where} unavailable: {reason}")


class IngestionFailure(GhActivityError):
    """Raised by the index builder, wrapping the first fatal cause."""

    def __init__(self, source: str, cause: Exception) -> None:
        """Keep the failing source and the original exception."""
        self.source = source
        self.cause = cause
        super().__init__(f"Ingestion failed while loading {source}: {cause}")
