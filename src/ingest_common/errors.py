# src/ingest_common/errors.py
"""Failure taxonomy for batch ingestion.

Every class here is recoverable: a handler logs it and moves on to the next
row or file. Nothing in this module is meant to stop a batch.
"""


class IngestError(RuntimeError):
    """Base class for per-row and per-file failures."""


class FetchError(IngestError):
    """Source object could not be read from the bucket."""


class DecodeError(IngestError):
    """A CSV row was malformed (bad encoding, too few fields)."""


class ParseError(IngestError):
    """A field could not be interpreted (amount, empty identifier)."""


class LookupMiss(IngestError):
    """A row referenced a customer that is not in the table."""


class StoreError(IngestError):
    """The customer table could not be read."""


class PersistError(StoreError):
    """The customer table rejected a write."""


class PublishError(IngestError):
    """The queue rejected a message."""


class UnrecognizedInput(IngestError):
    """An object key does not match any known file prefix."""
