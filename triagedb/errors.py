"""
Error taxonomy for database bootstrap operations.

Every failure surfaces to the top-level invocation; nothing here retries.
pymongo exceptions are translated at the storage boundary by
``storage_errors`` so callers only deal with the classes below (plus any
driver error that has no better classification).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import ConfigurationError as DriverConfigurationError
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    NetworkTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

logger = logging.getLogger(__name__)

# Server error codes, see mongo/base/error_codes.yml
LOCK_TIMEOUT = 24
UNAUTHORIZED = 13
AUTHENTICATION_FAILED = 18
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86
WRITE_CONFLICT = 112

AUTH_CODES = {UNAUTHORIZED, AUTHENTICATION_FAILED}
CONFLICT_CODES = {INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT}
TRANSIENT_CODES = {LOCK_TIMEOUT, WRITE_CONFLICT}


class TriageDBError(Exception):
    """Base class for all bootstrap errors."""


class ConfigurationError(TriageDBError):
    """Required connection parameters are missing."""


class StorageConnectionError(TriageDBError):
    """The datastore is unreachable or rejected our credentials."""


class ValidationConflictError(TriageDBError):
    """An existing validator or index cannot be reconciled in place."""


class TransientStorageError(TriageDBError):
    """Lock contention or a network blip during a single storage call."""


class SchemaValidationError(TriageDBError):
    """A document does not satisfy its collection validator."""

    def __init__(self, collection: str, errors: list[str]):
        self.collection = collection
        self.errors = errors
        super().__init__(f"Document rejected for '{collection}': {'; '.join(errors)}")


def translate_error(exc: PyMongoError, action: str) -> Exception:
    """Map a driver exception onto the bootstrap error taxonomy."""
    message = f"{action} failed: {exc}"
    if isinstance(exc, DriverConfigurationError):
        return ConfigurationError(message)
    # ServerSelectionTimeoutError subclasses AutoReconnect
    if isinstance(exc, ServerSelectionTimeoutError):
        return StorageConnectionError(message)
    if isinstance(exc, (AutoReconnect, NetworkTimeout, WTimeoutError)):
        return TransientStorageError(message)
    if isinstance(exc, ConnectionFailure):
        return StorageConnectionError(message)
    if isinstance(exc, OperationFailure):
        if exc.code in AUTH_CODES:
            return StorageConnectionError(message)
        if exc.code in CONFLICT_CODES:
            return ValidationConflictError(message)
        if exc.code in TRANSIENT_CODES or exc.has_error_label("TransientTransactionError"):
            return TransientStorageError(message)
    return exc


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise pymongo errors raised inside the block as bootstrap errors."""
    try:
        yield
    except PyMongoError as exc:
        translated = translate_error(exc, action)
        if translated is exc:
            raise
        logger.error("%s", translated)
        raise translated from exc
