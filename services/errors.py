"""Exceptions raised by the deal store."""


class DealStoreError(Exception):
    """Base exception for deal store errors."""


class ValidationError(DealStoreError):
    """Caller supplied data that fails a required field or shape check."""


class StorageError(DealStoreError):
    """The deals file could not be written."""
