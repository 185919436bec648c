# easybook/core/errors.py
"""
Error kinds raised by contract operations.
Every one of them is surfaced to the invocation boundary as-is; nothing is retried here.
"""


class ContractError(Exception):
    """Base class for every failure a contract operation can report."""


class NotFoundError(ContractError):
    """Operation targets an id absent from the store."""


class AlreadyExistsError(ContractError):
    """Create targets an id already present."""


class ValidationError(ContractError):
    """An argument cannot be parsed into its expected scalar type."""


class DecodeError(ContractError):
    """Stored bytes do not conform to the expected entity shape."""


class StorageError(ContractError):
    """The underlying record store call itself failed."""
