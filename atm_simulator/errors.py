"""
Error Taxonomy

Domain-specific errors raised by the account state machine and the
persistence codec. Every error is recoverable at the operation boundary.
"""


class AtmError(Exception):
    """Base class for all ATM simulator errors"""
    pass


class InvalidAmount(AtmError, ValueError):
    """
    Raised when an amount is zero, negative or not a number.
    """
    pass


class InsufficientFunds(AtmError, ValueError):
    """
    Raised when a withdrawal exceeds the current balance.
    The balance and ledger are left untouched.
    """
    pass


class PinMismatch(AtmError, ValueError):
    """Raised when the current PIN supplied to a change request is wrong"""
    pass


class PinConfirmationMismatch(AtmError, ValueError):
    """Raised when the new PIN and its confirmation differ"""
    pass


class InvalidPin(AtmError, ValueError):
    """
    Raised when a new PIN cannot be stored in the data file:
    empty, containing whitespace, or longer than the configured bound.
    """
    pass


class PersistenceWriteFailed(AtmError):
    """Raised when the data file cannot be opened or written"""
    pass


class PersistenceLoadSkipped(AtmError):
    """
    Raised when the data file is absent or malformed.
    Not fatal: callers fall back to a default-initialized account.
    """
    pass
