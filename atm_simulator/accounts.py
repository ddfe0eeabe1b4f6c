"""
Account State Module

In-memory state of the single ATM account: balance, PIN and the
mini-statement ledger. Every mutation is validated first, committed in
memory, then written through the attached store. A failed write is
reported on the result but never rolls the mutation back.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, TYPE_CHECKING
import hmac
import logging

from .currency import AmountLike, ZERO, add_amounts, subtract_amounts, to_amount
from .errors import (
    InsufficientFunds, InvalidAmount, InvalidPin, PersistenceWriteFailed,
    PinConfirmationMismatch, PinMismatch
)
from .ledger import LEDGER_CAPACITY, Ledger, TransactionKind, TransactionRecord
from .logging_config import log_action

if TYPE_CHECKING:
    from .storage import FileAccountStore

logger = logging.getLogger(__name__)

DEFAULT_BALANCE = Decimal('1000.00')
DEFAULT_PIN = "1234"
PIN_MAX_LENGTH = 6


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a committed account operation"""
    balance: Decimal
    record: Optional[TransactionRecord] = None
    persisted: bool = True


def validate_pin(pin: str, max_length: int = PIN_MAX_LENGTH) -> str:
    """
    Check that a PIN can be written to the data file as one token

    Raises:
        InvalidPin: If the PIN is empty, has whitespace or exceeds max_length
    """
    if not isinstance(pin, str) or not pin:
        raise InvalidPin("PIN must be a non-empty string")
    if any(ch.isspace() for ch in pin):
        raise InvalidPin("PIN must not contain whitespace")
    if len(pin) > max_length:
        raise InvalidPin(f"PIN must be at most {max_length} characters")
    return pin


class Account:
    """
    Single ATM account.

    Invariants:
        - balance >= 0 after every committed operation
        - ledger never holds more than its capacity
    """

    def __init__(
        self,
        balance: AmountLike,
        pin: str,
        ledger: Optional[Ledger] = None,
        store: Optional['FileAccountStore'] = None,
        pin_max_length: int = PIN_MAX_LENGTH
    ):
        try:
            balance = to_amount(balance)
        except ValueError as e:
            raise InvalidAmount(str(e)) from e
        if balance < ZERO:
            raise InvalidAmount(f"Balance cannot be negative, got {balance}")

        self._balance = balance
        self._pin = pin
        self.ledger = ledger if ledger is not None else Ledger()
        self.store = store
        self.pin_max_length = pin_max_length

    @classmethod
    def default(
        cls,
        balance: AmountLike = DEFAULT_BALANCE,
        pin: str = DEFAULT_PIN,
        capacity: int = LEDGER_CAPACITY,
        store: Optional['FileAccountStore'] = None,
        pin_max_length: int = PIN_MAX_LENGTH
    ) -> 'Account':
        """
        Create a freshly initialized account with an empty ledger

        Raises:
            InvalidPin: If the PIN could not be written to the data file
        """
        account = cls(
            balance=balance,
            pin=validate_pin(pin, pin_max_length),
            ledger=Ledger(capacity),
            store=store,
            pin_max_length=pin_max_length
        )
        log_action(
            logger, "info", "Account initialized with default state",
            action="initialize_default", resource="account",
            extra={"balance": str(account.balance)}
        )
        return account

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def pin(self) -> str:
        return self._pin

    def verify_pin(self, candidate: str) -> bool:
        """Single-attempt exact comparison against the stored PIN"""
        if not isinstance(candidate, str):
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._pin.encode("utf-8"))

    def balance_snapshot(self) -> Decimal:
        return self._balance

    def ledger_snapshot(self) -> Tuple[TransactionRecord, ...]:
        return self.ledger.snapshot()

    def deposit(self, amount: AmountLike) -> OperationResult:
        """
        Add funds to the account

        Args:
            amount: Positive amount, rounded half-up to cents

        Returns:
            OperationResult with the new balance and the Deposit record

        Raises:
            InvalidAmount: If amount is not positive
        """
        amount = self._validate_amount(amount, "deposit")

        self._balance = add_amounts(self._balance, amount)
        record = TransactionRecord(TransactionKind.DEPOSIT, amount)
        self.ledger.push(record)

        log_action(
            logger, "info", f"Deposited {amount}",
            action="deposit", resource="account",
            extra={"amount": str(amount), "balance": str(self._balance)}
        )

        return OperationResult(self._balance, record, self.persist())

    def withdraw(self, amount: AmountLike) -> OperationResult:
        """
        Take funds out of the account

        Args:
            amount: Positive amount not exceeding the balance

        Returns:
            OperationResult with the new balance and the Withdraw record

        Raises:
            InvalidAmount: If amount is not positive
            InsufficientFunds: If amount exceeds the current balance
        """
        amount = self._validate_amount(amount, "withdraw")

        if amount > self._balance:
            log_action(
                logger, "warning", "Withdrawal rejected: insufficient funds",
                action="withdraw", resource="account",
                extra={"amount": str(amount), "balance": str(self._balance)}
            )
            raise InsufficientFunds(
                f"Insufficient funds: balance {self._balance}, requested {amount}"
            )

        self._balance = subtract_amounts(self._balance, amount)
        record = TransactionRecord(TransactionKind.WITHDRAW, amount)
        self.ledger.push(record)

        log_action(
            logger, "info", f"Withdrew {amount}",
            action="withdraw", resource="account",
            extra={"amount": str(amount), "balance": str(self._balance)}
        )

        return OperationResult(self._balance, record, self.persist())

    def change_pin(self, old: str, new: str, confirm: str) -> OperationResult:
        """
        Replace the stored PIN

        Args:
            old: Current PIN
            new: New PIN
            confirm: Second copy of the new PIN

        Raises:
            PinMismatch: If old does not match the stored PIN
            PinConfirmationMismatch: If new and confirm differ
            InvalidPin: If the new PIN cannot be stored
        """
        if not self.verify_pin(old):
            log_action(
                logger, "warning", "PIN change rejected: current PIN does not match",
                action="change_pin", resource="account"
            )
            raise PinMismatch("Current PIN does not match")

        if new != confirm:
            log_action(
                logger, "warning", "PIN change rejected: confirmation mismatch",
                action="change_pin", resource="account"
            )
            raise PinConfirmationMismatch("New PIN and confirmation do not match")

        self._pin = validate_pin(new, self.pin_max_length)

        log_action(logger, "info", "PIN changed", action="change_pin", resource="account")

        return OperationResult(self._balance, None, self.persist())

    def _validate_amount(self, amount: AmountLike, action: str) -> Decimal:
        try:
            amount = to_amount(amount)
        except ValueError as e:
            raise InvalidAmount(str(e)) from e

        if amount <= ZERO:
            log_action(
                logger, "warning", f"Rejected non-positive {action} amount",
                action=action, resource="account", extra={"amount": str(amount)}
            )
            raise InvalidAmount(f"Amount must be positive, got {amount}")

        return amount

    def persist(self) -> bool:
        """Write through the store; a failure is logged, not raised"""
        if self.store is None:
            return True
        try:
            self.store.save(self)
        except PersistenceWriteFailed as e:
            log_action(
                logger, "warning", f"Could not save account data: {e}",
                action="save", resource="data_file"
            )
            return False
        return True

    def __repr__(self) -> str:
        return f"Account(balance={self._balance}, transactions={len(self.ledger)})"
