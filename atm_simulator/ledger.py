"""
Mini-Statement Ledger

Fixed-capacity, insertion-ordered log of the most recent transactions.
Once full, each new record evicts the oldest one (FIFO), so the ledger
always holds the last N transactions in chronological order.
"""

from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Deque, Iterator, Tuple

from .currency import to_amount
from .errors import InvalidAmount

LEDGER_CAPACITY = 10


class TransactionKind(Enum):
    """Kinds of balance-changing transactions, valued by their file token"""
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"

    @classmethod
    def from_token(cls, token: str) -> 'TransactionKind':
        """Parse the literal token used in the data file"""
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown transaction kind: {token!r}")


@dataclass(frozen=True)
class TransactionRecord:
    """
    Immutable ledger entry. Amount is always positive and held at cents.
    """
    kind: TransactionKind
    amount: Decimal

    def __post_init__(self):
        try:
            amount = to_amount(self.amount)
        except ValueError as e:
            raise InvalidAmount(str(e)) from e

        if amount <= Decimal('0'):
            raise InvalidAmount(f"Transaction amount must be positive, got {amount}")

        object.__setattr__(self, 'amount', amount)

    @property
    def is_deposit(self) -> bool:
        return self.kind == TransactionKind.DEPOSIT

    @property
    def is_withdrawal(self) -> bool:
        return self.kind == TransactionKind.WITHDRAW


class Ledger:
    """
    Bounded FIFO transaction log.

    Backed by a deque with maxlen, so eviction of the oldest record is O(1)
    and traversal is always oldest first.
    """

    def __init__(self, capacity: int = LEDGER_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Ledger capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._records: Deque[TransactionRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._records) == self._capacity

    def push(self, record: TransactionRecord) -> None:
        """Append a record, evicting the oldest one when at capacity"""
        if not isinstance(record, TransactionRecord):
            raise TypeError(f"Expected TransactionRecord, got {type(record).__name__}")
        self._records.append(record)

    def snapshot(self) -> Tuple[TransactionRecord, ...]:
        """Current contents in insertion order (oldest first)"""
        return tuple(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Ledger(capacity={self._capacity}, records={list(self._records)!r})"
