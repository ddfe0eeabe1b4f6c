"""
Persistence Codec Module

Reads and writes the account to a flat, whitespace-delimited text file:

    <balance:%.2f> <pin> <transaction_count>
    <Deposit|Withdraw> <amount:%.2f>        (one line per ledger record)

Loading is tolerant: a bad header means "no saved state", while a bad
transaction line just stops the read and keeps what was read so far.
Writes overwrite the file in place (no temp file, no rename).
"""

from pathlib import Path
from typing import List, Optional, Union
import logging

from .accounts import Account, PIN_MAX_LENGTH
from .currency import ZERO, format_amount, to_amount
from .errors import PersistenceLoadSkipped, PersistenceWriteFailed
from .ledger import LEDGER_CAPACITY, Ledger, TransactionKind, TransactionRecord

logger = logging.getLogger(__name__)


def encode_account(account: Account) -> str:
    """Serialize an account to the data file format"""
    records = account.ledger_snapshot()
    lines = [f"{format_amount(account.balance)} {account.pin} {len(records)}"]
    for record in records:
        lines.append(f"{record.kind.value} {format_amount(record.amount)}")
    return "\n".join(lines) + "\n"


def _parse_header(tokens: List[str]):
    if len(tokens) < 3:
        raise PersistenceLoadSkipped("Header must hold balance, PIN and transaction count")

    try:
        balance = to_amount(tokens[0])
    except ValueError:
        raise PersistenceLoadSkipped(f"Invalid balance in header: {tokens[0]!r}")
    if balance < ZERO:
        raise PersistenceLoadSkipped(f"Negative balance in header: {balance}")

    try:
        count = int(tokens[2])
    except ValueError:
        raise PersistenceLoadSkipped(f"Invalid transaction count in header: {tokens[2]!r}")

    return balance, tokens[1], count


def _parse_record(kind_token: str, amount_token: str) -> TransactionRecord:
    kind = TransactionKind.from_token(kind_token)
    amount = to_amount(amount_token)
    return TransactionRecord(kind, amount)


def decode_account(
    text: str,
    capacity: int = LEDGER_CAPACITY,
    pin_max_length: int = PIN_MAX_LENGTH
) -> Account:
    """
    Parse the data file format into an account

    The text is consumed as a stream of whitespace-delimited tokens. At most
    min(transaction_count, capacity) records are read; the first record that
    does not parse ends the read early.

    Raises:
        PersistenceLoadSkipped: If the header cannot be parsed
    """
    tokens = text.split()
    balance, pin, count = _parse_header(tokens)

    ledger = Ledger(capacity)
    position = 3
    for _ in range(min(count, capacity)):
        pair = tokens[position:position + 2]
        if len(pair) < 2:
            logger.info("Data file ended after %d of %d transactions", len(ledger), count)
            break
        try:
            ledger.push(_parse_record(*pair))
        except ValueError as e:
            logger.info("Stopped reading transactions at record %d: %s", len(ledger) + 1, e)
            break
        position += 2

    return Account(balance=balance, pin=pin, ledger=ledger, pin_max_length=pin_max_length)


class FileAccountStore:
    """
    Flat-file account store. Exactly one data file, accessed sequentially
    by a single process.
    """

    def __init__(
        self,
        path: Union[str, Path],
        capacity: int = LEDGER_CAPACITY,
        pin_max_length: int = PIN_MAX_LENGTH
    ):
        self.path = Path(path)
        self.capacity = capacity
        self.pin_max_length = pin_max_length

    def load_or_raise(self) -> Account:
        """
        Load the account, attaching this store for write-through

        Raises:
            PersistenceLoadSkipped: If the file is absent, unreadable or malformed
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise PersistenceLoadSkipped(f"Data file {self.path} does not exist")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceLoadSkipped(f"Data file {self.path} could not be read: {e}") from e

        account = decode_account(text, self.capacity, self.pin_max_length)
        account.store = self
        logger.info("Loaded account from %s with %d transactions", self.path, len(account.ledger))
        return account

    def load(self) -> Optional[Account]:
        """Load the account, or None when there is no usable saved state"""
        try:
            return self.load_or_raise()
        except PersistenceLoadSkipped as e:
            logger.info("Load skipped: %s", e)
            return None

    def save(self, account: Account) -> None:
        """
        Overwrite the data file with the account state

        Raises:
            PersistenceWriteFailed: If the file cannot be opened or written
        """
        data = encode_account(account)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(data)
        except OSError as e:
            raise PersistenceWriteFailed(f"Could not write {self.path}: {e}") from e
        logger.debug("Saved account to %s", self.path)
