"""
Test suite for ledger module

Tests transaction records and the bounded mini-statement ledger.
CRITICAL: Validates FIFO eviction and that capacity is never exceeded.
"""

import pytest
from decimal import Decimal
from dataclasses import FrozenInstanceError

from atm_simulator.errors import InvalidAmount
from atm_simulator.ledger import (
    Ledger, TransactionRecord, TransactionKind, LEDGER_CAPACITY
)


def deposit(amount):
    return TransactionRecord(TransactionKind.DEPOSIT, Decimal(amount))


class TestTransactionKind:
    """Test kind tokens"""

    def test_tokens(self):
        assert TransactionKind.DEPOSIT.value == "Deposit"
        assert TransactionKind.WITHDRAW.value == "Withdraw"

    def test_from_token(self):
        assert TransactionKind.from_token("Deposit") == TransactionKind.DEPOSIT
        assert TransactionKind.from_token("Withdraw") == TransactionKind.WITHDRAW

    def test_from_unknown_token(self):
        """Test tokens are case sensitive and unknown ones rejected"""
        with pytest.raises(ValueError, match="Unknown transaction kind"):
            TransactionKind.from_token("deposit")
        with pytest.raises(ValueError, match="Unknown transaction kind"):
            TransactionKind.from_token("Transfer")


class TestTransactionRecord:
    """Test immutable transaction records"""

    def test_valid_record(self):
        """Test amount is stored at cent precision"""
        record = TransactionRecord(TransactionKind.WITHDRAW, Decimal('300'))

        assert record.kind == TransactionKind.WITHDRAW
        assert record.amount == Decimal('300.00')
        assert record.is_withdrawal
        assert not record.is_deposit

    def test_non_positive_amount_rejected(self):
        """Test a record never holds zero or negative amounts"""
        with pytest.raises(InvalidAmount, match="must be positive"):
            TransactionRecord(TransactionKind.DEPOSIT, Decimal('0'))
        with pytest.raises(InvalidAmount, match="must be positive"):
            TransactionRecord(TransactionKind.DEPOSIT, Decimal('-5'))
        # Rounds to zero at cent precision
        with pytest.raises(InvalidAmount):
            TransactionRecord(TransactionKind.DEPOSIT, Decimal('0.004'))

    def test_non_numeric_amount_rejected(self):
        with pytest.raises(InvalidAmount):
            TransactionRecord(TransactionKind.DEPOSIT, "lots")

    def test_record_is_immutable(self):
        record = deposit('10')
        with pytest.raises(FrozenInstanceError):
            record.amount = Decimal('20')

    def test_equality(self):
        assert deposit('10') == deposit('10.00')
        assert deposit('10') != TransactionRecord(TransactionKind.WITHDRAW, Decimal('10'))


class TestLedger:
    """Test bounded FIFO ledger behavior"""

    def test_empty_ledger(self):
        ledger = Ledger()

        assert len(ledger) == 0
        assert ledger.capacity == LEDGER_CAPACITY == 10
        assert ledger.snapshot() == ()
        assert not ledger.is_full

    def test_push_preserves_insertion_order(self):
        ledger = Ledger()
        records = [deposit(str(i)) for i in range(1, 4)]
        for record in records:
            ledger.push(record)

        assert ledger.snapshot() == tuple(records)
        assert list(ledger) == records

    def test_eviction_drops_oldest(self):
        """Test the 11th push evicts the first record, not the newest"""
        ledger = Ledger()
        records = [deposit(str(i)) for i in range(1, 12)]
        for record in records:
            ledger.push(record)

        assert len(ledger) == 10
        assert ledger.is_full
        assert ledger.snapshot() == tuple(records[1:])
        assert ledger.snapshot()[0].amount == Decimal('2.00')
        assert ledger.snapshot()[-1].amount == Decimal('11.00')

    def test_never_exceeds_capacity(self):
        """Test capacity holds over many pushes"""
        ledger = Ledger()
        for i in range(1, 101):
            ledger.push(deposit(str(i)))
            assert len(ledger) <= 10

        assert [r.amount for r in ledger] == [Decimal(i) for i in range(91, 101)]

    def test_custom_capacity(self):
        ledger = Ledger(capacity=2)
        for amount in ('1', '2', '3'):
            ledger.push(deposit(amount))

        assert [r.amount for r in ledger] == [Decimal('2.00'), Decimal('3.00')]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="at least 1"):
            Ledger(capacity=0)

    def test_push_rejects_non_records(self):
        ledger = Ledger()
        with pytest.raises(TypeError):
            ledger.push(("Deposit", Decimal('10')))

    def test_snapshot_is_detached(self):
        """Test a snapshot does not change with later pushes"""
        ledger = Ledger()
        ledger.push(deposit('1'))
        snapshot = ledger.snapshot()
        ledger.push(deposit('2'))

        assert len(snapshot) == 1
        assert len(ledger) == 2
