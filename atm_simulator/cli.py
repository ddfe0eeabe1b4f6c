"""
Interactive ATM Shell

Thin text front end over the account: PIN entry with limited retries and
a numbered menu. Prompts and messages go through injectable input/output
callables so sessions can be scripted.
"""

import argparse
import sys
from typing import Callable, List, Optional

from .accounts import Account, DEFAULT_PIN, validate_pin
from .config import AtmConfig, get_config
from .currency import decimal_from_string, format_amount, to_amount
from .errors import (
    InsufficientFunds, InvalidAmount, InvalidPin, PinConfirmationMismatch, PinMismatch
)
from .logging_config import get_logger, log_action, setup_logging
from .storage import FileAccountStore

logger = get_logger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

MENU = (
    "\n--- ATM Menu ---\n"
    "1. Check Balance\n"
    "2. Deposit\n"
    "3. Withdraw\n"
    "4. Mini Statement\n"
    "5. Change PIN\n"
    "6. Exit"
)


class EndOfInput(Exception):
    """Raised when the input stream is exhausted"""
    pass


def bootstrap(store: FileAccountStore, config: AtmConfig,
              output_fn: OutputFn = print) -> Account:
    """
    Load the saved account, or create and save a default one
    """
    account = store.load()
    if account is not None:
        return account

    pin = config.default_pin
    try:
        validate_pin(pin, config.pin_max_length)
    except InvalidPin as e:
        log_action(
            logger, "warning", f"Configured default PIN is unusable ({e}), using built-in default",
            action="initialize_default", resource="config"
        )
        pin = DEFAULT_PIN

    account = Account.default(
        balance=config.default_balance,
        pin=pin,
        capacity=config.ledger_capacity,
        store=store,
        pin_max_length=config.pin_max_length
    )
    if not account.persist():
        output_fn("Warning: Could not save data.")
    return account


class AtmShell:
    """Menu-driven session over a single account"""

    def __init__(self, account: Account, input_fn: InputFn = input,
                 output_fn: OutputFn = print):
        self.account = account
        self._input = input_fn
        self._output = output_fn
        self._actions = {
            1: self.check_balance,
            2: self.deposit,
            3: self.withdraw,
            4: self.mini_statement,
            5: self.change_pin,
        }

    def _read_token(self, prompt: str) -> str:
        """First token of the next non-blank line"""
        while True:
            try:
                line = self._input(prompt)
            except EOFError:
                raise EndOfInput()
            tokens = line.split()
            if tokens:
                return tokens[0]

    def _warn_if_unsaved(self, persisted: bool) -> None:
        if not persisted:
            self._output("Warning: Could not save data.")

    def authenticate(self, attempts: int = 3) -> bool:
        """Give the user a limited number of PIN attempts"""
        remaining = attempts
        while remaining > 0:
            remaining -= 1
            try:
                candidate = self._read_token("Enter PIN: ")
            except EndOfInput:
                return False
            if self.account.verify_pin(candidate):
                log_action(logger, "info", "PIN verified", action="verify_pin", resource="session")
                return True
            self._output(f"Incorrect PIN. {remaining} attempt(s) left.")

        log_action(
            logger, "warning", "PIN attempts exhausted",
            action="verify_pin", resource="session", extra={"attempts": attempts}
        )
        return False

    def check_balance(self) -> None:
        self._output(f"Your current balance: {format_amount(self.account.balance_snapshot())}")

    def _read_amount(self, prompt: str):
        raw = self._read_token(prompt)
        try:
            return to_amount(decimal_from_string(raw))
        except ValueError:
            return None

    def deposit(self) -> None:
        amount = self._read_amount("Enter amount to deposit: ")
        if amount is None:
            self._output("Invalid amount.")
            return
        try:
            result = self.account.deposit(amount)
        except InvalidAmount:
            self._output("Invalid amount.")
            return
        self._output(f"Deposited {format_amount(result.record.amount)} successfully.")
        self._warn_if_unsaved(result.persisted)

    def withdraw(self) -> None:
        amount = self._read_amount("Enter amount to withdraw: ")
        if amount is None:
            self._output("Invalid amount.")
            return
        try:
            result = self.account.withdraw(amount)
        except InvalidAmount:
            self._output("Invalid amount.")
            return
        except InsufficientFunds:
            self._output(
                f"Insufficient funds. Current balance: {format_amount(self.account.balance)}"
            )
            return
        self._output(f"Withdrawn {format_amount(result.record.amount)} successfully.")
        self._warn_if_unsaved(result.persisted)

    def mini_statement(self) -> None:
        records = self.account.ledger_snapshot()
        self._output(f"----- Mini Statement (last {len(records)}) -----")
        for number, record in enumerate(records, start=1):
            self._output(f"{number}. {record.kind.value} : {format_amount(record.amount)}")
        if not records:
            self._output("No transactions yet.")

    def change_pin(self) -> None:
        old = self._read_token("Enter current PIN: ")
        if not self.account.verify_pin(old):
            self._output("PIN does not match.")
            return
        new = self._read_token("Enter new PIN: ")
        confirm = self._read_token("Confirm new PIN: ")
        try:
            result = self.account.change_pin(old, new, confirm)
        except PinMismatch:
            self._output("PIN does not match.")
            return
        except PinConfirmationMismatch:
            self._output("PINs do not match. Aborting.")
            return
        except InvalidPin as e:
            self._output(f"Invalid PIN: {e}.")
            return
        self._warn_if_unsaved(result.persisted)
        self._output("PIN changed successfully.")

    def run(self) -> None:
        """Menu loop; returns on Exit, bad menu input or end of input"""
        while True:
            self._output(MENU)
            try:
                raw = self._read_token("Enter choice: ")
            except EndOfInput:
                self._output("Invalid input. Exiting.")
                return

            try:
                choice = int(raw)
            except ValueError:
                self._output("Invalid input. Exiting.")
                return

            if choice == 6:
                self._output("Thank you. Goodbye.")
                return

            action = self._actions.get(choice)
            if action is None:
                self._output("Invalid choice. Try again.")
                continue

            try:
                action()
            except EndOfInput:
                self._output("Invalid input. Exiting.")
                return


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Simple ATM simulation with a persisted single account.")
    ap.add_argument("--data-file", default=None, help="Path of the account data file (overrides ATM_DATA_FILE).")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None, input_fn: InputFn = input,
         output_fn: OutputFn = print) -> int:
    """Run one ATM session"""
    args = parse_args(argv)
    config = get_config()
    setup_logging(level=config.log_level, log_format=config.log_format, log_file=config.log_file)

    store = FileAccountStore(
        args.data_file or config.data_file,
        capacity=config.ledger_capacity,
        pin_max_length=config.pin_max_length
    )
    account = bootstrap(store, config, output_fn)

    output_fn("Welcome to Simple ATM Simulation")
    shell = AtmShell(account, input_fn, output_fn)
    if not shell.authenticate(config.pin_attempts):
        output_fn("Too many incorrect attempts. Exiting.")
        return 0

    shell.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
