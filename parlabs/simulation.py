"""Bank simulation: citizens move money around until told to stop."""

from __future__ import annotations

import re
import signal
import sys
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from parlabs.bank import AccountId, Bank, Money
from parlabs.citizens import Apu, BartLisa, Burns, Citizen, Homer, Marge, Nelson

_POLL_SECONDS = 0.1
_INTEGER = re.compile(r"\s*[+-]?[0-9]+")

USAGE = "Usage: parlabs-bank <initial_cash> <parallel|sequential> [classic|extended]"


class Variant(Enum):
    """Which cast of citizens takes part in the simulation."""

    CLASSIC = "classic"
    EXTENDED = "extended"


class _Accounts(NamedTuple):
    homer: AccountId
    marge: AccountId
    apu: AccountId
    burns: AccountId


@dataclass(frozen=True)
class Args:
    """Parsed command-line arguments."""

    initial_cash: Money
    parallel: bool
    variant: Variant = Variant.CLASSIC


@contextmanager
def _stop_on_signals(callback: Callable[[], None]) -> Iterator[None]:
    """Call callback on SIGINT or SIGTERM while the block runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum: int, frame: object) -> None:
        callback()

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old in previous.items():
            if old is not None:
                signal.signal(sig, old)


class Simulation:
    """Runs the citizens against one bank, sequentially or one thread each."""

    def __init__(
        self, parallel: bool, initial_cash: Money, variant: Variant = Variant.CLASSIC
    ) -> None:
        self.bank = Bank(initial_cash)
        self.parallel = parallel
        self.variant = variant
        self._stop_event = threading.Event()
        self._errors: list[Exception] = []
        self._errors_lock = threading.Lock()

    def stop(self) -> None:
        """Ask the running simulation to finish after the current actions."""
        self._stop_event.set()

    def run(self) -> None:
        """Open and fund the accounts, then run the citizens until stopped."""
        with _stop_on_signals(self.stop):
            accounts = self._initialize_accounts()
            citizens = self._create_citizens(accounts)
            if self.parallel:
                self._run_parallel(citizens)
            else:
                self._run_sequential(citizens)

    def _initialize_accounts(self) -> _Accounts:
        accounts = _Accounts(
            homer=self.bank.open_account(),
            marge=self.bank.open_account(),
            apu=self.bank.open_account(),
            burns=self.bank.open_account(),
        )
        share = self.bank.cash // 4
        for account in accounts:
            self.bank.deposit_money(account, share)
        return accounts

    def _create_citizens(self, accounts: _Accounts) -> list[Citizen]:
        extended = self.variant is Variant.EXTENDED
        apu = Apu(self.bank, accounts.apu, accounts.burns)
        bart_lisa = BartLisa(apu, keep_cash=extended)
        homer = Homer(self.bank, accounts.homer, accounts.marge, accounts.burns, bart_lisa)
        marge = Marge(self.bank, accounts.marge, accounts.apu)
        burns = Burns(self.bank, accounts.burns, accounts.homer)
        citizens: list[Citizen] = [homer, marge, bart_lisa, apu, burns]
        if extended:
            citizens.append(Nelson(bart_lisa, apu))
        return citizens

    def _run_sequential(self, citizens: Sequence[Citizen]) -> None:
        while not self._stop_event.is_set():
            for citizen in citizens:
                citizen.run()

    def _run_parallel(self, citizens: Sequence[Citizen]) -> None:
        threads = [
            threading.Thread(target=self._run_actor, args=(citizen,), daemon=True)
            for citizen in citizens
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            while thread.is_alive():
                thread.join(_POLL_SECONDS)
        if self._errors:
            raise self._errors[0]

    def _run_actor(self, citizen: Citizen) -> None:
        try:
            while not self._stop_event.is_set():
                citizen.run()
        except Exception as error:
            with self._errors_lock:
                self._errors.append(error)
            self.stop()


def _parse_int(text: str, bits: int) -> int:
    match = _INTEGER.match(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    value = int(match.group())
    bound = 1 << (bits - 1)
    if not -bound <= value < bound:
        raise OverflowError(f"integer out of range: {text!r}")
    return value


def parse_args(argv: Sequence[str]) -> Args:
    """Parse '<initial_cash> <parallel|sequential> [classic|extended]'."""
    if len(argv) < 2:
        raise ValueError(USAGE)
    try:
        initial_cash = _parse_int(argv[0], 64)
    except OverflowError:
        raise ValueError("Initial cash is out of range.") from None
    except ValueError:
        raise ValueError("Initial cash must be a valid number.") from None

    mode = argv[1]
    if mode == "parallel":
        parallel = True
    elif mode == "sequential":
        parallel = False
    else:
        raise ValueError("Mode must be 'parallel' or 'sequential'.")

    variant = Variant.CLASSIC
    if len(argv) > 2:
        try:
            variant = Variant(argv[2])
        except ValueError:
            raise ValueError("Variant must be 'classic' or 'extended'.") from None
    return Args(initial_cash=initial_cash, parallel=parallel, variant=variant)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulation until SIGINT or SIGTERM and print the bank's state."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
        simulation = Simulation(args.parallel, args.initial_cash, args.variant)
        simulation.run()

        bank = simulation.bank
        print(f"Total bank operations: {bank.operations_count}")
        print(f"Remaining cash: {bank.cash}")
        if args.variant is Variant.EXTENDED:
            print(f"Remaining money on accounts: {bank.accounts_balance}")
            if args.initial_cash != bank.accounts_balance + bank.cash:
                print("Not enough", file=sys.stderr)
            else:
                print("Ravno")
        else:
            print(f"Remaining cash: {bank.accounts_balance}")
        return 0
    except Exception as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())