"""A bounded warehouse shared by supplier, client and auditor threads."""

from __future__ import annotations

import random
import re
import signal
import sys
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

WAREHOUSE_CAPACITY = 100
_POLL_SECONDS = 0.05
_INTEGER = re.compile(r"\s*[+-]?[0-9]+")

USAGE = "Usage: parlabs-warehouse NUM_SUPPLIERS NUM_CLIENTS NUM_AUDITORS"


class Tally:
    """A thread-safe running total."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, amount: int) -> None:
        """Add amount to the total."""
        with self._lock:
            self._value += amount

    @property
    def value(self) -> int:
        """The current total."""
        with self._lock:
            return self._value


class Warehouse:
    """Stock bounded by a capacity; adding and taking wait until possible.

    Waiting ends early once the stop event is set, and the operation then
    reports failure instead of changing the stock.
    """

    def __init__(self, capacity: int, stop: threading.Event) -> None:
        self._capacity = capacity
        self._stock = 0
        self._condition = threading.Condition()
        self._stop = stop

    @property
    def capacity(self) -> int:
        return self._capacity

    def add_goods(self, amount: int) -> bool:
        """Add goods once they fit; return False if stopped."""
        with self._condition:
            if not self._wait_until(lambda: self._stock + amount <= self._capacity):
                return False
            self._stock += amount
            self._condition.notify_all()
            return True

    def take_goods(self, amount: int) -> bool:
        """Take goods once enough are in stock; return False if stopped."""
        with self._condition:
            if not self._wait_until(lambda: self._stock >= amount):
                return False
            self._stock -= amount
            self._condition.notify_all()
            return True

    @property
    def stock(self) -> int:
        """Goods currently in stock."""
        with self._condition:
            return self._stock

    def _wait_until(self, ready: Callable[[], bool]) -> bool:
        while not ready():
            if self._stop.is_set():
                return False
            self._condition.wait(_POLL_SECONDS)
        return not self._stop.is_set()


def supplier(warehouse: Warehouse, total_supplied: Tally, stop: threading.Event) -> None:
    """Add random batches of 1 to 10 goods until stopped."""
    while not stop.is_set():
        amount = random.randint(1, 10)
        if warehouse.add_goods(amount):
            total_supplied.add(amount)


def client(warehouse: Warehouse, total_purchased: Tally, stop: threading.Event) -> None:
    """Take random batches of 1 to 10 goods until stopped."""
    while not stop.is_set():
        amount = random.randint(1, 10)
        if warehouse.take_goods(amount):
            total_purchased.add(amount)


def auditor(warehouse: Warehouse, stop: threading.Event) -> None:
    """Keep reading the stock until stopped."""
    while not stop.is_set():
        _ = warehouse.stock


@dataclass(frozen=True)
class Args:
    """Parsed command-line arguments."""

    num_suppliers: int
    num_clients: int
    num_auditors: int


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
    """Parse 'NUM_SUPPLIERS NUM_CLIENTS NUM_AUDITORS'."""
    if len(argv) != 3:
        raise ValueError(USAGE)
    try:
        numbers = [_parse_int(text, 32) for text in argv]
    except OverflowError:
        raise ValueError("Arguments are out of range.") from None
    except ValueError:
        raise ValueError("Arguments must be valid numbers.") from None
    return Args(*numbers)


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


def main(argv: Sequence[str] | None = None) -> int:
    """Run the warehouse threads until SIGINT or SIGTERM and print totals."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
        stop = threading.Event()
        warehouse = Warehouse(WAREHOUSE_CAPACITY, stop)
        total_supplied = Tally()
        total_purchased = Tally()

        with _stop_on_signals(stop.set):
            threads = [
                *(
                    threading.Thread(target=supplier, args=(warehouse, total_supplied, stop))
                    for _ in range(args.num_suppliers)
                ),
                *(
                    threading.Thread(target=client, args=(warehouse, total_purchased, stop))
                    for _ in range(args.num_clients)
                ),
                *(
                    threading.Thread(target=auditor, args=(warehouse, stop))
                    for _ in range(args.num_auditors)
                ),
            ]
            for thread in threads:
                thread.daemon = True
                thread.start()
            for thread in threads:
                while thread.is_alive():
                    thread.join(_POLL_SECONDS)

        print(f"Total supplied: {total_supplied.value}")
        print(f"Total purchased: {total_purchased.value}")
        print(f"Remaining stock: {warehouse.stock}")
        return 0
    except Exception as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())