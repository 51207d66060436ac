"""Two threads held back by a semaphore until the main thread releases them."""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Sequence
from typing import TextIO

DEFAULT_DELAY_SECONDS = 5.0


def run_demo(delay: float = DEFAULT_DELAY_SECONDS, out: TextIO | None = None) -> None:
    """Start two waiting workers, announce the main thread, then release both."""
    stream = out if out is not None else sys.stdout
    semaphore = threading.Semaphore(0)
    write_lock = threading.Lock()

    def worker(name: str) -> None:
        semaphore.acquire()
        with write_lock:
            stream.write(f"{name} work!")

    workers = [
        threading.Thread(target=worker, args=(name,)) for name in ("thread1", "thread2")
    ]
    for thread in workers:
        thread.start()

    time.sleep(delay)
    with write_lock:
        stream.write("Main thread\n")
        stream.flush()

    semaphore.release()
    semaphore.release()
    for thread in workers:
        thread.join()
    stream.flush()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the demonstration with its five-second delay."""
    run_demo(DEFAULT_DELAY_SECONDS, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())