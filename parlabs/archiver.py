"""Compress files with gzip and bundle the results into a tar archive."""

from __future__ import annotations

import gzip
import os
import re
import shutil
import sys
import tarfile
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path

USAGE = (
    "Usage: make-archive -S ARCHIVE-NAME [INPUT-FILES]\n"
    "   Or: make-archive -P NUM-PROCESSES ARCHIVE-NAME [INPUT-FILES]"
)

_INTEGER = re.compile(r"\s*[+-]?[0-9]+")


def _compress_file(path: str) -> str | None:
    """Write path.gz next to path, keeping the original; return the new name."""
    target = f"{path}.gz"
    try:
        with open(path, "rb") as source, gzip.open(target, "wb") as destination:
            shutil.copyfileobj(source, destination)
    except OSError:
        Path(target).unlink(missing_ok=True)
        print(f"Failed to compress {path}", file=sys.stderr, flush=True)
        return None
    print(f"{target} created", flush=True)
    return target


def _elapsed_ms(start: float, end: float) -> int:
    return int((end - start) * 1000)


class ArchiveCreator:
    """Gzips each input file and stores the .gz files in one tar archive.

    Paths are taken relative to base_dir, which defaults to the current
    directory. Files whose compression fails are reported and left out.
    """

    def __init__(
        self,
        archive_name: str,
        input_files: Iterable[str],
        base_dir: str | Path | None = None,
    ) -> None:
        base = os.path.abspath(base_dir if base_dir is not None else os.getcwd())
        self.archive = Path(os.path.normpath(f"{base}/{archive_name}"))
        files = []
        for name in input_files:
            if name.startswith("~"):
                raise ValueError(
                    "HOME-absolute paths are not supported, use relative paths instead."
                )
            files.append(Path(os.path.normpath(f"{base}/{name}")))
        self.input_files = tuple(files)

    def run_sequential(self) -> Path:
        """Compress the files one after another, then archive them."""
        start = time.perf_counter()
        compressed = [_compress_file(str(path)) for path in self.input_files]
        return self._finish(start, compressed)

    def run_parallel(self, processes: int) -> Path:
        """Compress the files in up to `processes` worker processes, then archive them."""
        if processes < 1:
            raise ValueError("Number of processes must be positive")
        start = time.perf_counter()
        with ProcessPoolExecutor(max_workers=processes) as pool:
            compressed = list(pool.map(_compress_file, map(str, self.input_files)))
        return self._finish(start, compressed)

    def _finish(self, start: float, compressed: Sequence[str | None]) -> Path:
        compression_end = time.perf_counter()
        self._create_archive([name for name in compressed if name is not None])
        end = time.perf_counter()
        print(f"Compression time: {_elapsed_ms(start, compression_end)} ms")
        print(f"Total execution time: {_elapsed_ms(start, end)} ms")
        return self.archive

    def _create_archive(self, compressed: Sequence[str]) -> None:
        if not compressed:
            print("Failed to create archive", file=sys.stderr)
            raise RuntimeError("Failed to create archive: nothing to archive")
        try:
            with tarfile.open(self.archive, "w") as tar:
                for name in compressed:
                    tar.add(name, arcname=name.lstrip("/"))
        except (OSError, tarfile.TarError) as error:
            print("Failed to create archive", file=sys.stderr)
            raise RuntimeError("Failed to create archive") from error

        print(f"Archive saved to {self.archive}")
        for name in compressed:
            Path(name).unlink(missing_ok=True)


@dataclass(frozen=True)
class Args:
    """Parsed command-line arguments."""

    parallel: bool
    archive_name: str
    input_files: tuple[str, ...]
    processes: int = 0


def _parse_int(text: str) -> int:
    match = _INTEGER.match(text)
    if match is None:
        raise ValueError(f"Invalid number: {text}")
    return int(match.group())


def parse_args(argv: Sequence[str]) -> Args:
    """Parse '-S ARCHIVE [FILES]' or '-P NUM ARCHIVE [FILES]'."""
    if len(argv) < 2:
        raise ValueError(USAGE)
    flag = argv[0]
    if flag == "-P":
        if len(argv) < 3:
            raise ValueError("Invalid arguments for -P mode.")
        return Args(
            parallel=True,
            processes=_parse_int(argv[1]),
            archive_name=argv[2],
            input_files=tuple(argv[3:]),
        )
    if flag == "-S":
        return Args(parallel=False, archive_name=argv[1], input_files=tuple(argv[2:]))
    raise ValueError("Invalid flag. Use -S for sequential mode or -P for parallel mode.")


def main(argv: Sequence[str] | None = None) -> int:
    """Create an archive from the files named on the command line."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
        creator = ArchiveCreator(args.archive_name, args.input_files)
        if args.parallel:
            creator.run_parallel(args.processes)
        else:
            creator.run_sequential()
        return 0
    except Exception as error:
        print(error, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())