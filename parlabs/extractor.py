"""Unpack a tar archive of gzip files and decompress every file in it."""

from __future__ import annotations

import gzip
import os
import re
import shutil
import sys
import tarfile
import time
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path

USAGE = (
    "Usage:\n"
    "  extract-files -S ARCHIVE-NAME OUTPUT-FOLDER\n"
    "  extract-files -P NUM-PROCESSES ARCHIVE-NAME OUTPUT-FOLDER"
)

_INTEGER = re.compile(r"\s*[+-]?[0-9]+")
_EXTRACT_OPTIONS = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}


def _decompress_file(path: str) -> str:
    """Replace path (ending in .gz) by its decompressed contents; return the new name."""
    source = Path(path)
    target = source.with_suffix("")
    try:
        with gzip.open(source, "rb") as compressed, open(target, "wb") as plain:
            shutil.copyfileobj(compressed, plain)
    except (OSError, EOFError) as error:
        target.unlink(missing_ok=True)
        raise RuntimeError(f"Failed to decompress file: {path}") from error
    source.unlink()
    print(f"File decompressed: {path}", flush=True)
    return str(target)


def _strip(name: str, count: int) -> str | None:
    parts = [part for part in name.split("/") if part not in ("", ".")]
    if len(parts) <= count:
        return None
    remaining = parts[count:]
    if ".." in remaining:
        raise RuntimeError(f"Unsafe path in archive: {name}")
    return "/".join(remaining)


def _elapsed_ms(start: float, end: float) -> int:
    return int((end - start) * 1000)


def _resolve(path: str, base: str) -> Path:
    return Path(path) if path.startswith("/") else Path(f"{base}/{path}")


class Extractor:
    """Extracts an archive into a folder and gunzips the .gz files found there.

    As many leading path components are stripped from each member as the
    archive's own directory has, so files archived beside the archive land
    directly in the output folder.
    """

    def __init__(
        self,
        archive_name: str,
        output_folder: str,
        base_dir: str | Path | None = None,
    ) -> None:
        base = os.path.abspath(base_dir if base_dir is not None else os.getcwd())
        self.archive = _resolve(archive_name, base)
        self.output_folder = _resolve(output_folder, base)
        try:
            self.output_folder.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise RuntimeError(f"Failed to create directory: {self.output_folder}") from error
        if not self.archive.exists():
            raise FileNotFoundError(f"Archive not found: {self.archive}")

    def run_sequential(self) -> list[str]:
        """Extract, then decompress the files one after another."""
        start = time.perf_counter()
        self._extract()
        extraction_end = time.perf_counter()
        results = [_decompress_file(name) for name in self._find_compressed_files()]
        self._print_times(start, extraction_end, time.perf_counter())
        return results

    def run_parallel(self, processes: int) -> list[str]:
        """Extract, then decompress in up to `processes` worker processes."""
        if processes < 1:
            raise ValueError("Number of processes must be positive")
        start = time.perf_counter()
        self._extract()
        extraction_end = time.perf_counter()
        files = self._find_compressed_files()

        results: list[str] = []
        errors: list[Exception] = []
        with ProcessPoolExecutor(max_workers=processes) as pool:
            futures = [pool.submit(_decompress_file, name) for name in files]
            for future in futures:
                try:
                    results.append(future.result())
                except Exception as error:
                    print(error, file=sys.stderr)
                    errors.append(error)
        self._print_times(start, extraction_end, time.perf_counter())
        if errors:
            raise errors[0]
        return results

    def _extract(self) -> None:
        archive = str(self.archive)
        strip_count = archive.rpartition("/")[0].count("/")
        try:
            with tarfile.open(archive) as tar:
                members = []
                for member in tar.getmembers():
                    name = _strip(member.name, strip_count)
                    if name is None:
                        continue
                    if member.islnk():
                        link = _strip(member.linkname, strip_count)
                        if link is None:
                            continue
                        member.linkname = link
                    member.name = name
                    members.append(member)
                tar.extractall(self.output_folder, members=members, **_EXTRACT_OPTIONS)
        except (OSError, tarfile.TarError) as error:
            raise RuntimeError(f"Failed to extract archive: {archive}") from error
        print(f"Archive extracted successfully to: {self.output_folder}")

    def _find_compressed_files(self) -> list[str]:
        files = sorted(
            str(entry) for entry in self.output_folder.iterdir() if entry.suffix == ".gz"
        )
        if not files:
            raise RuntimeError(f"No compressed files found in: {self.output_folder}")
        return files

    @staticmethod
    def _print_times(start: float, extraction_end: float, end: float) -> None:
        print(f"Extraction time: {_elapsed_ms(start, extraction_end)} ms")
        print(f"Total execution time: {_elapsed_ms(start, end)} ms")


@dataclass(frozen=True)
class Args:
    """Parsed command-line arguments."""

    parallel: bool
    archive_name: str
    output_folder: str
    processes: int = 0


def parse_args(argv: Sequence[str]) -> Args:
    """Parse '-S ARCHIVE OUTPUT' or '-P NUM ARCHIVE OUTPUT'."""
    if len(argv) >= 3:
        mode = argv[0]
        if mode == "-S" and len(argv) == 3:
            return Args(parallel=False, archive_name=argv[1], output_folder=argv[2])
        if mode == "-P" and len(argv) == 4:
            match = _INTEGER.match(argv[1])
            if match is None:
                raise ValueError(f"Invalid number: {argv[1]}")
            return Args(
                parallel=True,
                processes=int(match.group()),
                archive_name=argv[2],
                output_folder=argv[3],
            )
    raise ValueError(USAGE)


def main(argv: Sequence[str] | None = None) -> int:
    """Extract the archive named on the command line into the output folder."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = parse_args(argv)
        extractor = Extractor(args.archive_name, args.output_folder)
        if args.parallel:
            extractor.run_parallel(args.processes)
        else:
            extractor.run_sequential()
        return 0
    except Exception as error:
        print(error, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())