"""Conway's Game of Life on a wrapping grid, stored as text files."""

from __future__ import annotations

import random
import sys
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

ALIVE = "#"
DEAD = " "
CELL_PIXELS = 10
FRAME_DELAY_SECONDS = 0.05

USAGE = (
    "Usage: game-life generate OUTPUT_FILE_NAME WIDTH HEIGHT PROBABILITY\n"
    "   Or: game-life step INPUT_FILE_NAME NUM_THREADS <OUTPUT_FILE_NAME>\n"
    "   Or: game-life visualize INPUT_FILE_NAME NUM_THREADS"
)

Field = list[str]


def generate_field(
    width: int, height: int, probability: float, rng: random.Random | None = None
) -> Field:
    """Return a random field where each cell is alive with the given probability."""
    if not 0.0 <= probability <= 1.0:
        raise ValueError("Probability must be between 0 and 1")
    if width < 0 or height < 0:
        raise ValueError("Field size cannot be negative")
    rng = rng or random.Random()
    return [
        "".join(ALIVE if rng.random() < probability else DEAD for _ in range(width))
        for _ in range(height)
    ]


def read_field(path: str | Path) -> Field:
    """Read a field: a 'WIDTH HEIGHT' line followed by one line per row."""
    try:
        text = Path(path).read_text()
    except OSError as error:
        raise RuntimeError(f"Error: Unable to open file {path}") from error

    lines = text.splitlines()
    header = lines[0].split() if lines else []
    try:
        width, height = int(header[0]), int(header[1])
    except (IndexError, ValueError):
        raise ValueError(f"Invalid field header in {path}") from None
    if width < 0 or height < 0:
        raise ValueError(f"Invalid field size in {path}")

    rows = lines[1 : 1 + height]
    rows += [""] * (height - len(rows))
    return [row[:width].ljust(width, DEAD) for row in rows]


def write_field(path: str | Path, field: Sequence[str]) -> None:
    """Write a field in the format read_field reads."""
    width = len(field[0]) if field else 0
    try:
        with open(path, "w") as out:
            out.write(f"{width} {len(field)}\n")
            for row in field:
                out.write(f"{row}\n")
    except OSError as error:
        raise RuntimeError(f"Error: Unable to open file {path}") from error


def count_live_neighbors(field: Sequence[str], y: int, x: int) -> int:
    """Count live cells among the eight neighbours, wrapping at the edges."""
    height = len(field)
    width = len(field[0])
    return sum(
        field[(y + dy) % height][(x + dx) % width] == ALIVE
        for dy in (-1, 0, 1)
        for dx in (-1, 0, 1)
        if dy or dx
    )


def _next_cell(field: Sequence[str], y: int, x: int) -> str:
    neighbors = count_live_neighbors(field, y, x)
    alive = field[y][x] == ALIVE
    return ALIVE if neighbors == 3 or (alive and neighbors == 2) else DEAD


def _compute_rows(field: Sequence[str], start: int, end: int) -> Field:
    width = len(field[0]) if field else 0
    return [
        "".join(_next_cell(field, y, x) for x in range(width)) for y in range(start, end)
    ]


def next_generation(field: Sequence[str], threads: int) -> Field:
    """Return the next generation, computing bands of rows in parallel."""
    if threads < 1:
        raise ValueError("Number of threads must be positive")
    height = len(field)
    rows_per_thread = height // threads
    bounds = [
        (i * rows_per_thread, height if i == threads - 1 else (i + 1) * rows_per_thread)
        for i in range(threads)
    ]
    with ThreadPoolExecutor(max_workers=threads) as pool:
        chunks = list(pool.map(lambda band: _compute_rows(field, *band), bounds))
    return [row for chunk in chunks for row in chunk]


def is_alive(field: Sequence[str], x: int, y: int) -> bool:
    """Return whether the cell at (x, y) is alive; cells off the field are dead."""
    return 0 <= y < len(field) and 0 <= x < len(field[y]) and field[y][x] == ALIVE


def do_step(input_path: str | Path, threads: int, output_path: str | Path | None = None) -> Field:
    """Advance the field stored in input_path by one generation and save it."""
    field = next_generation(read_field(input_path), threads)
    write_field(output_path or input_path, field)
    return field


def _visualize(field: Field, threads: int) -> None:
    import pygame

    height = len(field)
    width = len(field[0]) if field else 0
    pygame.init()
    try:
        screen = pygame.display.set_mode(
            (max(1, width * CELL_PIXELS), max(1, height * CELL_PIXELS))
        )
        pygame.display.set_caption("Game of Life")
        while True:
            if any(event.type == pygame.QUIT for event in pygame.event.get()):
                break
            start = time.perf_counter()
            field = next_generation(field, threads)
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            pygame.display.set_caption(f"{elapsed_ms:.6f}ms")

            screen.fill((255, 255, 255))
            for y, row in enumerate(field):
                for x, cell in enumerate(row):
                    if cell == ALIVE:
                        pygame.draw.rect(
                            screen,
                            (0, 0, 0),
                            (x * CELL_PIXELS, y * CELL_PIXELS, CELL_PIXELS, CELL_PIXELS),
                        )
            pygame.display.flip()
            time.sleep(FRAME_DELAY_SECONDS)
    finally:
        pygame.quit()


@dataclass(frozen=True)
class _Args:
    mode: str
    input_path: str = ""
    output_path: str = ""
    threads: int = 0
    width: int = 10
    height: int = 10
    probability: float = 1.0


def _parse_args(argv: Sequence[str]) -> _Args:
    if len(argv) < 3:
        raise ValueError(USAGE)
    mode = argv[0]
    if mode == "generate":
        if len(argv) != 5:
            raise ValueError('Invalid arguments for "generate" mode.')
        width, height = int(argv[2]), int(argv[3])
        if width < 0 or height < 0:
            raise ValueError("Field size cannot be negative")
        return _Args(
            mode=mode,
            output_path=argv[1],
            width=width,
            height=height,
            probability=float(argv[4]),
        )
    if mode in ("step", "visualize"):
        return _Args(
            mode=mode,
            input_path=argv[1],
            threads=int(argv[2]),
            output_path=argv[3] if len(argv) > 3 else argv[1],
        )
    raise ValueError(
        'Invalid mode. Use "generate" for generate game or "step" for next step of game.'
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Generate a field, advance it one step, or show it evolving."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _parse_args(argv)
        if args.mode == "generate":
            write_field(
                args.output_path, generate_field(args.width, args.height, args.probability)
            )
        elif args.mode == "step":
            do_step(args.input_path, args.threads, args.output_path)
        else:
            _visualize(read_field(args.input_path), args.threads)
        return 0
    except Exception as error:
        print(error, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())