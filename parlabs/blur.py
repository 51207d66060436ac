"""Separable Gaussian blur of RGBA images, computed by bands of rows in threads."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from PIL import Image

CHANNELS = 4
GAMMA = 1.5
WINDOW_SIZE = (800, 600)

USAGE = "Usage: INPUT_FILE OUTPUT_FILE RADIUS NUM_THREADS [--visualize]"


def create_gaussian_kernel(radius: int) -> list[float]:
    """Return 2*radius+1 normalised Gaussian weights with sigma = radius / 2."""
    if radius <= 0:
        raise ValueError("Radius must be positive")
    sigma = radius / 2.0
    weights = [math.exp(-(i * i) / (2 * sigma * sigma)) for i in range(-radius, radius + 1)]
    total = sum(weights)
    return [weight / total for weight in weights]


def _check_size(pixels: bytes | bytearray, width: int, height: int) -> None:
    if len(pixels) != width * height * CHANNELS:
        raise ValueError("Pixel data does not match the image size")


def transpose(pixels: bytes | bytearray, width: int, height: int) -> bytearray:
    """Swap rows and columns of an RGBA image; the result is height wide."""
    _check_size(pixels, width, height)
    data = bytes(pixels)
    out = bytearray(len(data))
    row_bytes = width * CHANNELS
    out_stride = height * CHANNELS
    for y in range(height):
        row = data[y * row_bytes : (y + 1) * row_bytes]
        for channel in range(CHANNELS):
            out[y * CHANNELS + channel :: out_stride] = row[channel::CHANNELS]
    return out


def gamma_correct(pixels: bytes | bytearray, gamma: float) -> bytearray:
    """Apply gamma to the colour channels of RGBA pixels; alpha is left alone."""
    if gamma <= 0:
        raise ValueError("Gamma must be positive")
    if len(pixels) % CHANNELS:
        raise ValueError("Pixel data is not a whole number of RGBA pixels")
    table = bytes(int((i / 255.0) ** gamma * 255.0) for i in range(256))
    data = bytes(pixels)
    out = bytearray(data)
    for channel in range(3):
        out[channel::CHANNELS] = data[channel::CHANNELS].translate(table)
    return out


def _row_bounds(height: int, threads: int) -> list[tuple[int, int]]:
    rows_per_thread, remaining = divmod(height, threads)
    bounds = []
    start = 0
    for i in range(threads):
        end = start + rows_per_thread + (1 if i < remaining else 0)
        bounds.append((start, end))
        start = end
    return bounds


def _blur_columns(
    pixels: bytes, width: int, height: int, kernel: Sequence[float], threads: int
) -> bytearray:
    """Convolve each column with the kernel; samples outside the image are skipped."""
    stride = width * CHANNELS
    rows = [pixels[y * stride : (y + 1) * stride] for y in range(height)]
    out = bytearray(len(pixels))
    reach = len(kernel) // 2

    def process(band: tuple[int, int]) -> None:
        start, end = band
        for y in range(start, end):
            acc = [0.0] * stride
            for offset, weight in enumerate(kernel, start=-reach):
                ny = y + offset
                if 0 <= ny < height:
                    acc = [total + value * weight for total, value in zip(acc, rows[ny])]
            out[y * stride : (y + 1) * stride] = bytes(
                min(255, max(0, int(total))) for total in acc
            )

    with ThreadPoolExecutor(max_workers=threads) as pool:
        list(pool.map(process, _row_bounds(height, threads)))
    return out


def blur_pixels(
    pixels: bytes | bytearray, width: int, height: int, radius: int, threads: int
) -> bytearray:
    """Blur RGBA pixels vertically then horizontally, then apply gamma 1.5."""
    if radius <= 0 or width <= 0 or height <= 0:
        raise ValueError("Invalid radius or image size")
    if threads < 1:
        raise ValueError("Number of threads must be positive")
    _check_size(pixels, width, height)

    kernel = create_gaussian_kernel(radius)
    vertical = _blur_columns(bytes(pixels), width, height, kernel, threads)
    turned = transpose(vertical, width, height)
    horizontal = _blur_columns(bytes(turned), height, width, kernel, threads)
    restored = transpose(horizontal, height, width)
    return gamma_correct(restored, GAMMA)


def _save(image: Image.Image, path: str | Path) -> None:
    try:
        image.save(path)
    except (OSError, ValueError):
        try:
            image.convert("RGB").save(path)
        except (OSError, ValueError) as error:
            raise RuntimeError("Failed to save image!") from error


def blur_file(
    input_path: str | Path, output_path: str | Path, radius: int, threads: int
) -> Image.Image:
    """Blur the image at input_path and save it; radius 0 copies it unchanged."""
    if radius < 0:
        raise ValueError("Invalid radius")
    try:
        with Image.open(input_path) as source:
            image = source.convert("RGBA")
    except OSError as error:
        raise RuntimeError("Failed to load image!") from error

    if radius > 0:
        data = blur_pixels(image.tobytes(), image.width, image.height, radius, threads)
        image = Image.frombytes("RGBA", image.size, bytes(data))
    _save(image, output_path)
    return image


def _show(image: Image.Image) -> None:
    import pygame

    pygame.init()
    try:
        screen = pygame.display.set_mode(WINDOW_SIZE)
        pygame.display.set_caption("Gaussian Blur")
        surface = pygame.image.frombuffer(image.tobytes(), image.size, "RGBA")
        scale = min(WINDOW_SIZE[0] / image.width, WINDOW_SIZE[1] / image.height)
        size = (max(1, int(image.width * scale)), max(1, int(image.height * scale)))
        surface = pygame.transform.scale(surface, size)
        position = ((WINDOW_SIZE[0] - size[0]) // 2, (WINDOW_SIZE[1] - size[1]) // 2)
        clock = pygame.time.Clock()
        while not any(event.type == pygame.QUIT for event in pygame.event.get()):
            screen.fill((0, 0, 0))
            screen.blit(surface, position)
            pygame.display.flip()
            clock.tick(30)
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Blur INPUT_FILE into OUTPUT_FILE; with --visualize also show the result."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        if len(argv) < 4:
            raise ValueError(USAGE)
        radius = int(argv[2])
        threads = int(argv[3])
        if threads <= 0:
            raise ValueError(USAGE)
        visualize = "--visualize" in argv[4:]

        image = blur_file(argv[0], argv[1], radius, threads)
        if visualize:
            _show(image)
        return 0
    except Exception as error:
        print(error, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())