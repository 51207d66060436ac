import math
import random

import pytest
from PIL import Image

from parlabs.blur import (
    blur_file,
    blur_pixels,
    create_gaussian_kernel,
    gamma_correct,
    main,
    transpose,
)


def _uniform(width, height, rgba):
    return bytes(rgba) * (width * height)


def _random_pixels(width, height, seed):
    rng = random.Random(seed)
    return bytes(rng.randrange(256) for _ in range(width * height * 4))


@pytest.mark.parametrize("radius", [1, 2, 5])
def test_kernel_shape(radius):
    kernel = create_gaussian_kernel(radius)
    assert len(kernel) == 2 * radius + 1
    assert math.isclose(sum(kernel), 1.0)
    assert kernel == kernel[::-1]
    assert max(kernel) == kernel[radius]


def test_kernel_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        create_gaussian_kernel(0)


def test_transpose_twice_is_identity():
    pixels = _random_pixels(5, 3, 1)
    turned = transpose(pixels, 5, 3)
    assert transpose(turned, 3, 5) == pixels


def test_transpose_moves_pixels():
    pixels = bytes(range(2 * 3 * 4))
    turned = transpose(pixels, 3, 2)
    # pixel at (x=2, y=1) becomes pixel at (x=1, y=2) in a 2-wide image
    assert turned[(2 * 2 + 1) * 4 : (2 * 2 + 1) * 4 + 4] == pixels[(1 * 3 + 2) * 4 : (1 * 3 + 2) * 4 + 4]


def test_transpose_rejects_wrong_size():
    with pytest.raises(ValueError):
        transpose(bytes(10), 2, 2)


def test_gamma_endpoints_and_alpha():
    pixels = bytes([0, 255, 128, 77])
    corrected = gamma_correct(pixels, 1.5)
    assert corrected[0] == 0
    assert corrected[1] == 255
    assert corrected[3] == 77
    assert corrected[2] < 128


def test_gamma_is_monotonic():
    pixels = b"".join(bytes([i, i, i, 255]) for i in range(256))
    reds = list(gamma_correct(pixels, 1.5)[0::4])
    assert reds == sorted(reds)


def test_gamma_rejects_bad_input():
    with pytest.raises(ValueError):
        gamma_correct(bytes(3), 1.5)
    with pytest.raises(ValueError):
        gamma_correct(bytes(4), 0)


def test_blur_black_stays_black():
    pixels = bytes(6 * 4 * 4)
    assert blur_pixels(pixels, 6, 4, 2, 2) == pixels


def test_blur_uniform_center_and_darker_edges():
    pixels = _uniform(5, 5, (200, 200, 200, 255))
    result = blur_pixels(pixels, 5, 5, 1, 1)
    assert len(result) == len(pixels)
    center = (2 * 5 + 2) * 4
    expected = {gamma_correct(bytes([v, v, v, 255]), 1.5)[0] for v in (199, 200)}
    assert result[center] in expected
    assert result[0] <= result[center]


@pytest.mark.parametrize("threads", [2, 3, 8])
def test_thread_count_does_not_change_result(threads):
    pixels = _random_pixels(7, 5, 2)
    assert blur_pixels(pixels, 7, 5, 2, threads) == blur_pixels(pixels, 7, 5, 2, 1)


def test_blur_rejects_invalid_arguments():
    pixels = _uniform(2, 2, (1, 2, 3, 4))
    with pytest.raises(ValueError):
        blur_pixels(pixels, 2, 2, 0, 1)
    with pytest.raises(ValueError):
        blur_pixels(pixels, 2, 2, 1, 0)
    with pytest.raises(ValueError):
        blur_pixels(pixels, 3, 2, 1, 1)


def test_blur_file_radius_zero_copies(tmp_path):
    source = tmp_path / "in.png"
    target = tmp_path / "out.png"
    original = Image.frombytes("RGBA", (4, 3), _random_pixels(4, 3, 3))
    original.save(source)
    blur_file(source, target, 0, 1)
    with Image.open(target) as saved:
        assert saved.convert("RGBA").tobytes() == original.tobytes()


def test_blur_file_blurs(tmp_path):
    source = tmp_path / "in.png"
    target = tmp_path / "out.png"
    pixels = _random_pixels(6, 5, 4)
    Image.frombytes("RGBA", (6, 5), pixels).save(source)
    blur_file(source, target, 2, 3)
    with Image.open(target) as saved:
        assert saved.size == (6, 5)
        assert saved.convert("RGBA").tobytes() == bytes(blur_pixels(pixels, 6, 5, 2, 1))


def test_blur_file_errors(tmp_path):
    with pytest.raises(RuntimeError):
        blur_file(tmp_path / "absent.png", tmp_path / "out.png", 1, 1)
    source = tmp_path / "in.png"
    Image.new("RGBA", (2, 2)).save(source)
    with pytest.raises(ValueError):
        blur_file(source, tmp_path / "out.png", -1, 1)


def test_main(tmp_path):
    source = tmp_path / "in.png"
    target = tmp_path / "out.png"
    Image.new("RGBA", (3, 3), (10, 20, 30, 255)).save(source)
    assert main([str(source), str(target), "1", "2"]) == 0
    assert target.exists()
    assert main([str(source), str(target), "1"]) == 1
    assert main([str(source), str(target), "1", "0"]) == 1