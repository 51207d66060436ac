import random

import pytest

from parlabs.life import (
    count_live_neighbors,
    do_step,
    generate_field,
    is_alive,
    main,
    next_generation,
    read_field,
    write_field,
)

BLINKER = ["     ", "     ", " ### ", "     ", "     "]
BLOCK = ["    ", " ## ", " ## ", "    "]
GLIDER = [" #    ", "  #   ", "###   ", "      ", "      ", "      "]


def _transpose(field):
    return ["".join(column) for column in zip(*field)]


def _shift_down_right(field):
    rows = field[-1:] + field[:-1]
    return [row[-1:] + row[:-1] for row in rows]


def test_block_is_still_life():
    assert next_generation(BLOCK, 1) == BLOCK


def test_blinker_turns_vertical_and_back():
    once = next_generation(BLINKER, 2)
    assert once == _transpose(BLINKER)
    assert next_generation(once, 2) == BLINKER


def test_glider_moves_diagonally_on_torus():
    field = GLIDER
    for _ in range(4):
        field = next_generation(field, 3)
    assert field == _shift_down_right(GLIDER)


@pytest.mark.parametrize("threads", [2, 3, 7, 20])
def test_thread_count_does_not_change_result(threads):
    field = generate_field(13, 11, 0.4, random.Random(5))
    assert next_generation(field, threads) == next_generation(field, 1)


def test_zero_threads_rejected():
    with pytest.raises(ValueError):
        next_generation(BLOCK, 0)


def test_count_live_neighbors_wraps():
    full = ["###"] * 3
    assert count_live_neighbors(full, 0, 0) == 8
    assert count_live_neighbors(["   "] * 3, 1, 1) == 0
    assert count_live_neighbors(BLINKER, 1, 2) == 3


def test_is_alive_bounds():
    assert is_alive(BLINKER, 2, 2)
    assert not is_alive(BLINKER, 0, 0)
    assert not is_alive(BLINKER, -1, 2)
    assert not is_alive(BLINKER, 2, 5)


def test_generate_extremes_and_invalid_probability():
    assert generate_field(4, 3, 1.0) == ["####"] * 3
    assert generate_field(4, 3, 0.0) == ["    "] * 3
    with pytest.raises(ValueError):
        generate_field(4, 3, 1.5)
    with pytest.raises(ValueError):
        generate_field(4, 3, -0.1)


def test_generate_is_reproducible_with_seed():
    first = generate_field(8, 6, 0.5, random.Random(1))
    second = generate_field(8, 6, 0.5, random.Random(1))
    assert first == second
    assert len(first) == 6 and all(len(row) == 8 for row in first)


def test_write_format(tmp_path):
    path = tmp_path / "field.txt"
    write_field(path, ["#  ", " # "])
    assert path.read_text() == "3 2\n#  \n # \n"


def test_write_read_round_trip(tmp_path):
    path = tmp_path / "field.txt"
    field = generate_field(9, 7, 0.5, random.Random(3))
    write_field(path, field)
    assert read_field(path) == field


def test_read_pads_short_rows(tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("3 2\n#\n")
    assert read_field(path) == ["#  ", "   "]


def test_read_missing_file(tmp_path):
    with pytest.raises(RuntimeError):
        read_field(tmp_path / "absent.txt")


def test_read_bad_header(tmp_path):
    path = tmp_path / "field.txt"
    path.write_text("wide tall\n")
    with pytest.raises(ValueError):
        read_field(path)


def test_do_step_writes_next_generation(tmp_path):
    source = tmp_path / "in.txt"
    target = tmp_path / "out.txt"
    write_field(source, BLINKER)
    result = do_step(source, 2, target)
    assert result == _transpose(BLINKER)
    assert read_field(target) == result
    assert read_field(source) == BLINKER


def test_do_step_overwrites_input_by_default(tmp_path):
    source = tmp_path / "in.txt"
    write_field(source, BLINKER)
    do_step(source, 1)
    assert read_field(source) == _transpose(BLINKER)


def test_main_generate_then_step(tmp_path):
    path = tmp_path / "game.txt"
    assert main(["generate", str(path), "4", "3", "1"]) == 0
    assert read_field(path) == ["####"] * 3
    assert main(["step", str(path), "2"]) == 0
    assert read_field(path) == ["    "] * 3


def test_main_errors(tmp_path):
    path = tmp_path / "game.txt"
    assert main(["bogus", "a", "b"]) == 1
    assert main(["generate", str(path), "4", "3", "2"]) == 1
    assert main(["step"]) == 1
    assert not path.exists()