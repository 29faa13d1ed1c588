import random
import struct

import pytest

from tapesort.config import Config
from tapesort.sorter import TapeSorter, TapeStats
from tapesort.tape import FileTape


def write_tape_file(path, data):
    path.write_bytes(b"".join(struct.pack("<i", value) for value in data))


def read_tape_file(path):
    raw = path.read_bytes()
    return [value for (value,) in struct.iter_unpack("<i", raw)]


def write_config(path, memory_limit):
    path.write_text(
        f"memory_limit={memory_limit}\nread_delay=1\nwrite_delay=1\n"
        "shift_delay=1\nrewind_delay=1"
    )


def run_sorter(tmp_path, data, memory_limit):
    input_path = tmp_path / "input.bin"
    output_path = tmp_path / "output.bin"
    config_path = tmp_path / "config.ini"
    write_tape_file(input_path, data)
    write_config(config_path, memory_limit)
    config = Config.load(config_path)
    with FileTape(input_path) as input_tape, FileTape(output_path) as output_tape:
        sorter = TapeSorter(input_tape, output_tape, config, tmp_path / "tmp")
        sorter.sort()
    return sorter, read_tape_file(output_path)


def test_empty_input(tmp_path):
    _, result = run_sorter(tmp_path, [], 4)
    assert result == []


def test_single_element(tmp_path):
    sorter, result = run_sorter(tmp_path, [5], 4)
    assert result == [5]
    assert sorter.stats.reads >= 1
    assert sorter.stats.writes >= 1
    assert sorter.stats.rewinds >= 0
    assert sorter.stats.shifts >= 1


def test_already_sorted(tmp_path):
    data = [1, 2, 3, 4]
    _, result = run_sorter(tmp_path, data, 16)
    assert result == data


def test_reverse_sorted(tmp_path):
    _, result = run_sorter(tmp_path, [4, 3, 2, 1], 16)
    assert result == [1, 2, 3, 4]


def test_tiny_memory_sorts_several_elements(tmp_path):
    data = [7, -3, 9, 0, 2]
    _, result = run_sorter(tmp_path, data, 4)
    assert result == sorted(data)


@pytest.mark.parametrize("memory_limit", [8, 12, 16, 40])
def test_many_runs_with_intermediate_merges(tmp_path, memory_limit):
    rng = random.Random(1234)
    data = [rng.randint(-1000, 1000) for _ in range(257)]
    _, result = run_sorter(tmp_path, data, memory_limit)
    assert result == sorted(data)


def test_duplicates_and_int32_extremes(tmp_path):
    data = [2**31 - 1, -(2**31), 0, 2**31 - 1, -(2**31), 5, 5, 5]
    _, result = run_sorter(tmp_path, data, 8)
    assert result == sorted(data)


def test_counts_cover_every_element(tmp_path):
    data = list(range(30, 0, -1))
    sorter, result = run_sorter(tmp_path, data, 12)
    assert result == sorted(data)
    assert sorter.stats.reads >= len(data)
    assert sorter.stats.writes >= len(data)
    assert sorter.stats.shifts >= len(data)


def test_memory_limit_too_small_raises(tmp_path):
    with pytest.raises(ValueError):
        run_sorter(tmp_path, [3, 1, 2], 3)


def test_creates_tmp_dir(tmp_path):
    tmp_dir = tmp_path / "scratch"
    input_path = tmp_path / "in.bin"
    output_path = tmp_path / "out.bin"
    write_tape_file(input_path, [2, 1])
    with FileTape(input_path) as input_tape, FileTape(output_path) as output_tape:
        TapeSorter(input_tape, output_tape, Config(memory_limit=4), tmp_dir).sort()
    assert tmp_dir.is_dir()
    assert read_tape_file(output_path) == [1, 2]


def test_total_time_weights_each_count():
    stats = TapeStats(shifts=1, rewinds=2, reads=3, writes=4)
    config = Config(read_delay=1, write_delay=10, shift_delay=100, rewind_delay=1000)
    assert stats.total_time(config) == 2143


def test_total_time_zero_delays():
    stats = TapeStats(shifts=5, rewinds=5, reads=5, writes=5)
    assert stats.total_time(Config()) == 0