"""Command line entry point: sort a tape file into another."""

from __future__ import annotations

import sys
from typing import Sequence

from tapesort.config import Config
from tapesort.sorter import TapeSorter
from tapesort.tape import FileTape, TapeError

CONFIG_PATH = "./config.ini"
TMP_DIR = "tmp"


def main(argv: Sequence[str] | None = None) -> int:
    """Sort ``<input file>`` into ``<output file>`` and print statistics."""
    prog = sys.argv[0] if sys.argv and sys.argv[0] else "tapesort"
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print(f"Usage: {prog} <input file> <output file>", file=sys.stderr)
        return 1
    input_path, output_path = args

    try:
        config = Config.load(CONFIG_PATH)
    except OSError:
        print(f"Error loading config. Is it in {CONFIG_PATH}?", file=sys.stderr)
        return 1

    try:
        with FileTape(input_path) as input_tape, \
                FileTape(output_path, new=True) as output_tape:
            sorter = TapeSorter(input_tape, output_tape, config, TMP_DIR)
            sorter.sort()
            input_size = input_tape.size
    except (TapeError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    stats = sorter.stats
    print("Done!")
    print(f"Input file size: {input_size}")
    print(f"Rewind count: {stats.rewinds}")
    print(f"Read count: {stats.reads}")
    print(f"Write count: {stats.writes}")
    print(f"Shift count: {stats.shifts}")
    print(f"Total time: {stats.total_time(config)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())