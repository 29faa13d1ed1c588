"""External merge sort of a tape through temporary file tapes."""

from __future__ import annotations

import heapq
import os
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Union

from tapesort.config import Config
from tapesort.tape import CELL_SIZE, FileTape, Tape

StrPath = Union[str, "os.PathLike[str]"]


@dataclass
class TapeStats:
    """Counts of the tape operations performed while sorting."""

    shifts: int = 0
    rewinds: int = 0
    reads: int = 0
    writes: int = 0

    def total_time(self, config: Config) -> int:
        """Time the counted operations take with the delays of ``config``."""
        return (
            self.reads * config.read_delay
            + self.writes * config.write_delay
            + self.shifts * config.shift_delay
            + self.rewinds * config.rewind_delay
        )


class TapeSorter:
    """Sort an input tape into an output tape using only ``memory_limit`` bytes.

    Sorted runs are written to temporary tapes in ``tmp_dir``; the temporary
    files are left in place afterwards. Only one run's worth of tapes is open
    at a time, to stay clear of the per-process limit on open files.
    """

    def __init__(
        self,
        input_tape: Tape,
        output_tape: Tape,
        config: Config,
        tmp_dir: StrPath = "tmp",
    ) -> None:
        self.input_tape = input_tape
        self.output_tape = output_tape
        self.config = config
        self.tmp_dir = os.fspath(tmp_dir)
        self.stats = TapeStats()
        self._temp_tapes = 0
        os.makedirs(self.tmp_dir, exist_ok=True)

    def _temp_path(self, name: str | int) -> str:
        if isinstance(name, int):
            name = f"tape{name}"
        return os.path.join(self.tmp_dir, f"{name}.bin")

    def sort(self) -> None:
        """Sort the input tape into the output tape in ascending order.

        Raises ``ValueError`` if the memory limit cannot hold a single value.
        """
        block_size = self.config.memory_limit // CELL_SIZE
        if block_size < 1:
            raise ValueError(
                f"memory_limit must be at least {CELL_SIZE} bytes, "
                f"got {self.config.memory_limit}"
            )

        self.input_tape.rewind()

        # Each pass sorts two blocks and merges them straight away, so there
        # are half as many temporary tapes to merge later.
        while self.input_tape.has_next():
            with FileTape(self._temp_path("tape_input1"), new=True) as first, \
                    FileTape(self._temp_path("tape_input2"), new=True) as second:
                self._write_run(first, block_size)
                self._write_run(second, block_size)
                result_path = self._temp_path(self._temp_tapes)
                self._temp_tapes += 1
                with FileTape(result_path, new=True) as result:
                    self._merge_backwards(first, second, result)

        # A merge can hold at most one value per source tape in memory, but
        # it needs two sources to make progress.
        fan_in = max(2, block_size)
        merged = 0
        while self._temp_tapes - merged > fan_in:
            with FileTape(self._temp_path(self._temp_tapes), new=True) as tape:
                self._merge_runs(merged, fan_in, tape, descending=True)
            merged += fan_in
            self._temp_tapes += 1

        self._merge_runs(
            merged, self._temp_tapes - merged, self.output_tape, descending=False
        )

    def _write_run(self, tape: Tape, block_size: int) -> None:
        """Read up to ``block_size`` values from the input, sort and store them."""
        block: list[int] = []
        while len(block) < block_size and self.input_tape.has_next():
            block.append(self.input_tape.read())
            self.stats.reads += 1
            self.input_tape.shift_right()
            self.stats.shifts += 1
        for value in sorted(block):
            tape.write(value)
            self.stats.writes += 1
            tape.shift_right()
            self.stats.shifts += 1

    def _merge_backwards(self, first: Tape, second: Tape, result: Tape) -> None:
        """Merge two ascending tapes from their ends, giving a descending tape."""
        heads: list[tuple[Tape, int]] = []
        for tape in (first, second):
            tape.shift_left()
            self.stats.shifts += 1
            if tape.has_next():
                heads.append((tape, tape.read()))
                self.stats.reads += 1

        while heads:
            # Ties go to the later tape.
            index = max(range(len(heads)), key=lambda i: (heads[i][1], i))
            tape, value = heads[index]
            result.write(value)
            self.stats.writes += 1
            tape.shift_left()
            self.stats.shifts += 1
            if tape.has_next():
                heads[index] = (tape, tape.read())
                self.stats.reads += 1
            else:
                del heads[index]
            result.shift_right()
            self.stats.shifts += 1

    def _merge_runs(
        self, first: int, count: int, output: Tape, *, descending: bool
    ) -> None:
        """Merge ``count`` descending temporary tapes starting at index ``first``.

        With ``descending`` false the tapes are read from their ends and the
        output is ascending; otherwise they are read from their starts and the
        output stays descending, ready for a later merge.
        """
        sign = -1 if descending else 1
        with ExitStack() as stack:
            tapes = [
                stack.enter_context(FileTape(self._temp_path(index)))
                for index in range(first, first + count)
            ]
            heap: list[tuple[int, int]] = []
            for index, tape in enumerate(tapes):
                if tape.size == 0:
                    continue
                if not descending:
                    tape.position = tape.size - 1
                    self.stats.shifts += 1
                heap.append((sign * tape.read(), index))
                self.stats.reads += 1
                self._advance(tape, descending)
            heapq.heapify(heap)

            while heap:
                key, index = heapq.heappop(heap)
                output.write(sign * key)
                output.shift_right()
                self.stats.writes += 1
                self.stats.shifts += 1
                tape = tapes[index]
                if tape.has_next():
                    heapq.heappush(heap, (sign * tape.read(), index))
                    self.stats.reads += 1
                    self._advance(tape, descending)

    def _advance(self, tape: Tape, forward: bool) -> None:
        if forward:
            tape.shift_right()
        else:
            tape.shift_left()
        self.stats.shifts += 1