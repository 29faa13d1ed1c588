# tapesort

`tapesort` sorts a file of signed 32-bit integers as though the file were a
magnetic tape. It works in a small amount of memory that you set, and it
keeps intermediate results on temporary tapes on disk. During the sort it
counts every read, write and shift, so you can estimate how long the same job
would take on a real tape device.

## Installation

```
pip install .
```

## Command line

```
tapesort <input file> <output file>
```

You can also run `python -m tapesort.cli <input file> <output file>`.

The input file must be a raw sequence of little-endian `int32` values. The
command writes the sorted values to the output file in ascending order, in
the same format. If the output file already exists, the command overwrites
it. If the input file does not exist, the command creates it empty.

The command reads its settings from `./config.ini` in the current directory.
If it cannot read that file, it prints
`Error loading config. Is it in ./config.ini?` and exits with status 1. The
file holds `key=value` lines:

```
memory_limit=16
read_delay=1
write_delay=1
shift_delay=1
rewind_delay=1
```

- `memory_limit` is the working memory in bytes. Each value takes 4 bytes,
  so `memory_limit=16` lets the sorter hold 4 values at a time. It also caps
  how many temporary tapes are merged in one pass, with a minimum of 2. A
  limit below 4 bytes is an error.
- The `*_delay` settings give the cost of each tape operation. They are used
  only to work out the reported total time.

Unknown keys, lines without `=`, and values that do not start with an
integer are all ignored. Any setting that is missing defaults to 0.

The command writes temporary tapes to a `tmp` directory under the current
directory, creating the directory if needed. It does not delete them when
the sort is done.

When the sort finishes, the command prints the input size (in values) and
the operation counts:

```
Done!
Input file size: 4
Rewind count: 0
Read count: ...
Write count: ...
Shift count: ...
Total time: ...
```

On any error it prints `Error: <message>` to standard error and exits with
status 1. A wrong number of arguments prints a usage line and also exits
with status 1.

## Library use

```python
from pathlib import Path

from tapesort.config import Config
from tapesort.sorter import TapeSorter
from tapesort.tape import FileTape

config = Config.load("config.ini")

with FileTape("input.bin", False) as source, FileTape("output.bin", True) as target:
    sorter = TapeSorter(source, target, config, Path("tmp"))
    sorter.sort()

print(sorter.stats.reads, sorter.stats.writes, sorter.stats.shifts)
print(sorter.stats.total_time(config))
```

### `tapesort.config.Config`

`Config` is a dataclass with these fields: `read_delay`, `write_delay`,
`shift_delay`, `rewind_delay` and `memory_limit`. `Config.load(path)` reads a
settings file as described above. It raises `OSError` (usually
`FileNotFoundError`) if the file cannot be read.

### `tapesort.tape`

- `Tape` is the abstract interface. It has `read()`, `write(value)`,
  `shift_left()`, `shift_right()`, `rewind()`, `has_next()`, `has_prev()`
  and a `position` property. A position of -1 means the head is before the
  first cell.
- `FileTape(path, new=False)` stores a tape in a file of little-endian 32-bit
  integers. Pass `new=True` to truncate the file. It has `size`, `path` and
  `closed` properties, and `position` can be set directly. Use it as a
  context manager or call `close()`. Each open tape holds one file handle.
- `TapeError` is raised when a tape cannot be opened, when it is read past
  its data or at a negative position, and when it is used after being closed.
  Writing a value that does not fit in 32 bits raises `ValueError`.

### `tapesort.sorter`

- `TapeSorter(input_tape, output_tape, config, tmp_dir="tmp")` creates
  `tmp_dir` if it is missing. `sort()` rewinds the input tape and writes the
  values to the output tape in ascending order. It raises `ValueError` if
  `memory_limit` is less than 4.
- `TapeStats` holds the counts `shifts`, `rewinds`, `reads` and `writes`.
  `total_time(config)` weights each count by its delay. The sorter never
  rewinds a tape, so `rewinds` stays at 0.