"""Tape abstraction and a tape stored in a binary file of 32-bit integers."""

from __future__ import annotations

import os
import struct
from abc import ABC, abstractmethod
from typing import BinaryIO, Union

_CELL = struct.Struct("<i")
CELL_SIZE = _CELL.size

StrPath = Union[str, "os.PathLike[str]"]


class TapeError(Exception):
    """Raised when a tape cannot be opened, read or written."""


class Tape(ABC):
    """A sequential device holding 32-bit integers under a moving head."""

    @abstractmethod
    def read(self) -> int:
        """Return the value under the head."""

    @abstractmethod
    def write(self, value: int) -> None:
        """Store a value under the head."""

    @abstractmethod
    def shift_right(self) -> None:
        """Move the head one cell forward."""

    @abstractmethod
    def shift_left(self) -> None:
        """Move the head one cell back."""

    @abstractmethod
    def rewind(self) -> None:
        """Move the head to the first cell."""

    @abstractmethod
    def has_next(self) -> bool:
        """Whether the head is over a cell that holds data."""

    @abstractmethod
    def has_prev(self) -> bool:
        """Whether there is a cell before the head."""

    @property
    @abstractmethod
    def position(self) -> int:
        """Index of the cell under the head; -1 means before the first cell."""


class FileTape(Tape):
    """A tape backed by a file of little-endian 32-bit integers.

    Each open tape keeps one file handle open; close it when done.
    """

    def __init__(self, path: StrPath, new: bool = False) -> None:
        self.path = os.fspath(path)
        self._position = 0
        self._file: BinaryIO
        try:
            if new:
                self._file = open(self.path, "w+b")
                self._size = 0
            else:
                try:
                    self._file = open(self.path, "r+b")
                except FileNotFoundError:
                    self._file = open(self.path, "w+b")
                self._size = os.fstat(self._file.fileno()).st_size // CELL_SIZE
        except OSError as exc:
            raise TapeError(f"Cannot open file {self.path}") from exc

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        self._position = value

    @property
    def size(self) -> int:
        """Number of cells the tape holds."""
        return self._size

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _check_open(self) -> None:
        if self._file.closed:
            raise TapeError(f"Tape {self.path} is closed")

    def read(self) -> int:
        self._check_open()
        if self._position < 0:
            raise TapeError(
                f"Failed reading at position {self._position} of {self._size}. "
                f"Filename: {self.path}"
            )
        self._file.seek(self._position * CELL_SIZE)
        data = self._file.read(CELL_SIZE)
        if len(data) != CELL_SIZE:
            raise TapeError(
                f"Failed reading at position {self._position} of {self._size}. "
                f"Filename: {self.path}"
            )
        return _CELL.unpack(data)[0]

    def write(self, value: int) -> None:
        self._check_open()
        try:
            data = _CELL.pack(value)
        except struct.error as exc:
            raise ValueError(f"{value!r} does not fit in a 32-bit cell") from exc
        if self._position < 0:
            raise TapeError(
                f"Failed writing at position {self._position}. Filename: {self.path}"
            )
        self._file.seek(self._position * CELL_SIZE)
        self._file.write(data)

    def shift_right(self) -> None:
        self._position += 1
        self._size = max(self._size, self._position)

    def shift_left(self) -> None:
        self._position -= 1

    def rewind(self) -> None:
        self._position = 0

    def has_next(self) -> bool:
        return 0 <= self._position < self._size

    def has_prev(self) -> bool:
        return self._position > 0

    def close(self) -> None:
        """Flush and close the underlying file."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self) -> "FileTape":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"FileTape(path={self.path!r}, position={self._position}, "
            f"size={self._size})"
        )