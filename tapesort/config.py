"""Sorter configuration read from a simple ``key=value`` file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from typing import Union

_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

StrPath = Union[str, "os.PathLike[str]"]


def _parse_int(text: str) -> int | None:
    """Parse a leading 32-bit integer, ignoring trailing text; None if there is none."""
    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


@dataclass
class Config:
    """Delays of the tape operations and the memory limit in bytes."""

    read_delay: int = 0
    write_delay: int = 0
    shift_delay: int = 0
    rewind_delay: int = 0
    memory_limit: int = 0

    @classmethod
    def load(cls, path: StrPath) -> "Config":
        """Load a config file.

        Lines look like ``key=value``. Unknown keys, lines without ``=`` and
        values that do not start with an integer are ignored. Raises
        ``OSError`` (usually ``FileNotFoundError``) if the file cannot be read.
        """
        config = cls()
        known = {field.name for field in fields(cls)}
        with open(path, encoding="utf-8", errors="replace") as handle:
            for line in handle:
                key, sep, rest = line.rstrip("\n").partition("=")
                if not sep:
                    continue
                value = _parse_int(rest)
                if value is not None and key in known:
                    setattr(config, key, value)
        return config