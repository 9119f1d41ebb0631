#!/usr/bin/env python3
"""
Result storage for Heurisko

Keeps accepted files as (path, size) records in discovery order. The
backing slots grow by a fixed step and never shrink while the search runs.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from errors import OutOfMemory

GROWTH_STEP = 64


@dataclass(frozen=True)
class Result:
    """An accepted regular file"""

    path: str
    size: int


class ResultStore:
    """Growable ordered collection of results

    Invariant: count <= capacity, and every slot below count holds a Result.
    """

    def __init__(self, growth_step: int = GROWTH_STEP):
        if growth_step < 1:
            raise ValueError("growth_step must be positive")
        self.growth_step = growth_step
        self._slots: list[Optional[Result]] = []
        self._count = 0
        self._released = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Result]:
        for index in range(self._count):
            yield self._slots[index]

    def __getitem__(self, index: int) -> Result:
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("result index out of range")
        return self._slots[index]

    def append(self, path: str, size: int) -> Result:
        """Store a new result, growing the slots when they are full

        Raises:
            OutOfMemory: If the slots or the record cannot be allocated
        """
        if self._released:
            raise RuntimeError("cannot append to a released result store")

        try:
            if self._count >= len(self._slots):
                self._slots.extend([None] * self.growth_step)
            result = Result(path=path, size=size)
        except MemoryError as e:
            raise OutOfMemory(f"Couldn't store result for '{path}'") from e

        self._slots[self._count] = result
        self._count += 1
        return result

    def sort(self, key: Callable[[Result], Any]):
        """Sort the stored results in place by key"""
        live = self._slots[: self._count]
        live.sort(key=key)
        self._slots[: self._count] = live

    def paths(self) -> list[str]:
        return [result.path for result in self]

    def total_size(self) -> int:
        return sum(result.size for result in self)

    def release(self):
        """Drop every stored result and the backing slots"""
        if self._released:
            return
        for index in range(self._count):
            self._slots[index] = None
        self._slots = []
        self._count = 0
        self._released = True
