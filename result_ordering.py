#!/usr/bin/env python3
"""
Result orderings for Heurisko

Three total orders over results:

- path: byte-wise, case-sensitive comparison of the full paths
- name: case-insensitive (ASCII) comparison of the file names, ties broken
  by the full path
- size: largest first, ties broken by the name order

Paths are compared as their filesystem bytes so names that do not decode
cleanly still order deterministically.
"""

import os
from typing import Callable

from auxiliary import file_name
from heurisko_config import SortMode
from result_store import Result


def _path_bytes(result: Result) -> bytes:
    return os.fsencode(result.path)


def by_path(result: Result) -> tuple:
    return (_path_bytes(result),)


def by_name(result: Result) -> tuple:
    # bytes.lower() only folds ASCII letters
    return (os.fsencode(file_name(result.path)).lower(), _path_bytes(result))


def by_size(result: Result) -> tuple:
    return (-result.size, *by_name(result))


SORT_KEYS: dict[SortMode, Callable[[Result], tuple]] = {
    SortMode.PATH: by_path,
    SortMode.NAME: by_name,
    SortMode.SIZE: by_size,
}


def sort_key(mode: SortMode) -> Callable[[Result], tuple]:
    """Key function implementing the ordering selected by mode"""
    return SORT_KEYS[mode]


def compare(mode: SortMode, first: Result, second: Result) -> int:
    """Three-way comparison under mode: -1, 0 or 1"""
    key = SORT_KEYS[mode]
    first_key, second_key = key(first), key(second)
    if first_key < second_key:
        return -1
    if first_key > second_key:
        return 1
    return 0
