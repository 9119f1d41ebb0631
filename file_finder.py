#!/usr/bin/env python3
"""
File Finder Module for Heurisko

Depth-first walk of a directory tree that collects regular files accepted
by the filters into a ResultStore.

Only two conditions abort a search: the starting directory cannot be
opened, or memory runs out while building paths or storing results.
Everything else (unreadable subdirectories, entries whose metadata cannot
be read) is reported and skipped.
"""

import errno
import os
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from auxiliary import join_path
from errors import DirectoryUnavailable
from file_filters import Candidate, EntryKind, accepts, is_hidden, within_max_depth
from heurisko_config import SearchConfig
from result_store import ResultStore

PROGRESS_INTERVAL = 200

_DIRECTORY_PROBLEMS = {
    errno.EACCES: "Permission to open the directory '{path}' was denied.",
    errno.EMFILE: "Too many open file descriptors while opening '{path}'.",
    errno.ENFILE: "Too many open file descriptors while opening '{path}'.",
    errno.ENOENT: "Directory '{path}' doesn't exist.",
    errno.ENOMEM: "Out of memory while opening '{path}'.",
    errno.ENOTDIR: "'{path}' is not a valid directory.",
}

_ENTRY_PROBLEMS = {
    errno.EACCES: "Permission to view file stats denied: '{path}'.",
    errno.EIO: "I/O error while reading file stats: '{path}'.",
    errno.ELOOP: "Loop in symbolic links found: '{path}'.",
    errno.ENAMETOOLONG: "Path length too long: '{path}'.",
    errno.ENOTDIR: "Element of a path leading to a file is not a directory: '{path}'.",
    errno.ENOENT: "A component of the path does not name an existing file: '{path}'.",
    errno.EOVERFLOW: "Overflow while reading file stats: '{path}'.",
    errno.EBADF: "The directory couldn't be read: '{path}'.",
}


@dataclass
class _Frame:
    """A directory being walked and the entry names still to visit"""

    path: str
    depth: int
    names: Iterator[str]


def describe_directory_problem(path: str, error: OSError) -> str:
    """Human-readable reason why a directory could not be opened"""
    template = _DIRECTORY_PROBLEMS.get(error.errno)
    if template:
        return template.format(path=path)
    return f"Cannot open directory '{path}': {error.strerror or error}"


def describe_entry_problem(path: str, error: OSError) -> str:
    """Human-readable reason why an entry's metadata could not be read"""
    template = _ENTRY_PROBLEMS.get(error.errno)
    if template:
        return template.format(path=path)
    return f"Cannot read file stats for '{path}': {error.strerror or error}"


class FileFinder:
    """Walks a directory tree and collects files accepted by the filters"""

    def __init__(
        self,
        config: SearchConfig,
        report: Optional[Callable[[str], None]] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ):
        """Initialize file finder

        Args:
            config: Search configuration, never modified
            report: Receives one message per recoverable problem
            progress_callback: Called with (directories_scanned, files_matched)
                every PROGRESS_INTERVAL directories and once at the end
        """
        self.config = config
        self.report = report
        self.progress_callback = progress_callback
        self.directories_scanned = 0

    def find(self, store: Optional[ResultStore] = None) -> ResultStore:
        """Walk the start directory and return the populated store

        Raises:
            DirectoryUnavailable: If the start directory cannot be opened
            OutOfMemory: If a path or result cannot be allocated
        """
        if store is None:
            store = ResultStore()
        self.directories_scanned = 0

        self._walk(store)

        if self.progress_callback:
            self.progress_callback(self.directories_scanned, store.count)
        return store

    def _report(self, message: str):
        if self.report:
            self.report(message)

    def _walk(self, store: ResultStore):
        """Depth-first walk over an explicit stack of directory frames

        A subdirectory is pushed as soon as it is met, so its whole subtree is
        finished before the next sibling of its parent is looked at.
        """
        stack = [self._open(self.config.start_directory, 0, store)]

        while stack:
            frame = stack[-1]
            name = next(frame.names, None)
            if name is None:
                stack.pop()
                continue

            path = join_path(frame.path, name)

            try:
                stat_result = os.lstat(path)
            except OSError as e:
                self._report(describe_entry_problem(path, e))
                continue

            candidate = Candidate.from_stat(name, path, stat_result, frame.depth)

            if candidate.kind is EntryKind.DIRECTORY:
                if self.config.show_all or not is_hidden(name):
                    child = self._open(path, frame.depth + 1, store)
                    if child is not None:
                        stack.append(child)
            elif candidate.kind is EntryKind.REGULAR:
                if not accepts(self.config, candidate):
                    continue
                # Every entry here shares this depth, so drop the rest of the directory
                if not within_max_depth(self.config, candidate):
                    stack.pop()
                    continue
                store.append(path, candidate.size)

    def _open(self, directory: str, depth: int, store: ResultStore) -> Optional[_Frame]:
        """Read a directory's entry names into a new frame

        The directory handle is closed before the frame is returned, so deep
        trees never hold more than one handle open. Returns None when a directory below
        the start cannot be opened.
        """
        try:
            handle = os.scandir(directory)
        except OSError as e:
            message = describe_directory_problem(directory, e)
            if depth == 0:
                raise DirectoryUnavailable(directory, message, e) from e
            self._report(message)
            return None

        self.directories_scanned += 1
        if self.progress_callback and self.directories_scanned % PROGRESS_INTERVAL == 0:
            self.progress_callback(self.directories_scanned, store.count)

        with handle:
            names = list(self._entry_names(handle, directory))
        return _Frame(path=directory, depth=depth, names=iter(names))

    def _entry_names(self, handle, directory: str) -> Iterator[str]:
        """Yield entry names, ending early if the directory stream fails"""
        while True:
            try:
                entry = next(handle)
            except StopIteration:
                return
            except OSError as e:
                self._report(describe_entry_problem(directory, e))
                return

            if entry.name in (".", ".."):
                continue
            yield entry.name
