#!/usr/bin/env python3
"""
Error types shared by the Heurisko modules

Only configuration errors and fatal search errors are exceptions.
Recoverable traversal problems are reported and absorbed by the finder.
"""

from typing import Optional


class HeuriskoError(Exception):
    """Base class for all Heurisko errors"""


class ConfigError(HeuriskoError):
    """Command line options could not be turned into a search configuration"""


class SearchError(HeuriskoError):
    """A fatal condition that aborts the whole search"""


class DirectoryUnavailable(SearchError):
    """The starting directory could not be opened"""

    def __init__(self, path: str, message: str, os_error: Optional[OSError] = None):
        super().__init__(message)
        self.path = path
        self.os_error = os_error


class OutOfMemory(SearchError):
    """Path construction or result storage ran out of memory"""
