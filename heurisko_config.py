#!/usr/bin/env python3
"""
Configuration for Heurisko

Builds the immutable search configuration from validated command line
options, and keeps persisted defaults for the sort order, hidden-file
visibility and output terminator in a .heurisko directory.
"""

import json
import os
import pathlib
import pwd
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Optional

from errors import ConfigError

CONFIG_DIR_ENV = "HEURISKO_HOME"

_DECIMAL_RE = re.compile(r"[0-9]+")


class SortMode(Enum):
    """Ordering applied to the results before printing"""

    PATH = "path"
    NAME = "name"
    SIZE = "size"


# Short flag values accepted by -s
SORT_FLAGS = {"p": SortMode.PATH, "f": SortMode.NAME, "s": SortMode.SIZE}


@dataclass(frozen=True)
class SearchConfig:
    """Read-only set of filter and output options for one search"""

    start_directory: str = "."
    name: Optional[str] = None
    mask: Optional[int] = None
    owner_uid: Optional[int] = None
    owner_name: Optional[str] = None
    min_depth: Optional[int] = None
    max_depth: Optional[int] = None
    show_all: bool = False
    sort_mode: SortMode = SortMode.PATH
    terminator: str = "\n"

    def describe(self) -> dict[str, Any]:
        """Options as display strings, unset filters left out"""
        described: dict[str, Any] = {"Start directory": self.start_directory}
        if self.name is not None:
            described["Name contains"] = self.name
        if self.mask is not None:
            described["Permissions"] = f"{self.mask:03o}"
        if self.owner_uid is not None:
            described["Owner"] = f"{self.owner_name} ({self.owner_uid})"
        if self.min_depth is not None:
            described["Min depth"] = self.min_depth
        if self.max_depth is not None:
            described["Max depth"] = self.max_depth
        described["Hidden files"] = "shown" if self.show_all else "skipped"
        described["Sort by"] = self.sort_mode.value
        described["Terminator"] = "null byte" if self.terminator == "\0" else "newline"
        return described


@dataclass
class HeuriskoDefaults:
    """Persisted defaults, overridden by explicit command line flags"""

    sort: str = SortMode.PATH.value
    show_all: bool = False
    null_terminator: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "HeuriskoDefaults":
        """Create from dictionary, ignoring unknown sort values"""
        sort = data.get("sort", SortMode.PATH.value)
        if sort not in {mode.value for mode in SortMode}:
            sort = SortMode.PATH.value
        return cls(
            sort=sort,
            show_all=bool(data.get("show_all", False)),
            null_terminator=bool(data.get("null_terminator", False)),
        )


class DefaultsManager:
    """Loads and saves persisted defaults"""

    def __init__(self, config_dir: Optional[pathlib.Path] = None):
        """Initialize defaults manager

        Args:
            config_dir: Override default .heurisko directory location
        """
        if config_dir:
            self.config_dir = config_dir
        elif os.environ.get(CONFIG_DIR_ENV):
            self.config_dir = pathlib.Path(os.environ[CONFIG_DIR_ENV])
        else:
            self.config_dir = pathlib.Path.home() / ".heurisko"

        self.config_file = self.config_dir / "config.json"

    def load(self) -> HeuriskoDefaults:
        """Load defaults from file"""
        if self.config_file.exists():
            try:
                with self.config_file.open() as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        return HeuriskoDefaults.from_dict(data)
            except (json.JSONDecodeError, OSError):
                # If config is corrupted, return default
                pass
        return HeuriskoDefaults()

    def save(self, defaults: HeuriskoDefaults):
        """Save defaults to file"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with self.config_file.open("w") as f:
            json.dump(defaults.to_dict(), f, indent=2)

    def reset(self):
        """Reset defaults by removing the config file"""
        if self.config_file.exists():
            self.config_file.unlink()


def parse_mask(text: str) -> int:
    """Parse a permission mask written as octal digits, e.g. '754'"""
    if not _DECIMAL_RE.fullmatch(text):
        raise ConfigError("'-m' expects a number as an argument.")
    if any(digit > "7" for digit in text):
        raise ConfigError("'-m' expects a number as an argument. Number has to be formatted in octal.")

    mask = int(text, 8)
    if mask > 0o777:
        raise ConfigError("'-m' expects a mask of at most three octal digits (e.g. 644).")
    return mask


def parse_depth(text: str, flag: str) -> int:
    """Parse a non-negative depth given to flag"""
    if not _DECIMAL_RE.fullmatch(text):
        raise ConfigError(f"'{flag}' expects a number as an argument.")
    return int(text)


def resolve_owner(username: str) -> int:
    """Resolve a username to its user id"""
    try:
        return pwd.getpwnam(username).pw_uid
    except KeyError:
        raise ConfigError(f"User '{username}' doesn't exist.") from None


def build_config(
    options,
    defaults: Optional[HeuriskoDefaults] = None,
    owner_resolver: Callable[[str], int] = resolve_owner,
) -> SearchConfig:
    """Validate parsed command line options into a SearchConfig

    Args:
        options: argparse namespace with name, sort, mask, user, min_depth,
            max_depth, show_all, null_terminator and path attributes
        defaults: Persisted defaults used where a flag was not given
        owner_resolver: Username to user id lookup

    Returns:
        Immutable search configuration

    Raises:
        ConfigError: If any option is invalid or the user does not exist
    """
    defaults = defaults or HeuriskoDefaults()

    name = getattr(options, "name", None)
    if name is not None and name.startswith("-"):
        raise ConfigError("'-n' takes a string as an argument and searches for files whose names contain it.")

    sort_flag = getattr(options, "sort", None)
    sort_mode = SORT_FLAGS[sort_flag] if sort_flag else SortMode(defaults.sort)

    mask_text = getattr(options, "mask", None)
    mask = parse_mask(mask_text) if mask_text is not None else None

    owner_uid = None
    username = getattr(options, "user", None)
    if username is not None:
        if username.startswith("-"):
            raise ConfigError("'-u' takes a username as an argument. No username given!")
        owner_uid = owner_resolver(username)

    min_text = getattr(options, "min_depth", None)
    max_text = getattr(options, "max_depth", None)

    show_all = getattr(options, "show_all", None)
    if show_all is None:
        show_all = defaults.show_all

    null_terminator = getattr(options, "null_terminator", None)
    if null_terminator is None:
        null_terminator = defaults.null_terminator

    return SearchConfig(
        start_directory=getattr(options, "path", None) or ".",
        name=name,
        mask=mask,
        owner_uid=owner_uid,
        owner_name=username,
        min_depth=parse_depth(min_text, "-f") if min_text is not None else None,
        max_depth=parse_depth(max_text, "-t") if max_text is not None else None,
        show_all=bool(show_all),
        sort_mode=sort_mode,
        terminator="\0" if null_terminator else "\n",
    )
