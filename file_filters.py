#!/usr/bin/env python3
"""
File filters for Heurisko

Each filter is an independent predicate over the search configuration and
one candidate entry. A filter whose option is unset accepts everything.
The max-depth check is kept out of accepts() because the finder uses it to
prune the rest of a directory, not to reject a single file.
"""

import stat
from dataclasses import dataclass
from enum import Enum

from heurisko_config import SearchConfig


class EntryKind(Enum):
    DIRECTORY = "directory"
    REGULAR = "regular"
    OTHER = "other"


@dataclass
class Candidate:
    """Transient view of one directory entry under evaluation"""

    name: str
    path: str
    kind: EntryKind
    size: int
    mode: int
    owner_uid: int
    depth: int

    @classmethod
    def from_stat(cls, name: str, path: str, stat_result, depth: int) -> "Candidate":
        """Build a candidate from an lstat() result"""
        mode = stat_result.st_mode
        if stat.S_ISDIR(mode):
            kind = EntryKind.DIRECTORY
        elif stat.S_ISREG(mode):
            kind = EntryKind.REGULAR
        else:
            kind = EntryKind.OTHER

        return cls(
            name=name,
            path=path,
            kind=kind,
            size=stat_result.st_size,
            mode=mode,
            owner_uid=stat_result.st_uid,
            depth=depth,
        )

    @property
    def permissions(self) -> int:
        return permission_mask(self.mode)


# (bit, octal digit value) for owner, group and other
_PERMISSION_BITS = (
    (stat.S_IRUSR, 0o400),
    (stat.S_IWUSR, 0o200),
    (stat.S_IXUSR, 0o100),
    (stat.S_IRGRP, 0o040),
    (stat.S_IWGRP, 0o020),
    (stat.S_IXGRP, 0o010),
    (stat.S_IROTH, 0o004),
    (stat.S_IWOTH, 0o002),
    (stat.S_IXOTH, 0o001),
)


def permission_mask(mode: int) -> int:
    """Octal mask of the nine rwx bits of mode, e.g. rwxr-xr-- -> 0o754"""
    mask = 0
    for bit, value in _PERMISSION_BITS:
        if mode & bit:
            mask += value
    return mask


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def matches_name(config: SearchConfig, candidate: Candidate) -> bool:
    if config.name is None:
        return True
    return config.name in candidate.name


def matches_permissions(config: SearchConfig, candidate: Candidate) -> bool:
    if config.mask is None:
        return True
    return candidate.permissions == config.mask


def matches_owner(config: SearchConfig, candidate: Candidate) -> bool:
    if config.owner_uid is None:
        return True
    return candidate.owner_uid == config.owner_uid


def matches_min_depth(config: SearchConfig, candidate: Candidate) -> bool:
    if config.min_depth is None:
        return True
    return candidate.depth >= config.min_depth


def within_max_depth(config: SearchConfig, candidate: Candidate) -> bool:
    if config.max_depth is None:
        return True
    return candidate.depth <= config.max_depth


def matches_hidden(config: SearchConfig, candidate: Candidate) -> bool:
    return config.show_all or not is_hidden(candidate.name)


ACCEPT_FILTERS = (
    matches_name,
    matches_permissions,
    matches_owner,
    matches_min_depth,
    matches_hidden,
)


def accepts(config: SearchConfig, candidate: Candidate) -> bool:
    """Return True if every accept filter passes for a regular file"""
    return all(check(config, candidate) for check in ACCEPT_FILTERS)
