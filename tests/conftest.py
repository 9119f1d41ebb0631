"""Shared fixtures for the Heurisko tests.

The modules live at the repository root, so make sure it is importable
when pytest runs from another directory.
"""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


def write_file(path: Path, size: int, mode: int = 0o644) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    os.chmod(path, mode)
    return path


@pytest.fixture
def sample_tree(tmp_path):
    """root/a.txt (10), root/.hidden (5), root/sub/b.txt (20)"""
    root = tmp_path / "root"
    write_file(root / "a.txt", 10)
    write_file(root / ".hidden", 5)
    write_file(root / "sub" / "b.txt", 20)
    return root


@pytest.fixture
def deep_tree(tmp_path):
    """Three levels of files plus a hidden directory"""
    root = tmp_path / "deep"
    write_file(root / "top.txt", 1)
    write_file(root / "one" / "mid.txt", 2)
    write_file(root / "one" / "two" / "low.txt", 3)
    write_file(root / "one" / "two" / "Low.log", 4)
    write_file(root / ".git" / "config", 5)
    write_file(root / ".git" / "objects" / "pack.txt", 6)
    return root


@pytest.fixture(autouse=True)
def isolated_defaults(tmp_path, monkeypatch):
    """Keep persisted defaults out of the real home directory"""
    monkeypatch.setenv("HEURISKO_HOME", str(tmp_path / "heurisko-home"))


def pytest_sessionfinish(session, exitstatus):
    """Let pytest's temp-dir cleanup remove the deep trees some tests build"""
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))
