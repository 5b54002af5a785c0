"""Shared fixtures for psi-notify tests."""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add parent directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


@pytest.fixture
def pressure_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a pressure record to a temporary file and return its path."""

    def _write(*lines: str, name: str = "memory") -> Path:
        path = tmp_path / name
        path.write_text("".join(lines))
        return path

    return _write


@pytest.fixture
def fake_roots(tmp_path: Path) -> tuple[Path, Path]:
    """Empty cgroup and proc trees."""
    cgroup_root = tmp_path / "cgroup"
    proc_root = tmp_path / "proc"
    cgroup_root.mkdir()
    proc_root.mkdir()
    return cgroup_root, proc_root
