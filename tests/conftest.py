"""
Shared fixtures: fake binaries written as shell scripts.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


def write_binary(
    path: Path,
    version: str = "1.0.0",
    exit_code: int = 0,
    version_flag: str = "--version",
) -> Path:
    """Write an executable script that prints version for version_flag."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "#!/bin/sh\n"
        f'if [ "$1" = "{version_flag}" ]; then\n'
        f"  printf '%s\\n' '{version}'\n"
        f"  exit {exit_code}\n"
        "fi\n"
        "exit 64\n"
    )
    os.chmod(path, 0o755)
    return path


@pytest.fixture
def make_binary(tmp_path):
    """Factory creating fake binaries under tmp_path/opt."""
    def _make(name: str, version: str = "1.0.0", exit_code: int = 0, subdir: str = "") -> str:
        base = tmp_path / "opt" / subdir if subdir else tmp_path / "opt"
        return str(write_binary(base / name, version=version, exit_code=exit_code))
    return _make


@pytest.fixture
def link_dir(tmp_path):
    d = tmp_path / "bin"
    d.mkdir()
    return d
