"""
Binary verification by execution.

A binary is considered valid when it exists and its version-reporting
subcommand exits successfully. The trimmed stdout of that call is the
binary's version string; no semantic parsing is done.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Callable

from .common import vlog


DEFAULT_VERSION_FLAG = "--version"


class VerificationError(Exception):
    """Base class for failed verification of a binary."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class MissingPath(VerificationError):
    """Nothing exists at the given path."""

    def __init__(self, path: str):
        super().__init__(path, f"Path doesn't exist: {path}")


class VersionCallFailed(VerificationError):
    """The version call ran but exited non-successfully."""

    def __init__(self, path: str, status: int, version_flag: str = DEFAULT_VERSION_FLAG):
        super().__init__(path, f"Failed call to {version_flag}, got exit status {status}")
        self.status = status


class ExecutionError(VerificationError):
    """The binary could not be spawned."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(path, f"Binary did not execute successfully: {cause}")
        self.cause = cause


class EmptyVersion(VerificationError):
    """The version call succeeded but printed nothing."""

    def __init__(self, path: str):
        super().__init__(path, f"No version output from {path}")


@dataclass(frozen=True)
class VersionOutput:
    """
    Raw result of a version call.

    Attributes:
        returncode: Process exit status (negative if killed by a signal)
        stdout: Captured standard output bytes
    """
    returncode: int
    stdout: bytes


@dataclass(frozen=True)
class VerifiedBinary:
    """
    A binary that passed verification.

    Attributes:
        path: Path the binary was verified at
        version: Trimmed, non-empty version string
    """
    path: str
    version: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"path": self.path, "version": self.version}


VersionRunner = Callable[..., VersionOutput]


def run_version_check(
    path: str,
    version_flag: str = DEFAULT_VERSION_FLAG,
    timeout: float | None = None,
) -> VersionOutput:
    """
    Spawn ``path version_flag`` and capture its stdout and exit status.

    Stderr is discarded and the child gets no stdin. Blocks until the child
    exits, or until ``timeout`` seconds when one is given.

    Raises:
        OSError: If the process cannot be spawned
        subprocess.TimeoutExpired: If a timeout was given and expired
    """
    if os.sep not in path:
        # Bare names resolve against the working directory
        path = os.path.join(os.curdir, path)
    proc = subprocess.run(
        [path, version_flag],
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        stdin=subprocess.DEVNULL,
        timeout=timeout,
        check=False,
    )
    return VersionOutput(returncode=proc.returncode, stdout=proc.stdout or b"")


def decode_version(stdout: bytes) -> str:
    """Decode version output, replacing invalid UTF-8, and trim it."""
    return stdout.decode("utf-8", errors="replace").strip()


def verify_binary(
    path: str,
    runner: VersionRunner = run_version_check,
    version_flag: str = DEFAULT_VERSION_FLAG,
    timeout: float | None = None,
    verbose: bool = False,
) -> str:
    """
    Verify that a binary exists and runs its version subcommand.

    Args:
        path: Path to the binary (symlinks are followed)
        runner: Callable spawning the version call
        version_flag: Argument requesting version output
        timeout: Optional timeout in seconds (None waits indefinitely)
        verbose: Enable verbose logging

    Returns:
        Trimmed version string

    Raises:
        MissingPath: Nothing exists at path; no process is spawned
        VersionCallFailed: The version call exited non-zero
        ExecutionError: The binary could not be spawned
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise MissingPath(path)

    vlog(f"Running {path} {version_flag}", verbose)
    try:
        output = runner(path, version_flag, timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ExecutionError(path, e) from e

    if output.returncode != 0:
        raise VersionCallFailed(path, output.returncode, version_flag)

    version = decode_version(output.stdout)
    vlog(f"  {path}: {version!r}", verbose)
    return version
