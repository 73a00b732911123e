"""
Batch verification of candidate binaries.
"""

from __future__ import annotations

import os
import sys
from typing import Callable, Iterable

from .common import display_name_for
from .verification import EmptyVersion, VerificationError, VerifiedBinary, verify_binary


def append_verified_binary(
    path: str,
    versions: list[VerifiedBinary],
    verifier: Callable[[str], str] = verify_binary,
) -> bool:
    """
    Verify one binary and append it to a collection on success.

    Args:
        path: Path to the binary
        versions: Collection receiving the verified binary
        verifier: Returns the version of the binary at a path

    Returns:
        True if the binary was verified and appended, False otherwise
    """
    path = os.fspath(path)
    name = display_name_for(path)
    try:
        version = verifier(path)
        if not version:
            raise EmptyVersion(path)
    except VerificationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return False

    print(f"✓ {name}: {version}")
    versions.append(VerifiedBinary(path=path, version=version))
    return True


def collect_verified_binaries(
    paths: Iterable[str],
    verifier: Callable[[str], str] = verify_binary,
) -> list[VerifiedBinary]:
    """
    Verify candidate binaries, keeping those that pass.

    Failures are reported and skipped; order follows the input and
    duplicates are kept.
    """
    versions: list[VerifiedBinary] = []
    for path in paths:
        append_verified_binary(path, versions, verifier=verifier)
    return versions
