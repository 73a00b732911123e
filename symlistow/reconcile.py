"""
Reconciliation of a binary link with its source binary.

Brings the symlink at a link path into agreement with a verified source
binary. The version reported by running the linked binary is the only source
of truth for what is currently linked; link targets and metadata are never
inspected.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Callable

from .common import vlog
from .prompt import should_replace
from .verification import VerificationError, verify_binary


ACTION_CREATED = "created"
ACTION_UNCHANGED = "unchanged"
ACTION_REPLACED = "replaced"
ACTION_KEPT = "kept"
ACTION_REPAIRED = "repaired"
ACTION_FAILED = "failed"


@dataclass(frozen=True)
class LinkResult:
    """
    Result of reconciling a single link.

    Attributes:
        name: Binary display name
        link_path: Location of the link
        source_path: Binary the link should point to
        source_version: Version reported by the source binary
        action: What happened ("created", "unchanged", "replaced", "kept",
            "repaired", "failed")
        existing_version: Version reported by the link before reconciling,
            if it verified
        success: Whether the link ended up in the intended state
        error_message: Error message if failed
    """
    name: str
    link_path: str
    source_path: str
    source_version: str
    action: str
    existing_version: str | None = None
    success: bool = True
    error_message: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "link_path": self.link_path,
            "source_path": self.source_path,
            "source_version": self.source_version,
            "action": self.action,
            "existing_version": self.existing_version,
            "success": self.success,
            "error_message": self.error_message,
        }


def _create_link(
    link_path: str,
    source_path: str,
    name: str,
    linker: Callable[[str, str], None],
    verbose: bool,
) -> str | None:
    """Create the symlink, reporting failure. Returns the error message, if any."""
    try:
        linker(source_path, link_path)
    except OSError as e:
        message = f"Failed to create {name} symlink: {e}"
        print(f"✗ Error: {message}", file=sys.stderr)
        vlog(f"  symlink({source_path!r}, {link_path!r}) failed: {e}", verbose)
        return message
    return None


def reconcile_link(
    link_path: str,
    source_path: str,
    name: str,
    source_version: str,
    interactive: bool,
    verifier: Callable[[str], str] = verify_binary,
    confirm: Callable[[str, str, str, bool], bool] = should_replace,
    linker: Callable[[str, str], None] = os.symlink,
    remover: Callable[[str], None] = os.remove,
    verbose: bool = False,
) -> LinkResult:
    """
    Create, replace, keep or repair the link for a binary.

    Never raises: every failure is reported on the console and returned in
    the result.

    Args:
        link_path: Location where the symlink should live
        source_path: Path to the actual binary
        name: Binary name for display
        source_version: Version string of the source binary
        interactive: Ask before replacing a link with a different version
        verifier: Returns the version of the binary at a path
        confirm: Replacement decision (name, existing, new, interactive)
        linker: Symlink primitive, called as linker(source, link)
        remover: Removes the existing entry at the link path
        verbose: Enable verbose logging

    Returns:
        LinkResult describing the outcome
    """
    link_path = os.fspath(link_path)
    source_path = os.fspath(source_path)

    def result(action: str, existing: str | None = None, error: str | None = None) -> LinkResult:
        return LinkResult(
            name=name,
            link_path=link_path,
            source_path=source_path,
            source_version=source_version,
            action=action,
            existing_version=existing,
            success=error is None,
            error_message=error,
        )

    # lexists: a dangling symlink is present and goes through repair
    if not os.path.lexists(link_path):
        print(f"Creating symlink for {name}...")
        error = _create_link(link_path, source_path, name, linker, verbose)
        if error:
            return result(ACTION_FAILED, error=error)
        print(f"✓ {name} symlink created successfully")
        return result(ACTION_CREATED)

    try:
        existing_version = verifier(link_path)
    except VerificationError as e:
        print(f"Warning: Existing {name} is invalid: {e}", file=sys.stderr)
        print("Removing and recreating symlink...", file=sys.stderr)
        try:
            remover(link_path)
        except OSError as remove_error:
            vlog(f"  Ignoring failed removal of {link_path}: {remove_error}", verbose)
        error = _create_link(link_path, source_path, name, linker, verbose)
        if error:
            return result(ACTION_FAILED, error=error)
        print(f"✓ {name} symlink created successfully")
        return result(ACTION_REPAIRED)

    if existing_version == source_version:
        print(f"✓ {name} symlink already exists with same version")
        return result(ACTION_UNCHANGED, existing=existing_version)

    if not confirm(name, existing_version, source_version, interactive):
        print(f"Keeping existing {name} symlink")
        return result(ACTION_KEPT, existing=existing_version)

    print(f"Replacing {name} symlink...")
    try:
        remover(link_path)
    except OSError as e:
        message = f"Failed to remove existing {name}: {e}"
        print(f"✗ Error: {message}", file=sys.stderr)
        return result(ACTION_FAILED, existing=existing_version, error=message)

    error = _create_link(link_path, source_path, name, linker, verbose)
    if error:
        return result(ACTION_FAILED, existing=existing_version, error=error)
    print(f"✓ {name} symlink replaced successfully")
    return result(ACTION_REPLACED, existing=existing_version)
