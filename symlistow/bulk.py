"""
Bulk linking of binaries into a link directory.

Verifies each source binary, then reconciles its link, one binary at a time.
A failure for one binary is reported and never stops the rest.
"""

from __future__ import annotations

import functools
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .collectors import append_verified_binary
from .common import display_name_for, vlog
from .config import Config
from .prompt import should_replace
from .reconcile import ACTION_FAILED, LinkResult, reconcile_link
from .verification import DEFAULT_VERSION_FLAG, VerifiedBinary, verify_binary


@dataclass(frozen=True)
class LinkSpec:
    """
    A binary to be linked.

    Attributes:
        name: Link name inside the link directory
        source_path: Path to the concrete executable
    """
    name: str
    source_path: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "source_path": self.source_path}


@dataclass(frozen=True)
class BulkLinkResult:
    """
    Result of linking a set of binaries.

    Attributes:
        link_dir: Directory holding the links
        results: Reconciliation results for verified binaries
        unverified: Source paths that failed verification
        duration_seconds: Total execution time
    """
    link_dir: str
    results: tuple[LinkResult, ...]
    unverified: tuple[str, ...]
    duration_seconds: float

    @property
    def failures(self) -> tuple[LinkResult, ...]:
        return tuple(r for r in self.results if not r.success)

    @property
    def success(self) -> bool:
        return not self.unverified and not self.failures

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "link_dir": self.link_dir,
            "results": [r.to_dict() for r in self.results],
            "unverified": list(self.unverified),
            "success": self.success,
            "duration_seconds": self.duration_seconds,
        }

    def summary(self) -> str:
        """Human-readable summary."""
        counts: dict[str, int] = {}
        for r in self.results:
            counts[r.action] = counts.get(r.action, 0) + 1
        actions = ", ".join(f"{action}: {n}" for action, n in sorted(counts.items())) or "none"
        return f"""
Link Summary:
  Link directory: {self.link_dir}
  Linked: {len(self.results) - len(self.failures)}/{len(self.results)}
  Actions: {actions}
  Failed verification: {len(self.unverified)}
  Duration: {self.duration_seconds:.1f}s
"""


def specs_from_paths(paths: Sequence[str]) -> list[LinkSpec]:
    """
    Build link specs named after each path's final component.

    Raises:
        ValueError: If a path has no final component usable as a link name
    """
    specs = []
    for path in paths:
        path = os.fspath(path)
        name = display_name_for(path)
        if os.sep in name or name in (os.curdir, os.pardir):
            raise ValueError(f"Cannot derive a link name from {path!r}")
        specs.append(LinkSpec(name=name, source_path=path))
    return specs


def specs_from_config(config: Config) -> list[LinkSpec]:
    """Build link specs for the binaries declared in a config."""
    return [
        LinkSpec(name=binary.link_name, source_path=binary.expanded_source)
        for binary in config.binaries.values()
    ]


def link_binaries(
    specs: Sequence[LinkSpec],
    link_dir: str,
    interactive: bool,
    verifier: Callable[[str], str] | None = None,
    confirm: Callable[[str, str, str, bool], bool] = should_replace,
    version_flag: str = DEFAULT_VERSION_FLAG,
    timeout: float | None = None,
    verbose: bool = False,
) -> BulkLinkResult:
    """
    Verify each source binary and reconcile its link in link_dir.

    Args:
        specs: Binaries to link (relative sources resolve against the working directory)
        link_dir: Directory holding the links (created if missing)
        interactive: Ask before replacing a link with a different version
        verifier: Returns the version of the binary at a path; defaults to
            verify_binary with version_flag and timeout
        confirm: Replacement decision for version mismatches
        version_flag: Argument making a binary print its version
        timeout: Optional limit on each version call
        verbose: Enable verbose logging

    Returns:
        BulkLinkResult with per-binary outcomes
    """
    start_time = time.time()
    link_dir = os.path.expanduser(os.fspath(link_dir))

    if verifier is None:
        verifier = functools.partial(
            verify_binary,
            version_flag=version_flag,
            timeout=timeout,
            verbose=verbose,
        )

    vlog(f"Verifying {len(specs)} binaries...", verbose)
    verified: list[tuple[LinkSpec, VerifiedBinary]] = []
    unverified: list[str] = []
    for spec in specs:
        # Link targets resolve against the link's directory, not ours
        source_path = os.path.abspath(spec.source_path)
        found: list[VerifiedBinary] = []
        if append_verified_binary(source_path, found, verifier=verifier):
            verified.append((spec, found[0]))
        else:
            unverified.append(source_path)

    try:
        Path(link_dir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        message = f"Cannot create link directory {link_dir}: {e}"
        print(f"✗ Error: {message}", file=sys.stderr)
        results = tuple(
            LinkResult(
                name=spec.name,
                link_path=os.path.join(link_dir, spec.name),
                source_path=binary.path,
                source_version=binary.version,
                action=ACTION_FAILED,
                success=False,
                error_message=message,
            )
            for spec, binary in verified
        )
        return BulkLinkResult(link_dir, results, tuple(unverified), time.time() - start_time)

    results = []
    for spec, binary in verified:
        vlog(f"Reconciling {spec.name} -> {binary.path}", verbose)
        results.append(reconcile_link(
            os.path.join(link_dir, spec.name),
            binary.path,
            spec.name,
            binary.version,
            interactive,
            verifier=verifier,
            confirm=confirm,
            verbose=verbose,
        ))

    return BulkLinkResult(
        link_dir=link_dir,
        results=tuple(results),
        unverified=tuple(unverified),
        duration_seconds=time.time() - start_time,
    )


def link_configured_binaries(
    config: Config,
    interactive: bool | None = None,
    link_dir: str | None = None,
    confirm: Callable[[str, str, str, bool], bool] = should_replace,
    verbose: bool = False,
) -> BulkLinkResult:
    """
    Link every binary declared in a config.

    Args:
        config: Loaded configuration
        interactive: Override for config.interactive
        link_dir: Override for config.link_dir
        confirm: Replacement decision for version mismatches
        verbose: Enable verbose logging
    """
    return link_binaries(
        specs_from_config(config),
        link_dir if link_dir is not None else config.expanded_link_dir,
        config.interactive if interactive is None else interactive,
        confirm=confirm,
        version_flag=config.version_flag,
        timeout=config.timeout_seconds,
        verbose=verbose,
    )
