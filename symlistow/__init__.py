"""
symlistow - Version-aware management of binary symlinks.

Core Modules:
- Verification: Run a binary's version call and report its version
- Reconciliation: Create, replace, keep or repair a binary's link
- Prompting: Interactive or forced replacement decisions
- Collection: Batch verification of candidate binaries
- Bulk linking: Config-driven linking into a link directory
"""

__version__ = "0.1.0"
__author__ = "symlistow Contributors"

VERSION = __version__

# Verification
from .verification import (
    VerificationError,
    MissingPath,
    VersionCallFailed,
    ExecutionError,
    EmptyVersion,
    VersionOutput,
    VerifiedBinary,
    run_version_check,
    verify_binary,
)

# Prompting
from .prompt import (
    parse_yes_no,
    prompt_until_valid,
    describe_version_change,
    should_replace,
)

# Reconciliation
from .reconcile import LinkResult, reconcile_link

# Collection
from .collectors import append_verified_binary, collect_verified_binaries

# Configuration
from .config import (
    Config,
    BinaryConfig,
    load_config,
    load_config_file,
    validate_config,
)

# Bulk linking
from .bulk import (
    LinkSpec,
    BulkLinkResult,
    link_binaries,
    link_configured_binaries,
    specs_from_config,
    specs_from_paths,
)

# Logging configuration
from .logging_config import (
    setup_logging,
    get_logger,
)

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Verification
    "VerificationError",
    "MissingPath",
    "VersionCallFailed",
    "ExecutionError",
    "EmptyVersion",
    "VersionOutput",
    "VerifiedBinary",
    "run_version_check",
    "verify_binary",
    # Prompting
    "parse_yes_no",
    "prompt_until_valid",
    "describe_version_change",
    "should_replace",
    # Reconciliation
    "LinkResult",
    "reconcile_link",
    # Collection
    "append_verified_binary",
    "collect_verified_binaries",
    # Configuration
    "Config",
    "BinaryConfig",
    "load_config",
    "load_config_file",
    "validate_config",
    # Bulk linking
    "LinkSpec",
    "BulkLinkResult",
    "link_binaries",
    "link_configured_binaries",
    "specs_from_config",
    "specs_from_paths",
    # Logging
    "setup_logging",
    "get_logger",
]
