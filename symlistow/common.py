"""
Common utilities shared across symlistow modules.
"""

from __future__ import annotations

import os

from .logging_config import get_logger


def is_ci_environment() -> bool:
    """
    Check if running in a CI/CD environment.

    Returns:
        True if CI indicators are present, False otherwise.
    """
    ci_indicators = [
        "CI",
        "CONTINUOUS_INTEGRATION",
        "GITHUB_ACTIONS",
        "GITLAB_CI",
        "CIRCLECI",
        "TRAVIS",
        "JENKINS_HOME",
        "BUILDKITE",
        "DRONE",
        "SEMAPHORE",
        "APPVEYOR",
        "CODEBUILD_BUILD_ID",
        "TF_BUILD",  # Azure Pipelines
    ]
    return any(os.environ.get(var) for var in ci_indicators)


def display_name_for(path: str) -> str:
    """
    Derive the display name of a binary from its path.

    Trailing separators are ignored, so "/opt/tools/" is named "tools".

    Args:
        path: Path to the binary

    Returns:
        Final path component, or the full path if there is none
        (for "/", "." or a path ending in "..")
    """
    name = os.path.basename(path.rstrip(os.sep))
    if name in ("", os.curdir, os.pardir):
        return path
    return name


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a tracing message.

    Verbose messages are logged at INFO and reach the console. Otherwise
    they are logged at DEBUG, which only a log file records.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or os.environ.get("SYMLISTOW_DEBUG", "0") == "1":
        get_logger().info(msg)
    else:
        get_logger().debug(msg)
