"""
Replacement decisions on version mismatch.

Interactive mode asks the operator until a valid yes/no answer is given;
non-interactive mode always replaces.
"""

from __future__ import annotations

import re
from typing import Callable

from packaging import version as pkg_version


VERSION_RE = re.compile(r"(\d+(?:\.\d+)+)")

YES_RESPONSES = ("", "y", "yes")
NO_RESPONSES = ("n", "no")

INVALID_INPUT_MESSAGE = "Invalid input. Please enter 'y' for yes or 'n' for no."
REPLACE_QUESTION = "Replace existing with new? [Y/n]: "


def parse_yes_no(response: str) -> bool | None:
    """
    Parse a yes/no answer.

    Empty input means yes. Returns None for anything unrecognized.
    """
    answer = response.strip().lower()
    if answer in YES_RESPONSES:
        return True
    if answer in NO_RESPONSES:
        return False
    return None


def _read_response(read_line: Callable[[str], str], question: str) -> str:
    try:
        return read_line(question)
    except EOFError:
        # Closed stdin reads as an empty line
        return ""


def prompt_until_valid(
    question: str = REPLACE_QUESTION,
    read_line: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
) -> bool:
    """
    Ask a yes/no question until a valid answer is given.

    Args:
        question: Prompt shown before each read
        read_line: Reads one line, given the prompt (``input`` by default)
        write: Emits feedback lines

    Returns:
        True for yes (including empty input), False for no
    """
    read_line = read_line or input
    write = write or print
    while True:
        answer = parse_yes_no(_read_response(read_line, question))
        if answer is not None:
            return answer
        write(INVALID_INPUT_MESSAGE)


def describe_version_change(existing_version: str, new_version: str) -> str:
    """
    Classify a version change for display.

    Returns:
        "upgrade", "downgrade", or "change" when the versions cannot be ordered
    """
    m_old = VERSION_RE.search(existing_version)
    m_new = VERSION_RE.search(new_version)
    if not m_old or not m_new:
        return "change"

    try:
        old = pkg_version.parse(m_old.group(1))
        new = pkg_version.parse(m_new.group(1))
    except pkg_version.InvalidVersion:
        return "change"

    if new > old:
        return "upgrade"
    if new < old:
        return "downgrade"
    return "change"


def should_replace(
    display_name: str,
    existing_version: str,
    new_version: str,
    interactive: bool,
    read_line: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
) -> bool:
    """
    Decide whether an existing link with a different version is replaced.

    Args:
        display_name: Binary name for display
        existing_version: Version reported by the current link
        new_version: Version reported by the source binary
        interactive: Ask the operator instead of forcing replacement
        read_line: Line reader used for interactive prompts
        write: Output function for notices

    Returns:
        True to replace, False to keep the existing link
    """
    write = write or print
    if not interactive:
        write(f"Non-interactive mode: forcing replacement of {display_name}")
        return True

    change = describe_version_change(existing_version, new_version)
    write(f"\n{display_name} version mismatch detected ({change}):")
    write(f"  Existing: {existing_version}")
    write(f"  New:      {new_version}")

    return prompt_until_valid(REPLACE_QUESTION, read_line=read_line, write=write)
