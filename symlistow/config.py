"""
Configuration file parsing and management.

Supports YAML configuration files, and JSON files by extension.
Merges configurations from multiple sources (project → user → system → defaults).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from typing import Any

import yaml

from .common import vlog
from .verification import DEFAULT_VERSION_FLAG


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".symlistow.yml",                              # Project root (highest priority)
    ".symlistow.yaml",                             # Alternative extension
    os.path.expanduser("~/.config/symlistow/config.yml"),  # User global
    os.path.expanduser("~/.config/symlistow/config.yaml"),
    "/etc/symlistow/config.yml",                   # System global
    "/etc/symlistow/config.yaml",
]

DEFAULT_LINK_DIR = "~/.local/bin"


@dataclass(frozen=True)
class BinaryConfig:
    """
    Configuration for a single linked binary.

    Attributes:
        source: Path to the concrete executable
        link_name: Name of the link inside the link directory
    """
    source: str
    link_name: str

    def __post_init__(self):
        if not self.source:
            raise ValueError(f"Binary '{self.link_name}' has no source path")
        if not self.link_name or os.sep in self.link_name:
            raise ValueError(f"Invalid link name: {self.link_name!r}")

    @staticmethod
    def from_value(name: str, data: str | dict[str, Any]) -> BinaryConfig:
        """Create BinaryConfig from a bare source path or a mapping."""
        if isinstance(data, str):
            return BinaryConfig(source=data, link_name=name)
        if not isinstance(data, dict):
            raise TypeError(f"Binary '{name}' must be a path or a mapping")
        return BinaryConfig(
            source=data.get("source", ""),
            link_name=data.get("link_name", name),
        )

    @property
    def expanded_source(self) -> str:
        return os.path.expanduser(self.source)


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for symlistow.

    Attributes:
        version: Config schema version
        link_dir: Directory holding the links
        interactive: Prompt before replacing a link with a different version
        version_flag: Argument making a binary print its version
        timeout_seconds: Optional limit on a version call (None waits forever)
        binaries: Binaries to link, keyed by name
        source: Path to the configuration file that was loaded
        explicit_keys: Keys the configuration file set, even to default values
    """
    version: int = 1
    link_dir: str = DEFAULT_LINK_DIR
    interactive: bool = True
    version_flag: str = DEFAULT_VERSION_FLAG
    timeout_seconds: float | None = None
    binaries: dict[str, BinaryConfig] = field(default_factory=dict)
    source: str = ""
    explicit_keys: frozenset[str] = field(default_factory=frozenset, compare=False)

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if not self.version_flag:
            raise ValueError("version_flag must not be empty")

        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be positive or null"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        binaries_data = data.get("binaries") or {}
        binaries = {
            name: BinaryConfig.from_value(name, value)
            for name, value in binaries_data.items()
        }

        return Config(
            version=data.get("version", 1),
            link_dir=data.get("link_dir", DEFAULT_LINK_DIR),
            interactive=data.get("interactive", True),
            version_flag=data.get("version_flag", DEFAULT_VERSION_FLAG),
            timeout_seconds=data.get("timeout_seconds"),
            binaries=binaries,
            source=source,
            explicit_keys=frozenset(key for key in data if key != "binaries"),
        )

    @property
    def expanded_link_dir(self) -> str:
        return os.path.expanduser(self.link_dir)

    def is_set(self, key: str) -> bool:
        """Whether key was given explicitly or differs from its default."""
        if key in self.explicit_keys:
            return True
        default = next(f.default for f in fields(self) if f.name == key)
        return getattr(self, key) != default

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A value set in this config wins even when it equals the default.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        def pick(key: str):
            return getattr(self if self.is_set(key) else other, key)

        merged_binaries = dict(other.binaries)
        merged_binaries.update(self.binaries)

        return Config(
            version=self.version,
            link_dir=pick("link_dir"),
            interactive=pick("interactive"),
            version_flag=pick("version_flag"),
            timeout_seconds=pick("timeout_seconds"),
            binaries=merged_binaries,
            source=self.source or other.source,
            explicit_keys=self.explicit_keys | other.explicit_keys,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """
    Load JSON configuration file.

    Returns:
        Parsed configuration dictionary, or None if file invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file (.json is parsed as JSON, anything else as YAML)
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (if provided)
    2. Project .symlistow.yml
    3. User ~/.config/symlistow/config.yml
    4. System /etc/symlistow/config.yml
    5. Default configuration

    Raises:
        ValueError: If custom_path is provided but file cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)
        vlog(f"Using custom config: {custom_path}", verbose)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    # First config has highest priority
    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration and return list of warnings.

    Args:
        config: Config object to validate

    Returns:
        List of validation warning messages (empty if valid)
    """
    warnings = []

    seen_links: dict[str, str] = {}
    for name, binary in config.binaries.items():
        if binary.link_name in seen_links:
            warnings.append(
                f"Binaries '{seen_links[binary.link_name]}' and '{name}' "
                f"share link name '{binary.link_name}'"
            )
        else:
            seen_links[binary.link_name] = name

        if not os.path.isabs(binary.expanded_source):
            warnings.append(f"Binary '{name}': source is a relative path ({binary.source})")

    return warnings
