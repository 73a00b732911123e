"""
Tests for configuration parsing (symlistow/config.py).
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from symlistow.config import (
    DEFAULT_LINK_DIR,
    BinaryConfig,
    Config,
    load_config_file,
    load_config,
    validate_config,
    _load_yaml,
    _load_json,
)


CONFIG_VALID = """\
version: 1
link_dir: /tmp/links
interactive: false
version_flag: -V
timeout_seconds: 10
binaries:
  rg: /opt/ripgrep-14.1.0/rg
  fd:
    source: /opt/fd/bin/fd
    link_name: fdfind
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(content: str, name: str = "config.yml") -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return _write


@pytest.fixture
def no_standard_locations():
    with patch("symlistow.config.CONFIG_LOCATIONS", []):
        yield


class TestBinaryConfig:
    """Tests for BinaryConfig dataclass."""

    def test_from_bare_path(self):
        binary = BinaryConfig.from_value("rg", "/opt/rg")
        assert binary.source == "/opt/rg"
        assert binary.link_name == "rg"

    def test_from_mapping(self):
        binary = BinaryConfig.from_value("fd", {"source": "/opt/fd", "link_name": "fdfind"})
        assert binary.source == "/opt/fd"
        assert binary.link_name == "fdfind"

    def test_mapping_defaults_link_name(self):
        binary = BinaryConfig.from_value("fd", {"source": "/opt/fd"})
        assert binary.link_name == "fd"

    def test_missing_source(self):
        with pytest.raises(ValueError, match="no source path"):
            BinaryConfig.from_value("fd", {})

    def test_link_name_with_separator(self):
        with pytest.raises(ValueError, match="Invalid link name"):
            BinaryConfig(source="/opt/fd", link_name="sub/fd")

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            BinaryConfig.from_value("fd", ["/opt/fd"])

    def test_expanded_source(self):
        binary = BinaryConfig(source="~/tools/rg", link_name="rg")
        assert binary.expanded_source == os.path.expanduser("~/tools/rg")


class TestConfig:
    """Tests for Config dataclass."""

    def test_defaults(self):
        config = Config()
        assert config.version == 1
        assert config.link_dir == DEFAULT_LINK_DIR
        assert config.interactive is True
        assert config.version_flag == "--version"
        assert config.timeout_seconds is None
        assert config.binaries == {}

    def test_invalid_version(self):
        with pytest.raises(ValueError, match="Unsupported config version"):
            Config(version=2)

    def test_empty_version_flag(self):
        with pytest.raises(ValueError, match="version_flag"):
            Config(version_flag="")

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="timeout_seconds"):
            Config(timeout_seconds=0)

    def test_from_dict_empty_binaries(self):
        config = Config.from_dict({"binaries": None})
        assert config.binaries == {}

    def test_merge_prefers_self(self):
        high = Config(link_dir="/high", binaries={"rg": BinaryConfig("/high/rg", "rg")})
        low = Config(
            link_dir="/low",
            version_flag="-V",
            timeout_seconds=5,
            binaries={
                "rg": BinaryConfig("/low/rg", "rg"),
                "fd": BinaryConfig("/low/fd", "fd"),
            },
        )

        merged = high.merge_with(low)

        assert merged.link_dir == "/high"
        assert merged.version_flag == "-V"
        assert merged.timeout_seconds == 5
        assert merged.binaries["rg"].source == "/high/rg"
        assert merged.binaries["fd"].source == "/low/fd"

    def test_merge_default_link_dir_falls_through(self):
        merged = Config().merge_with(Config(link_dir="/low"))
        assert merged.link_dir == "/low"

    def test_merge_unset_interactive_falls_through(self):
        assert Config(interactive=False).merge_with(Config()).interactive is False
        assert Config().merge_with(Config(interactive=False)).interactive is False

    def test_merge_explicit_default_wins(self):
        """Test a value set to its default still overrides lower priority."""
        high = Config.from_dict({"interactive": True, "link_dir": DEFAULT_LINK_DIR})
        low = Config(link_dir="/low", interactive=False)

        merged = high.merge_with(low)

        assert merged.interactive is True
        assert merged.link_dir == DEFAULT_LINK_DIR

    def test_is_set(self):
        config = Config.from_dict({"interactive": True})
        assert config.is_set("interactive")
        assert not config.is_set("link_dir")
        assert Config(timeout_seconds=3).is_set("timeout_seconds")


class TestLoadConfigFile:
    """Tests for loading single files."""

    def test_load_yaml(self, write_config):
        config = load_config_file(write_config(CONFIG_VALID))

        assert config is not None
        assert config.link_dir == "/tmp/links"
        assert config.interactive is False
        assert config.version_flag == "-V"
        assert config.timeout_seconds == 10
        assert config.binaries["rg"].source == "/opt/ripgrep-14.1.0/rg"
        assert config.binaries["fd"].link_name == "fdfind"
        assert config.source.endswith("config.yml")

    def test_load_json(self, write_config):
        path = write_config(json.dumps({"link_dir": "/j", "binaries": {"rg": "/opt/rg"}}), "config.json")
        config = load_config_file(path)
        assert config.link_dir == "/j"
        assert "rg" in config.binaries

    def test_missing_file(self, tmp_path):
        assert load_config_file(str(tmp_path / "missing.yml")) is None

    def test_invalid_yaml(self, write_config):
        assert load_config_file(write_config("binaries: [unclosed")) is None

    def test_invalid_values(self, write_config):
        assert load_config_file(write_config("version: 3\n")) is None

    def test_empty_file_is_defaults(self, write_config):
        config = load_config_file(write_config(""))
        assert config is not None
        assert config.binaries == {}

    def test_raw_loaders(self, write_config):
        assert _load_yaml(write_config("a: 1\n")) == {"a": 1}
        assert _load_yaml(write_config("- 1\n")) == {}
        assert _load_json(write_config("{bad", "bad.json")) is None


class TestLoadConfig:
    """Tests for merged loading."""

    def test_defaults_when_nothing_found(self, no_standard_locations):
        assert load_config() == Config()

    def test_custom_path(self, write_config, no_standard_locations):
        config = load_config(write_config(CONFIG_VALID))
        assert config.link_dir == "/tmp/links"

    def test_custom_path_missing_raises(self, tmp_path, no_standard_locations):
        with pytest.raises(ValueError, match="Could not load config"):
            load_config(str(tmp_path / "nope.yml"))

    def test_custom_path_overrides_standard_location(self, tmp_path, write_config):
        user = write_config("link_dir: /user\nbinaries:\n  fd: /opt/fd\n", "user.yml")
        custom = write_config("link_dir: /custom\n", "custom.yml")

        with patch("symlistow.config.CONFIG_LOCATIONS", [user]):
            config = load_config(custom)

        assert config.link_dir == "/custom"
        assert "fd" in config.binaries

    def test_project_interactive_overrides_user(self, write_config):
        project = write_config("interactive: true\n", "project.yml")
        user = write_config("interactive: false\nlink_dir: /user\n", "user.yml")

        with patch("symlistow.config.CONFIG_LOCATIONS", [project, user]):
            config = load_config()

        assert config.interactive is True
        assert config.link_dir == "/user"


class TestValidateConfig:
    """Tests for configuration warnings."""

    def test_clean_config(self):
        config = Config(binaries={"rg": BinaryConfig("/opt/rg", "rg")})
        assert validate_config(config) == []

    def test_duplicate_link_names(self):
        config = Config(binaries={
            "rg13": BinaryConfig("/opt/rg13/rg", "rg"),
            "rg14": BinaryConfig("/opt/rg14/rg", "rg"),
        })
        warnings = validate_config(config)
        assert len(warnings) == 1
        assert "share link name 'rg'" in warnings[0]

    def test_relative_source(self):
        config = Config(binaries={"rg": BinaryConfig("bin/rg", "rg")})
        warnings = validate_config(config)
        assert "relative path" in warnings[0]
