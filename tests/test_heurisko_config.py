"""Tests for option validation and persisted defaults."""

import json
import os
import pwd

import pytest

from errors import ConfigError
from heurisko import build_parser
from heurisko_config import (
    DefaultsManager,
    HeuriskoDefaults,
    SearchConfig,
    SortMode,
    build_config,
    parse_depth,
    parse_mask,
    resolve_owner,
)


def config_from(argv, defaults=None, owner_resolver=lambda name: 4242):
    return build_config(build_parser().parse_args(argv), defaults, owner_resolver=owner_resolver)


class TestParseMask:
    @pytest.mark.parametrize("text, expected", [("754", 0o754), ("0755", 0o755), ("0", 0), ("7", 0o7)])
    def test_valid(self, text, expected):
        assert parse_mask(text) == expected

    @pytest.mark.parametrize("text", ["789", "abc", "", "-644", "7777", "6 4"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            parse_mask(text)

    def test_non_octal_digit_message(self):
        with pytest.raises(ConfigError, match="octal"):
            parse_mask("648")


class TestParseDepth:
    def test_valid(self):
        assert parse_depth("0", "-f") == 0
        assert parse_depth("12", "-t") == 12

    @pytest.mark.parametrize("text", ["-1", "+1", "1.5", "two", ""])
    def test_invalid_names_flag(self, text):
        with pytest.raises(ConfigError, match="'-t'"):
            parse_depth(text, "-t")


class TestResolveOwner:
    def test_unknown_user(self):
        with pytest.raises(ConfigError, match="doesn't exist"):
            resolve_owner("no-such-user-heurisko")

    def test_current_user(self):
        try:
            username = pwd.getpwuid(os.getuid()).pw_name
        except KeyError:
            pytest.skip("current uid has no passwd entry")
        assert resolve_owner(username) == os.getuid()


class TestBuildConfig:
    def test_defaults(self):
        config = config_from([])
        assert config == SearchConfig()
        assert config.start_directory == "."
        assert config.terminator == "\n"
        assert config.sort_mode is SortMode.PATH

    def test_all_options(self):
        config = config_from(
            ["-n", "log", "-s", "s", "-m", "640", "-u", "ana", "-f", "1", "-t", "3", "-a", "-0", "/var"]
        )
        assert config.start_directory == "/var"
        assert config.name == "log"
        assert config.sort_mode is SortMode.SIZE
        assert config.mask == 0o640
        assert config.owner_uid == 4242
        assert config.owner_name == "ana"
        assert config.min_depth == 1
        assert config.max_depth == 3
        assert config.show_all is True
        assert config.terminator == "\0"

    def test_sort_flags(self):
        assert config_from(["-s", "f"]).sort_mode is SortMode.NAME
        assert config_from(["-s", "p"]).sort_mode is SortMode.PATH

    def test_clustered_flags(self):
        config = config_from(["-a0"])
        assert config.show_all is True
        assert config.terminator == "\0"

    def test_resolver_error_propagates(self):
        def unknown(name):
            raise ConfigError(f"User '{name}' doesn't exist.")

        with pytest.raises(ConfigError, match="ghost"):
            config_from(["-u", "ghost"], owner_resolver=unknown)

    def test_resolver_not_called_without_user(self):
        def fail(name):
            raise AssertionError("should not resolve")

        config_from(["-n", "x"], owner_resolver=fail)

    def test_min_greater_than_max_is_allowed(self):
        config = config_from(["-f", "3", "-t", "1"])
        assert (config.min_depth, config.max_depth) == (3, 1)

    def test_stored_defaults_apply_when_flags_missing(self):
        defaults = HeuriskoDefaults(sort="size", show_all=True, null_terminator=True)
        config = config_from([], defaults)
        assert config.sort_mode is SortMode.SIZE
        assert config.show_all is True
        assert config.terminator == "\0"

    def test_flags_override_stored_defaults(self):
        defaults = HeuriskoDefaults(sort="size")
        assert config_from(["-s", "f"], defaults).sort_mode is SortMode.NAME

    def test_config_is_immutable(self):
        config = config_from([])
        with pytest.raises(AttributeError):
            config.name = "x"

    def test_describe_lists_set_filters(self):
        described = config_from(["-m", "644", "-u", "ana"]).describe()
        assert described["Permissions"] == "644"
        assert described["Owner"] == "ana (4242)"
        assert "Name contains" not in described


class TestDefaultsManager:
    def test_missing_file_gives_defaults(self, tmp_path):
        manager = DefaultsManager(tmp_path / "cfg")
        assert manager.load() == HeuriskoDefaults()
        assert not (tmp_path / "cfg").exists()

    def test_save_and_load(self, tmp_path):
        manager = DefaultsManager(tmp_path / "cfg")
        manager.save(HeuriskoDefaults(sort="name", show_all=True))
        assert manager.load() == HeuriskoDefaults(sort="name", show_all=True, null_terminator=False)

    def test_corrupted_file_gives_defaults(self, tmp_path):
        manager = DefaultsManager(tmp_path)
        manager.config_file.write_text("{not json")
        assert manager.load() == HeuriskoDefaults()

    def test_unknown_sort_value_ignored(self, tmp_path):
        manager = DefaultsManager(tmp_path)
        manager.config_file.write_text(json.dumps({"sort": "mtime", "show_all": True}))
        assert manager.load() == HeuriskoDefaults(sort="path", show_all=True)

    def test_reset(self, tmp_path):
        manager = DefaultsManager(tmp_path)
        manager.save(HeuriskoDefaults(sort="size"))
        manager.reset()
        assert not manager.config_file.exists()
        manager.reset()

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HEURISKO_HOME", str(tmp_path / "env-home"))
        assert DefaultsManager().config_file == tmp_path / "env-home" / "config.json"
