"""Tests for configuration loading and target validation."""

import os

import pytest

from module_inventory.config import (
    DEFAULT_WORKERS,
    ScanConfig,
    load_config,
    normalize_extension,
    resolve_target,
)
from module_inventory.exceptions import (
    InvalidConfigError,
    InvalidPathError,
    NotADirectoryTargetError,
    TargetNotFoundError,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test from an empty directory with no MODULE_INVENTORY_* variables."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for key in list(os.environ):
        if key.startswith("MODULE_INVENTORY_"):
            monkeypatch.delenv(key)
    return workdir


class TestScanConfig:
    """Test ScanConfig defaults and validation."""

    def test_defaults(self):
        config = ScanConfig()
        assert config.exclude_dirs == ("node_modules", ".git")
        assert config.include_extensions == (".js", ".mjs")
        assert config.unique is False
        assert config.extractor == "treesitter"
        assert config.timeout_seconds is None
        assert config.max_workers == DEFAULT_WORKERS

    def test_lists_become_tuples(self):
        config = ScanConfig(exclude_dirs=["dist"], include_extensions=["JS", ".CJS"])
        assert config.exclude_dirs == ("dist",)
        assert config.include_extensions == (".js", ".cjs")
        hash(config)

    def test_policy_reflects_settings(self):
        policy = ScanConfig(exclude_dirs=("dist",), max_file_size_mb=1).policy
        assert policy.excluded_dir_names == frozenset({"dist"})
        assert policy.included_extensions == frozenset({".js", ".mjs"})

    def test_size_limit_in_bytes(self):
        assert ScanConfig(max_file_size_mb=1).max_file_size_bytes == 1024 * 1024
        assert ScanConfig(max_file_size_mb=2).max_file_size_bytes == 2 * 1024 * 1024

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"timeout_seconds": 0},
            {"max_file_size_mb": -1},
            {"extractor": "precinct"},
            {"verbosity": "loud"},
            {"include_extensions": ()},
            {"include_extensions": ("",)},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            ScanConfig(**kwargs)

    @pytest.mark.parametrize(
        "kwargs, key",
        [
            ({"workers": "4"}, "workers"),
            ({"workers": True}, "workers"),
            ({"timeout_seconds": "1.5"}, "timeout_seconds"),
            ({"max_file_size_mb": "big"}, "max_file_size_mb"),
            ({"unique": "no"}, "unique"),
            ({"exclude_dirs": 5}, "exclude_dirs"),
            ({"include_extensions": [".js", 3]}, "include_extensions"),
            ({"extractor": 1}, "extractor"),
        ],
    )
    def test_wrong_types(self, kwargs, key):
        """Values of the wrong type are configuration errors, not TypeErrors."""
        with pytest.raises(InvalidConfigError) as exc_info:
            ScanConfig(**kwargs)
        assert exc_info.value.key == key

    def test_numbers_accepted_for_float_fields(self):
        config = ScanConfig(timeout_seconds=2, max_file_size_mb=1)
        assert config.timeout_seconds == 2
        assert config.max_file_size_mb == 1


class TestNormalizeExtension:
    def test_adds_dot_and_lowercases(self):
        assert normalize_extension("JS") == ".js"
        assert normalize_extension(" .Mjs ") == ".mjs"


class TestLoadConfig:
    """Test load_config() source merging."""

    def test_defaults_without_sources(self):
        assert load_config() == ScanConfig()

    def test_overrides(self):
        config = load_config(unique=True, workers=2, quiet=True)
        assert config.unique is True
        assert config.workers == 2
        assert config.verbosity == "quiet"

    def test_none_overrides_ignored(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text("workers = 3\n")

        config = load_config(config_file=config_file, workers=None, unique=None)

        assert config.workers == 3
        assert config.unique is False

    def test_verbose_flag(self):
        assert load_config(verbose=True).verbosity == "verbose"

    def test_explicit_toml_file(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text(
            'exclude_dirs = ["node_modules", "dist"]\n'
            'include_extensions = [".js", ".cjs"]\n'
            "unique = true\n"
        )

        config = load_config(config_file=config_file)

        assert config.exclude_dirs == ("node_modules", "dist")
        assert config.include_extensions == (".js", ".cjs")
        assert config.unique is True

    def test_toml_table(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text('[module-inventory]\nextractor = "regex"\n')

        assert load_config(config_file=config_file).extractor == "regex"

    def test_project_config_discovered(self, isolated_config):
        (isolated_config / "module-inventory.toml").write_text("timeout_seconds = 2.5\n")
        assert load_config().timeout_seconds == 2.5

    def test_explicit_file_overrides_project_config(self, isolated_config, tmp_path):
        (isolated_config / "module-inventory.toml").write_text("workers = 2\n")
        config_file = tmp_path / "settings.toml"
        config_file.write_text("workers = 5\n")

        assert load_config(config_file=config_file).workers == 5

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "settings.toml"
        config_file.write_text("workers = 5\n")
        monkeypatch.setenv("MODULE_INVENTORY_WORKERS", "7")

        assert load_config(config_file=config_file).workers == 7

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("MODULE_INVENTORY_WORKERS", "7")
        assert load_config(workers=1).workers == 1

    def test_env_value_types(self, monkeypatch):
        monkeypatch.setenv("MODULE_INVENTORY_EXCLUDE_DIRS", "node_modules, .git,dist")
        monkeypatch.setenv("MODULE_INVENTORY_UNIQUE", "yes")
        monkeypatch.setenv("MODULE_INVENTORY_TIMEOUT_SECONDS", "1.5")

        config = load_config()

        assert config.exclude_dirs == ("node_modules", ".git", "dist")
        assert config.unique is True
        assert config.timeout_seconds == 1.5

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("MODULE_INVENTORY_WORKERS", "many")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "MODULE_INVENTORY_WORKERS"

    def test_unknown_setting(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text("colour = true\n")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_config(config_file=config_file)
        assert exc_info.value.key == "colour"

    def test_toml_value_of_wrong_type(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text('workers = "4"\n')

        with pytest.raises(InvalidConfigError, match="Invalid configuration for workers"):
            load_config(config_file=config_file)

    def test_malformed_toml(self, tmp_path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text("workers = \n")

        with pytest.raises(InvalidConfigError):
            load_config(config_file=config_file)

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_config(config_file=tmp_path / "absent.toml")


class TestResolveTarget:
    """Test resolve_target()."""

    def test_valid_directory(self, tmp_path):
        assert resolve_target(str(tmp_path)) == tmp_path

    @pytest.mark.parametrize("target", [None, "", 42])
    def test_missing_target(self, target):
        with pytest.raises(InvalidPathError, match="Please provide a target path"):
            resolve_target(target)

    def test_relative_path(self):
        with pytest.raises(InvalidPathError, match="Please provide an absolute path"):
            resolve_target("some/dir")

    def test_nonexistent(self, tmp_path):
        with pytest.raises(TargetNotFoundError):
            resolve_target(tmp_path / "nope")

    def test_file_target(self, tmp_path):
        target = tmp_path / "a.js"
        target.write_text("")
        with pytest.raises(NotADirectoryTargetError, match="Please provide a path to a directory"):
            resolve_target(target)
