"""
Tests for configuration loading — forkpatch.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from forkpatch.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    project_root,
)


class TestLoadConfig:
    def test_load_valid(self, config_file: Path):
        config = load_config(config_file)
        assert config.name == "VibeProxy"
        assert [g.file for g in config.patches] == [
            "vibeproxy-kimi-ui.patch",
            "vibeproxy-sparkle-feed.patch",
        ]
        assert config.external_patches == ("cliproxyapiplus-kimi-support.patch",)
        assert config.assets[0].name == "icon-kimi.png"

    def test_managed_files_union(self, config_file: Path):
        config = load_config(config_file)
        assert config.managed_files == (
            "src/Sources/AuthStatus.swift",
            "src/Sources/ServerManager.swift",
            "src/Info.plist",
        )

    def test_wrapped_format(self, tmp_path: Path):
        path = tmp_path / "forkpatch.yml"
        path.write_text(textwrap.dedent("""\
            forkpatch:
              name: wrapped
              patches:
                - file: a.patch
                  files: [a.txt]
        """))
        config = load_config(path)
        assert config.name == "wrapped"
        assert config.patches[0].display_name == "a.patch"

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "forkpatch.yml"
        path.write_text("")
        config = load_config(path)
        assert config.patches_dir == "patches"
        assert config.assets_dir == "assets"
        assert config.upstream.preferred_ref == "upstream/main"
        assert config.upstream.fallback_ref == "origin/main"
        assert config.managed_files == ()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_not_found_anywhere(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No forkpatch.yml"):
            load_config()

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "forkpatch.yml"
        path.write_text("patches: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "forkpatch.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "forkpatch.yml"
        path.write_text("name: x\nbogus: 1\n")
        with pytest.raises(ConfigError, match="Invalid forkpatch configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_finds_in_parent(self, config_file: Path):
        nested = config_file.parent / "src" / "Sources"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config_file.resolve()

    def test_none_when_absent(self, tmp_path: Path):
        assert find_config_file(tmp_path) is None

    def test_project_root(self, config_file: Path):
        assert project_root(config_file) == config_file.parent.resolve()
