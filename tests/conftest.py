"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path

import pytest

from forkpatch.adapters.mock import InMemoryVcs
from forkpatch.core.config.loader import load_config
from forkpatch.core.models.patchset import PatchConfig

CONFIG_YML = textwrap.dedent("""\
    name: VibeProxy
    patches_dir: patches
    assets_dir: assets
    upstream:
      remote: upstream
      fallback_remote: origin
      branch: main
    patches:
      - file: vibeproxy-kimi-ui.patch
        label: Kimi UI
        files:
          - src/Sources/AuthStatus.swift
          - src/Sources/ServerManager.swift
      - file: vibeproxy-sparkle-feed.patch
        label: Sparkle feed
        files:
          - src/Info.plist
    external_patches:
      - cliproxyapiplus-kimi-support.patch
    assets:
      - name: icon-kimi.png
        destination: src/Sources/Resources/icon-kimi.png
""")

UPSTREAM_FILES = {
    "src/Sources/AuthStatus.swift": "struct AuthStatus {\n    let ok: Bool\n}\n",
    "src/Sources/ServerManager.swift": "final class ServerManager {\n    func start() {}\n}\n",
    "src/Info.plist": "<plist>\n  <key>SUFeedURL</key>\n  <string>upstream</string>\n</plist>\n",
}


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write forkpatch.yml at the root of a temp project."""
    path = tmp_path / "forkpatch.yml"
    path.write_text(CONFIG_YML)
    return path


@pytest.fixture
def config(config_file: Path) -> PatchConfig:
    return load_config(config_file)


@pytest.fixture
def repo(tmp_path: Path) -> InMemoryVcs:
    """In-memory repo whose HEAD, origin/main and upstream/main match upstream."""
    vcs = InMemoryVcs(tmp_path, remotes=["origin", "upstream"])
    vcs.commit(UPSTREAM_FILES)
    vcs.set_ref("origin/main", UPSTREAM_FILES)
    vcs.set_ref("upstream/main", UPSTREAM_FILES)
    return vcs


@pytest.fixture
def upstream_files() -> dict[str, str]:
    return dict(UPSTREAM_FILES)
