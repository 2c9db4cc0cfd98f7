"""
Patch operations — helpers shared by the apply, generate and status workflows.

Path resolution for the patch and asset directories, the per-file
modification check, and upstream reference resolution.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.patchset import PatchConfig, UpstreamSettings

logger = logging.getLogger(__name__)


class FileState(str, Enum):
    """Modification state of a managed file relative to HEAD."""

    NOT_FOUND = "not_found"
    CLEAN = "clean"
    MODIFIED = "modified"


# ═══════════════════════════════════════════════════════════════════
#  Paths
# ═══════════════════════════════════════════════════════════════════


def patches_dir(config: PatchConfig, root: Path) -> Path:
    return root / config.patches_dir


def assets_dir(config: PatchConfig, root: Path) -> Path:
    return patches_dir(config, root) / config.assets_dir


def patch_path(config: PatchConfig, root: Path, file: str) -> Path:
    """Absolute location of a patch file."""
    return patches_dir(config, root) / file


def existing_patches(config: PatchConfig, root: Path) -> list[Path]:
    """Group patch files present on disk, in configuration order."""
    paths = [patch_path(config, root, g.file) for g in config.patches]
    return [p for p in paths if p.is_file()]


# ═══════════════════════════════════════════════════════════════════
#  VCS queries
# ═══════════════════════════════════════════════════════════════════


def file_state(vcs: VcsAdapter, path: str) -> FileState:
    """Classify one managed file as NOT_FOUND, CLEAN or MODIFIED.

    A diff that cannot be computed counts as MODIFIED: the file is
    not known to match HEAD.
    """
    if not (vcs.root / path).is_file():
        return FileState.NOT_FOUND

    receipt = vcs.diff_head([path])
    if receipt.failed:
        logger.warning("Could not diff %s against HEAD: %s", path, receipt.error)
        return FileState.MODIFIED
    return FileState.MODIFIED if receipt.output else FileState.CLEAN


def any_modified(vcs: VcsAdapter, paths: tuple[str, ...] | list[str]) -> bool:
    """True as soon as one of ``paths`` differs from HEAD."""
    for path in paths:
        receipt = vcs.diff_head([path])
        if receipt.failed or receipt.output:
            return True
    return False


def resolve_upstream_ref(vcs: VcsAdapter, upstream: UpstreamSettings) -> str:
    """Prefer ``<remote>/<branch>`` when that remote exists, else the fallback."""
    receipt = vcs.remotes()
    if receipt.failed:
        logger.warning("Could not list remotes: %s", receipt.error)
    remotes = receipt.metadata.get("remotes", []) if receipt.ok else []
    ref = upstream.preferred_ref if upstream.remote in remotes else upstream.fallback_ref
    logger.info("Upstream reference: %s", ref)
    return ref
