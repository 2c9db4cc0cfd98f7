"""
Status use case — report patch files, assets, managed files and applicability.

Read-only: nothing on disk or in the index is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.patchset import PatchConfig
from forkpatch.core.services.patch_ops import (
    FileState,
    assets_dir,
    file_state,
    patch_path,
)

logger = logging.getLogger(__name__)


@dataclass
class PatchFileStatus:
    file: str
    exists: bool
    external: bool = False


@dataclass
class ManagedFileStatus:
    path: str
    state: FileState


@dataclass
class Applicability:
    """Dry-run result for one existing patch file."""

    file: str
    applies: bool
    error: str | None = None


@dataclass
class StatusResult:
    """Everything ``--status`` reports."""

    patch_files: list[PatchFileStatus] = field(default_factory=list)
    assets: list[tuple[str, bool]] = field(default_factory=list)
    managed_files: list[ManagedFileStatus] = field(default_factory=list)
    applicability: list[Applicability] = field(default_factory=list)

    @property
    def modified_count(self) -> int:
        return sum(1 for m in self.managed_files if m.state == FileState.MODIFIED)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "patch_files": [
                {"file": p.file, "exists": p.exists, "external": p.external}
                for p in self.patch_files
            ],
            "assets": [{"name": n, "exists": e} for n, e in self.assets],
            "managed_files": [
                {"path": m.path, "state": m.state.value} for m in self.managed_files
            ],
            "applicability": [
                {"file": a.file, "applies": a.applies, "error": a.error}
                for a in self.applicability
            ],
        }


def get_status(config: PatchConfig, vcs: VcsAdapter) -> StatusResult:
    """Collect the patch status of the project rooted at ``vcs.root``."""
    root = vcs.root
    result = StatusResult()

    for file in config.patch_files:
        result.patch_files.append(PatchFileStatus(
            file=file,
            exists=patch_path(config, root, file).is_file(),
            external=config.get_group(file) is None,
        ))

    archive = assets_dir(config, root)
    for asset in config.assets:
        result.assets.append((asset.name, (archive / asset.name).is_file()))

    for path in config.managed_files:
        result.managed_files.append(ManagedFileStatus(path=path, state=file_state(vcs, path)))

    # Dry-run only for patches this tool applies
    for group in config.patches:
        patch = patch_path(config, root, group.file)
        if not patch.is_file():
            continue
        receipt = vcs.check_apply(patch)
        result.applicability.append(
            Applicability(file=group.file, applies=receipt.ok, error=receipt.error)
        )

    logger.info(
        "Status: %d/%d managed files modified",
        result.modified_count, len(result.managed_files),
    )
    return result
