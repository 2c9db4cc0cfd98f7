"""
Generate use case — capture local changes to managed files as patch files.

For every patch group that differs from HEAD, the group's diff is
written to its patch file. Binary assets are copied into the assets
directory. A failure in one group never stops the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.patchset import PatchConfig, PatchGroup
from forkpatch.core.services.assets import AssetCopy, export_assets
from forkpatch.core.services.patch_ops import any_modified, assets_dir, patch_path

logger = logging.getLogger(__name__)


@dataclass
class GroupOutcome:
    """What generate did for one patch group."""

    file: str
    label: str
    status: Literal["created", "unchanged", "error"]
    removed_stale: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "label": self.label,
            "status": self.status,
            "removed_stale": self.removed_stale,
            "error": self.error,
        }


@dataclass
class GenerateResult:
    groups: list[GroupOutcome] = field(default_factory=list)
    assets: list[AssetCopy] = field(default_factory=list)

    @property
    def created(self) -> list[str]:
        return [g.file for g in self.groups if g.status == "created"]

    @property
    def warnings(self) -> list[str]:
        return [f"{g.file}: {g.error}" for g in self.groups if g.status == "error"]

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "assets": [a.to_dict() for a in self.assets],
        }


def generate_patches(config: PatchConfig, vcs: VcsAdapter) -> GenerateResult:
    """Write one patch file per changed group and archive binary assets."""
    root = vcs.root
    assets_dir(config, root).mkdir(parents=True, exist_ok=True)

    result = GenerateResult()
    for group in config.patches:
        result.groups.append(_generate_group(config, vcs, group))

    result.assets = export_assets(config, root)

    logger.info(
        "Generated %d patch file(s), %d warning(s)",
        len(result.created), len(result.warnings),
    )
    return result


def _generate_group(config: PatchConfig, vcs: VcsAdapter, group: PatchGroup) -> GroupOutcome:
    outcome = GroupOutcome(file=group.file, label=group.display_name, status="unchanged")

    if not any_modified(vcs, group.files):
        logger.debug("No changes in %s", group.file)
        return outcome

    receipt = vcs.diff_head(list(group.files))
    if receipt.failed:
        logger.warning("Could not diff %s: %s", group.file, receipt.error)
        outcome.status = "error"
        outcome.error = receipt.error
        return outcome

    target = patch_path(config, vcs.root, group.file)
    if not receipt.data:
        if target.exists():
            target.unlink()
            outcome.removed_stale = True
        return outcome

    try:
        target.write_bytes(receipt.data)
    except OSError as e:
        logger.warning("Could not write %s: %s", target, e)
        outcome.status = "error"
        outcome.error = str(e)
        return outcome

    logger.debug("Wrote %s (%d bytes)", target, len(receipt.data))
    outcome.status = "created"
    return outcome
