"""
Binary assets — files that cannot live in a text patch.

``export_assets`` copies them from the project into the assets
directory (generate); ``restore_assets`` copies them back (apply).
A missing source is reported, never fatal.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from forkpatch.core.models.patchset import BinaryAsset, PatchConfig
from forkpatch.core.services.patch_ops import assets_dir

logger = logging.getLogger(__name__)


@dataclass
class AssetCopy:
    """Outcome of copying one binary asset."""

    name: str
    destination: str
    copied: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "destination": self.destination,
            "copied": self.copied,
            "error": self.error,
        }


def export_assets(config: PatchConfig, root: Path) -> list[AssetCopy]:
    """Copy every asset found in the project into the assets directory."""
    target_dir = assets_dir(config, root)
    target_dir.mkdir(parents=True, exist_ok=True)
    return [
        _copy(asset, root / asset.destination, target_dir / asset.name)
        for asset in config.assets
    ]


def restore_assets(config: PatchConfig, root: Path) -> list[AssetCopy]:
    """Copy every archived asset back to its destination in the project."""
    source_dir = assets_dir(config, root)
    return [
        _copy(asset, source_dir / asset.name, root / asset.destination)
        for asset in config.assets
    ]


def _copy(asset: BinaryAsset, src: Path, dest: Path) -> AssetCopy:
    outcome = AssetCopy(name=asset.name, destination=asset.destination)
    if not src.is_file():
        logger.info("Asset %s not found at %s", asset.name, src)
        return outcome

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
    except OSError as e:
        logger.warning("Failed to copy %s -> %s: %s", src, dest, e)
        outcome.error = str(e)
        return outcome

    logger.debug("Copied %s -> %s", src, dest)
    outcome.copied = True
    return outcome
