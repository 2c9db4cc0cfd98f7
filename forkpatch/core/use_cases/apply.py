"""
Apply use case — reset managed files to upstream, reapply patches and assets.

    START → RESET_MANAGED_FILES → APPLY_PATCH[i] → COPY_ASSETS → DONE

The run stops at the first patch that fails to apply. Patches applied
before it stay applied; nothing is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.patchset import PatchConfig
from forkpatch.core.services.assets import AssetCopy, restore_assets
from forkpatch.core.services.patch_ops import existing_patches, resolve_upstream_ref

logger = logging.getLogger(__name__)


@dataclass
class ResetOutcome:
    """How one managed file was reset.

    ``ref`` is the reference actually checked out, or None when both
    the upstream reference and HEAD failed and the file was left as-is.
    """

    path: str
    ref: str | None
    error: str | None = None


@dataclass
class ApplyResult:
    error: str | None = None
    upstream_ref: str = ""
    reset: list[ResetOutcome] = field(default_factory=list)
    applied: list[str] = field(default_factory=list)
    failed_patch: str | None = None
    failed_error: str | None = None
    assets: list[AssetCopy] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed_patch is None

    @property
    def reset_failed(self) -> list[ResetOutcome]:
        return [r for r in self.reset if r.ref is None]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error": self.error,
            "upstream_ref": self.upstream_ref,
            "reset": [{"path": r.path, "ref": r.ref, "error": r.error} for r in self.reset],
            "applied": self.applied,
            "failed_patch": self.failed_patch,
            "failed_error": self.failed_error,
            "assets": [a.to_dict() for a in self.assets],
        }


def apply_patches(
    config: PatchConfig,
    vcs: VcsAdapter,
    prog_name: str = "forkpatch",
) -> ApplyResult:
    """Run the apply workflow and report how far it got."""
    root = vcs.root
    result = ApplyResult()

    patches = existing_patches(config, root)
    if not patches:
        result.error = f"No patches found. Run '{prog_name} --generate' first."
        return result

    # ── Reset managed files ─────────────────────────────────────
    result.upstream_ref = resolve_upstream_ref(vcs, config.upstream)
    for path in config.managed_files:
        if (root / path).is_file():
            result.reset.append(_reset_file(vcs, result.upstream_ref, path))

    # ── Apply patches, stop at the first failure ────────────────
    for patch in patches:
        receipt = vcs.apply(patch)
        if receipt.failed:
            logger.error("Failed to apply %s: %s", patch.name, receipt.error)
            result.failed_patch = patch.name
            result.failed_error = receipt.error
            return result
        logger.info("Applied %s", patch.name)
        result.applied.append(patch.name)

    # ── Restore binary assets ───────────────────────────────────
    result.assets = restore_assets(config, root)
    return result


def _reset_file(vcs: VcsAdapter, upstream_ref: str, path: str) -> ResetOutcome:
    receipt = vcs.checkout(upstream_ref, path)
    if receipt.ok:
        return ResetOutcome(path=path, ref=upstream_ref)

    logger.debug("Checkout of %s from %s failed: %s", path, upstream_ref, receipt.error)
    receipt = vcs.checkout("HEAD", path)
    if receipt.ok:
        return ResetOutcome(path=path, ref="HEAD")

    logger.warning("Could not reset %s (left as-is): %s", path, receipt.error)
    return ResetOutcome(path=path, ref=None, error=receipt.error)
