"""
Git adapter — the production VcsAdapter.

Every primitive is one ``git`` invocation in the project root.
Uses the git CLI — never a library binding. Output is captured as
bytes: diffs must keep CRLF line endings and non-UTF-8 content intact.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(VcsAdapter):
    """Version-control primitives backed by the git CLI."""

    def __init__(self, root: Path, timeout: int | None = None):
        super().__init__(root)
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    # ── Primitives ──────────────────────────────────────────────

    def diff_head(self, paths: list[str]) -> Receipt:
        return self._run(
            "diff",
            ["diff", "--no-color", "--no-ext-diff", "HEAD", "--", *paths],
            target=" ".join(paths),
        )

    def check_apply(self, patch: Path) -> Receipt:
        return self._run("check_apply", ["apply", "--check", str(patch)], target=patch.name)

    def apply(self, patch: Path) -> Receipt:
        return self._run("apply", ["apply", str(patch)], target=patch.name)

    def checkout(self, ref: str, path: str) -> Receipt:
        return self._run("checkout", ["checkout", ref, "--", path], target=path,
                         metadata={"ref": ref})

    def remotes(self) -> Receipt:
        receipt = self._run("remotes", ["remote"])
        if receipt.ok:
            receipt.metadata["remotes"] = [
                ln.strip() for ln in receipt.output.splitlines() if ln.strip()
            ]
        return receipt

    # ── Helpers ─────────────────────────────────────────────────

    def _run(
        self,
        operation: str,
        args: list[str],
        target: str = "",
        metadata: dict | None = None,
    ) -> Receipt:
        """Run one git command and wrap the outcome in a receipt."""
        meta = {"command": ["git", *args], **(metadata or {})}
        logger.debug("git %s", " ".join(args))
        start = time.monotonic()
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=str(self.root),
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                operation=operation,
                target=target,
                error="git executable not found",
                metadata=meta,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                operation=operation,
                target=target,
                error=f"git {args[0]} timed out after {self.timeout}s",
                metadata=meta,
            )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                operation=operation,
                target=target,
                error=f"git error: {e}",
                metadata=meta,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        meta["return_code"] = result.returncode
        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                operation=operation,
                target=target,
                output=_decode(result.stdout),
                data=result.stdout,
                duration_ms=elapsed_ms,
                metadata=meta,
            )

        error = _decode(result.stderr).strip() or f"git {args[0]} exited with {result.returncode}"
        logger.debug("git %s failed: %s", args[0], error)
        return Receipt.failure(
            adapter=self.name,
            operation=operation,
            target=target,
            error=error,
            duration_ms=elapsed_ms,
            metadata=meta,
        )


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")
