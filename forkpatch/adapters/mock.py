"""
In-memory VCS — test double for the git adapter.

Refs (HEAD, origin/main, upstream/main, ...) live in memory as
``{path: content}`` snapshots. The working tree is the real directory
under ``root``, so the workflows' own file checks and copies behave
exactly as in production.

Patches produced by ``diff_head`` are remembered by their bytes; ``apply``
and ``check_apply`` only understand patches this instance produced.
"""

from __future__ import annotations

import difflib
from pathlib import Path

from forkpatch.adapters.base import VcsAdapter
from forkpatch.core.models.action import Receipt

# path -> (content before, content after); None means "file absent"
_Change = dict[str, tuple[str | None, str | None]]


class InMemoryVcs(VcsAdapter):
    """Deterministic VcsAdapter driven by an in-memory repository fixture."""

    def __init__(
        self,
        root: Path,
        remotes: list[str] | None = None,
        available: bool = True,
    ):
        super().__init__(root)
        self._available = available
        self._remotes = list(remotes or [])
        self._refs: dict[str, dict[str, str]] = {"HEAD": {}}
        self._patches: dict[bytes, _Change] = {}
        self._failures: set[tuple[str, str]] = set()
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "memory"

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """Every (operation, target) this fake has received."""
        return self._call_log

    def calls(self, operation: str) -> list[str]:
        """Targets of every call to ``operation``, in order."""
        return [t for op, t in self._call_log if op == operation]

    def is_available(self) -> bool:
        return self._available

    # ── Fixture setup ───────────────────────────────────────────

    def commit(self, files: dict[str, str]) -> None:
        """Record ``files`` at HEAD and write them to the working tree."""
        self._refs["HEAD"].update(files)
        for path, content in files.items():
            self._write(path, content)

    def set_ref(self, ref: str, files: dict[str, str]) -> None:
        """Define the content of ``ref`` (e.g. 'upstream/main')."""
        self._refs[ref] = dict(files)

    def fail(self, operation: str, target: str) -> None:
        """Force ``operation`` on ``target`` to fail.

        ``target`` is the path for diff/checkout and the patch filename
        for apply/check_apply; use ``ref:path`` to fail a checkout from
        one ref only.
        """
        self._failures.add((operation, target))

    # ── Primitives ──────────────────────────────────────────────

    def diff_head(self, paths: list[str]) -> Receipt:
        target = " ".join(paths)
        self._call_log.append(("diff", target))
        if ("diff", target) in self._failures or any(("diff", p) in self._failures for p in paths):
            return self._failed("diff", target, "forced failure")

        head = self._refs["HEAD"]
        chunks: list[str] = []
        change: _Change = {}
        for path in paths:
            if path not in head:
                continue  # untracked files never show up in a HEAD diff
            old, new = head[path], self._read(path)
            if old == new:
                continue
            change[path] = (old, new)
            chunks.append(_unified(path, old, new))

        text = "".join(chunks)
        data = text.encode("utf-8")
        if data:
            self._patches[data] = change
        return Receipt.success(
            adapter=self.name, operation="diff", target=target, output=text, data=data,
        )

    def check_apply(self, patch: Path) -> Receipt:
        self._call_log.append(("check_apply", patch.name))
        if ("check_apply", patch.name) in self._failures:
            return self._failed("check_apply", patch.name, "forced failure")
        change, error = self._resolve(patch)
        if error:
            return self._failed("check_apply", patch.name, error)
        return Receipt.success(adapter=self.name, operation="check_apply", target=patch.name)

    def apply(self, patch: Path) -> Receipt:
        self._call_log.append(("apply", patch.name))
        if ("apply", patch.name) in self._failures:
            return self._failed("apply", patch.name, "forced failure")
        change, error = self._resolve(patch)
        if error:
            return self._failed("apply", patch.name, error)
        for path, (_, new) in change.items():
            if new is None:
                (self.root / path).unlink()
            else:
                self._write(path, new)
        return Receipt.success(adapter=self.name, operation="apply", target=patch.name)

    def checkout(self, ref: str, path: str) -> Receipt:
        self._call_log.append(("checkout", f"{ref}:{path}"))
        if ("checkout", path) in self._failures or ("checkout", f"{ref}:{path}") in self._failures:
            return self._failed("checkout", path, "forced failure", ref=ref)
        snapshot = self._refs.get(ref)
        if snapshot is None:
            return self._failed("checkout", path, f"invalid reference: {ref}", ref=ref)
        if path not in snapshot:
            return self._failed(
                "checkout", path, f"pathspec '{path}' did not match any file(s)", ref=ref,
            )
        self._write(path, snapshot[path])
        return Receipt.success(
            adapter=self.name, operation="checkout", target=path, metadata={"ref": ref},
        )

    def remotes(self) -> Receipt:
        self._call_log.append(("remotes", ""))
        if ("remotes", "") in self._failures:
            return self._failed("remotes", "", "forced failure")
        return Receipt.success(
            adapter=self.name,
            operation="remotes",
            output="\n".join(self._remotes),
            metadata={"remotes": list(self._remotes)},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _resolve(self, patch: Path) -> tuple[_Change, str]:
        """Find the recorded change for ``patch`` and check it fits the tree."""
        if not patch.is_file():
            return {}, f"can't open patch '{patch}'"
        change = self._patches.get(patch.read_bytes())
        if change is None:
            return {}, "unrecognized patch"
        for path, (old, _) in change.items():
            if self._read(path) != old:
                return {}, f"patch failed: {path}"
        return change, ""

    def _read(self, path: str) -> str | None:
        target = self.root / path
        return target.read_text(encoding="utf-8") if target.is_file() else None

    def _write(self, path: str, content: str) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def _failed(self, operation: str, target: str, error: str, **meta: str) -> Receipt:
        return Receipt.failure(
            adapter=self.name, operation=operation, target=target, error=error, metadata=meta,
        )


def _unified(path: str, old: str | None, new: str | None) -> str:
    """Render a git-style unified diff for one file."""
    before = (old or "").splitlines(keepends=True)
    after = (new or "").splitlines(keepends=True)
    header = f"diff --git a/{path} b/{path}\n"
    lines = difflib.unified_diff(
        before,
        after,
        fromfile=f"a/{path}" if old is not None else "/dev/null",
        tofile=f"b/{path}" if new is not None else "/dev/null",
    )
    return header + "".join(ln if ln.endswith("\n") else ln + "\n" for ln in lines)
