"""
Adapter base — the contract between the patch workflows and version control.

The workflows never shell out themselves. They talk to a ``VcsAdapter``,
which exposes the handful of primitives they depend on. The production
implementation drives the git CLI; tests substitute an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from forkpatch.core.models.action import Receipt


class VcsAdapter(ABC):
    """Abstract base class for version-control adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.

    All paths handed to an adapter are relative to its ``root``,
    except patch files, which may be absolute.
    """

    def __init__(self, root: Path):
        self.root = root

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'git')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is usable. Fast, never raises."""

    @abstractmethod
    def diff_head(self, paths: list[str]) -> Receipt:
        """Unified diff of ``paths`` between the working tree and HEAD.

        ``output`` holds the diff text; empty when nothing changed.
        """

    @abstractmethod
    def check_apply(self, patch: Path) -> Receipt:
        """Dry-run: would ``patch`` apply cleanly to the working tree?"""

    @abstractmethod
    def apply(self, patch: Path) -> Receipt:
        """Apply ``patch`` to the working tree, all hunks or none."""

    @abstractmethod
    def checkout(self, ref: str, path: str) -> Receipt:
        """Overwrite ``path`` in the working tree with its content at ``ref``."""

    @abstractmethod
    def remotes(self) -> Receipt:
        """List configured remotes in ``metadata["remotes"]``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} root={str(self.root)!r}>"
