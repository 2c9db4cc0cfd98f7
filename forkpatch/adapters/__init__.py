"""Adapters — version-control bindings for the patch workflows.

Public re-exports for convenient access.
"""

from forkpatch.adapters.base import VcsAdapter
from forkpatch.adapters.mock import InMemoryVcs
from forkpatch.adapters.vcs.git import GitAdapter

__all__ = [
    "GitAdapter",
    "InMemoryVcs",
    "VcsAdapter",
]
