"""
Domain models — Pydantic types for forkpatch.

    from forkpatch.core.models import PatchConfig, PatchGroup, BinaryAsset, Receipt
"""

from forkpatch.core.models.action import Receipt
from forkpatch.core.models.patchset import (
    BinaryAsset,
    PatchConfig,
    PatchGroup,
    UpstreamSettings,
)

__all__ = [
    # action.py
    "Receipt",
    # patchset.py
    "BinaryAsset",
    "PatchConfig",
    "PatchGroup",
    "UpstreamSettings",
]
