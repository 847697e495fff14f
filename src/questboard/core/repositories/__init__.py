from __future__ import annotations

from .base_vault import IN_MEMORY_URL, BaseVault
from .snapshot_vault import SnapshotVault


__all__ = ["IN_MEMORY_URL", "BaseVault", "SnapshotVault"]
