"""Synchronization module.

Decides which albums are stale and copies them into the target library.
"""

from .reconciler import SyncReconciler, count_files

__all__ = [
    "SyncReconciler",
    "count_files",
]
