"""Backup module initialization."""

from .bundle import BackupBundle
from .executor import BackupExecutor, BackupResult
from .restore import RestoreExecutor, RestoreReport

__all__ = [
    # bundle
    "BackupBundle",
    # executor
    "BackupExecutor",
    "BackupResult",
    # restore
    "RestoreExecutor",
    "RestoreReport",
]
