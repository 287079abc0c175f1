"""
Errors — Failure taxonomy for a sync run.

Every error carries the pipeline stage it came from so an operator can
tell where a run stopped without re-running it in verbose mode.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Pipeline stages
STAGE_LOCK = "lock"
STAGE_MODE = "mode"
STAGE_NORMALIZE = "normalize"
STAGE_CREDENTIAL = "credential"
STAGE_MIRROR = "mirror"


class SyncError(Exception):
    """Base class for failures that end a sync run."""

    stage: str = "sync"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryLocked(SyncError):
    """Another run holds the repository lock."""

    stage = STAGE_LOCK

    def __init__(self, lock_path: Path):
        self.lock_path = lock_path
        super().__init__(
            f"Repository is locked by another run: {lock_path}",
            details={"path": str(lock_path)},
        )


class LockUnavailable(SyncError):
    """The lock file could not be created (bad or unwritable lock directory)."""

    stage = STAGE_LOCK

    def __init__(self, lock_path: Path, reason: str = ""):
        self.lock_path = lock_path
        message = f"Cannot create repository lock: {lock_path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, details={"path": str(lock_path)})


class ManifestMissing(SyncError):
    """The repository manifest could not be read."""

    stage = STAGE_MODE

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        message = f"Repository manifest not readable: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, details={"path": str(path)})


class NormalizationFailed(SyncError):
    """One or more descriptors could not be read or written."""

    stage = STAGE_NORMALIZE

    def __init__(self, failed_files: List[Tuple[Path, str]], report: Any = None):
        self.failed_files = failed_files
        self.report = report
        super().__init__(
            f"{len(failed_files)} descriptor(s) failed to normalize",
            details={"failed_files": {str(p): err for p, err in failed_files}},
        )


class CredentialError(SyncError):
    """The storage credential could not be acquired or expires too soon."""

    stage = STAGE_CREDENTIAL


class MirrorError(SyncError):
    """The mirror tool reported a failure."""

    stage = STAGE_MIRROR

    def __init__(self, message: str, exit_code: Optional[int] = None):
        self.exit_code = exit_code
        super().__init__(message, details={"exit_code": exit_code})


class SyncCancelled(SyncError):
    """The caller cancelled the run while the mirror was in progress."""

    stage = STAGE_MIRROR
