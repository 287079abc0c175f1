"""
Repository Lock — One run per repository at a time.

The lock lives in the local state directory rather than the repository,
so cloud-managed repositories stay untouched and the lock file is never
mirrored. A lock left behind by a process that is no longer running (or
older than ``max_age_seconds``) is reclaimed once.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

import psutil

from ..errors import LockUnavailable, RepositoryLocked

logger = logging.getLogger(__name__)

DEFAULT_LOCK_DIR = Path("state") / "locks"


def lock_path_for(repository_root: Path, lock_dir: Path = DEFAULT_LOCK_DIR) -> Path:
    """Lock file path for a repository, keyed by its resolved location."""
    key = str(Path(repository_root).resolve()).lower().encode("utf-8")
    digest = hashlib.sha1(key).hexdigest()[:16]
    return Path(lock_dir) / f"{digest}.lock"


def _lock_owner(path: Path) -> Optional[int]:
    """PID recorded in a lock file, or None if it can't be read."""
    try:
        first = path.read_text(encoding="utf-8").split(maxsplit=1)[0]
        return int(first)
    except (OSError, IndexError, ValueError):
        return None


def is_stale(path: Path, max_age_seconds: Optional[float] = None) -> bool:
    """True if the lock's owner is gone, or the lock is older than max_age_seconds."""
    if max_age_seconds is not None:
        try:
            if time.time() - path.stat().st_mtime > max_age_seconds:
                return True
        except FileNotFoundError:
            return True

    pid = _lock_owner(path)
    if pid is None:
        # Unreadable or half-written; only age can free it
        return False
    return not psutil.pid_exists(pid)


def _create(path: Path) -> int:
    try:
        return os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
    except FileExistsError:
        raise
    except OSError as e:
        raise LockUnavailable(path, e.strerror or str(e)) from e


@contextmanager
def repository_lock(
    repository_root: Path,
    lock_dir: Path = DEFAULT_LOCK_DIR,
    max_age_seconds: Optional[float] = None,
) -> Iterator[Path]:
    """
    Hold the repository lock for the duration of the block.

    Raises:
        RepositoryLocked: If another live run holds it
        LockUnavailable: If the lock file cannot be created at all
    """
    path = lock_path_for(repository_root, lock_dir)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LockUnavailable(path, e.strerror or str(e)) from e

    try:
        fd = _create(path)
    except FileExistsError:
        if not is_stale(path, max_age_seconds):
            raise RepositoryLocked(path)
        logger.warning(f"[lock] Reclaiming stale lock {path} (owner pid {_lock_owner(path)})")
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise LockUnavailable(path, e.strerror or str(e)) from e
        try:
            fd = _create(path)
        except FileExistsError:
            raise RepositoryLocked(path)

    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(f"{os.getpid()} {datetime.now(timezone.utc).isoformat()} {repository_root}\n")

    logger.debug(f"[lock] Acquired {path.name} for {repository_root}")
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"[lock] Lock file vanished before release: {path}")
        logger.debug(f"[lock] Released {path.name}")
