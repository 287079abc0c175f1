"""
Persistence — Atomic file replacement.

A reader never sees a half-written file: content goes to a temp file in
the same directory, then replaces the target in one rename.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def write_atomic(path: Path, data: bytes, require_writable: bool = True) -> None:
    """
    Replace ``path`` with ``data``.

    Args:
        path: Target file
        data: Full new content
        require_writable: Refuse to replace an existing file that is not
            writable. The rename would otherwise succeed on a read-only file
            because it only needs write access to the directory.

    Raises:
        OSError: On any I/O failure; the target is left untouched
    """
    path = Path(path)
    exists = path.exists()

    if exists and require_writable and not os.access(path, os.W_OK):
        raise PermissionError(errno.EACCES, "File is not writable", str(path))

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if exists:
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except BaseException:
        try:
            temp_path.unlink()
        except OSError:
            pass
        raise

    logger.debug(f"Wrote {len(data)} bytes → {path}")
