"""
Repository Mode Detector — Cloud-managed or local-managed?

A cloud-managed repository carries ``cloud="True"`` in its manifest and
must not be touched. The check is an exact, case-sensitive substring
match, not an XML attribute parse.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ManifestMissing

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "database.xml"
CLOUD_MARKER = 'cloud="True"'

MODE_CLOUD = "cloud"
MODE_LOCAL = "local"


def detect_mode(
    repository_root: Path,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    encoding: str = "utf-8",
) -> str:
    """
    Return MODE_CLOUD or MODE_LOCAL for a repository.

    Raises:
        ManifestMissing: If the manifest cannot be read
    """
    manifest_path = Path(repository_root) / manifest_name

    try:
        content = manifest_path.read_bytes().decode(encoding, errors="surrogateescape")
    except OSError as e:
        raise ManifestMissing(manifest_path, e.strerror or str(e)) from e

    mode = MODE_CLOUD if CLOUD_MARKER in content else MODE_LOCAL
    logger.debug(f"[mode] {manifest_path} → {mode}")
    return mode
