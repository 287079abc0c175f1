"""
Normalization Driver — Rewrite every descriptor under a repository root.

Each descriptor is read, classified, rewritten, and written back only
when its content changed. A file that cannot be read or written is
recorded and the pass carries on; the pass as a whole fails after every
file has been attempted.

## Usage

    from update_mirror.repository.normalizer import normalize

    report = normalize(Path("D:/Repository"))
    print(report.summary())
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from ..errors import NormalizationFailed
from ..models.report import ChangeReport, DescriptorState
from ..persistence import write_atomic
from .classifier import classify
from .mode import DEFAULT_MANIFEST_NAME
from .rewriter import rewrite

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTOR_SUFFIX = ".xml"


@dataclass
class _FileResult:
    path: Path
    changed: bool = False
    before: Optional[DescriptorState] = None
    after: Optional[DescriptorState] = None
    error: Optional[str] = None


def iter_descriptors(
    repository_root: Path,
    suffix: str = DEFAULT_DESCRIPTOR_SUFFIX,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    onerror: Optional[Callable[[OSError], None]] = None,
) -> Iterator[Path]:
    """
    Yield descriptor files under the root in a stable order, skipping the manifest.

    A directory that cannot be listed is passed to ``onerror``; without a
    callback the OSError propagates. It is never skipped silently.
    """
    root = Path(repository_root)
    manifest = root / manifest_name
    wanted = suffix.lower()

    def _listing_failed(error: OSError) -> None:
        if onerror is None:
            raise error
        onerror(error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_listing_failed):
        dirnames.sort()
        for name in sorted(filenames):
            if os.path.splitext(name)[1].lower() != wanted:
                continue
            path = Path(dirpath) / name
            if path == manifest or not path.is_file():
                continue
            yield path


def normalize_file(path: Path, encoding: str = "utf-8", dry_run: bool = False) -> _FileResult:
    """Read-modify-write one descriptor. Never raises for I/O errors."""
    result = _FileResult(path=path)

    try:
        raw = path.read_bytes()
    except OSError as e:
        result.error = f"read failed: {e.strerror or e}"
        return result

    try:
        text = raw.decode(encoding, errors="surrogateescape")
    except UnicodeError as e:
        result.error = f"decode failed: {e}"
        return result

    classification = classify(text)
    new_text, changed = rewrite(text, classification)

    result.before = DescriptorState.from_classification(classification)
    result.changed = changed
    if not changed:
        return result

    result.after = DescriptorState.from_classification(classify(new_text))

    if dry_run:
        return result

    try:
        write_atomic(path, new_text.encode(encoding, errors="surrogateescape"))
    except (OSError, UnicodeError) as e:
        result.error = f"write failed: {getattr(e, 'strerror', None) or e}"
        result.changed = False

    return result


def normalize(
    repository_root: Path,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    suffix: str = DEFAULT_DESCRIPTOR_SUFFIX,
    encoding: str = "utf-8",
    workers: int = 1,
    dry_run: bool = False,
) -> ChangeReport:
    """
    Normalize every descriptor under ``repository_root``.

    Args:
        repository_root: Repository to scan recursively
        manifest_name: Manifest file at the root, excluded from the scan
        suffix: Descriptor file extension (case-insensitive)
        encoding: Descriptor text encoding
        workers: Parallel file workers; 1 processes files in order
        dry_run: Compute the report without writing anything

    Returns:
        ChangeReport listing changed and failed descriptors

    Raises:
        NormalizationFailed: If any descriptor failed, after all were attempted
    """
    root = Path(repository_root)
    report = ChangeReport(root=root, dry_run=dry_run)
    unlistable: List[Tuple[Path, str]] = []

    def _record_unlistable(error: OSError) -> None:
        where = Path(error.filename) if error.filename else root
        unlistable.append((where, f"list failed: {error.strerror or error}"))

    paths: List[Path] = list(iter_descriptors(root, suffix, manifest_name, onerror=_record_unlistable))

    for where, error in unlistable:
        logger.error(f"[normalize] {where}: {error}", extra={"path": str(where)})
        report.record_failure(where, error)

    logger.info(f"[normalize] Scanning {len(paths)} descriptor(s) under {root}")

    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="normalize") as pool:
            results = list(pool.map(lambda p: normalize_file(p, encoding, dry_run), paths))
    else:
        results = [normalize_file(p, encoding, dry_run) for p in paths]

    for result in results:
        report.scanned += 1
        if result.error:
            logger.error(f"[normalize] {result.path}: {result.error}", extra={"path": str(result.path)})
            report.record_failure(result.path, result.error)
        elif result.changed:
            logger.info(
                f"[normalize] {'Would rewrite' if dry_run else 'Rewrote'} "
                f"{result.path.relative_to(root)}: "
                f"{result.before.describe()} → {result.after.describe()}",
                extra={"path": str(result.path)},
            )
            report.record_change(result.path, result.before, result.after)

    logger.info(f"[normalize] {report.summary()}")

    if report.failed:
        raise NormalizationFailed(report.failed, report=report)

    return report
