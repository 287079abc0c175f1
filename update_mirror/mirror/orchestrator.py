"""
Sync Orchestrator — Detect mode, normalize, acquire credential, mirror.

    Start → ModeDetected → [Skip | Normalize] → CredentialAcquired
          → Mirrored → Done

Any stage may end the run in Failed. A repository that was only
partially normalized is never mirrored, and no credential is requested
for it.

## Usage

    from update_mirror.mirror.orchestrator import SyncOrchestrator

    orchestrator = SyncOrchestrator(config, provider, AzCopyMirrorer())
    outcome = orchestrator.sync(Path("D:/Repository"), "https://acct.blob.core.windows.net/repo")
"""

from __future__ import annotations

import logging
import threading
import urllib.parse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.loader import SyncConfig
from ..credentials.base import CredentialProvider, StorageCredential
from ..errors import (
    CredentialError,
    MirrorError,
    SyncCancelled,
    SyncError,
)
from ..models.outcome import (
    STATE_CREDENTIAL_ACQUIRED,
    STATE_DONE,
    STATE_FAILED,
    STATE_MIRRORED,
    STATE_MODE_DETECTED,
    STATE_NORMALIZATION_SKIPPED,
    STATE_NORMALIZED,
    STATE_START,
    SyncOutcome,
)
from ..repository.lock import repository_lock
from ..repository.mode import MODE_CLOUD, detect_mode
from ..repository.normalizer import normalize
from .base import Mirrorer
from .state import SyncStatusStore

logger = logging.getLogger(__name__)


def destination_with_credential(destination: str, credential: StorageCredential) -> str:
    """Append the credential to the destination URL as its query string."""
    parsed = urllib.parse.urlparse(destination)
    token = credential.query_string()
    query = f"{parsed.query}&{token}" if parsed.query else token
    return urllib.parse.urlunparse(parsed._replace(query=query))


@dataclass
class _Run:
    """Bookkeeping for one sync invocation."""

    root: Path
    destination: str
    transitions: List[str] = field(default_factory=lambda: [STATE_START])
    mode: Optional[str] = None
    changed_files: List[str] = field(default_factory=list)
    mirror_exit_code: Optional[int] = None

    def advance(self, state: str) -> None:
        self.transitions.append(state)
        logger.debug(f"[sync] → {state}")


class SyncOrchestrator:
    """
    Runs one sync at a time per repository.

    The credential lives only inside ``sync`` and is dropped when it
    returns.
    """

    def __init__(
        self,
        config: SyncConfig,
        credential_provider: CredentialProvider,
        mirrorer: Mirrorer,
        status_store: Optional[SyncStatusStore] = None,
    ):
        self.config = config
        self.credential_provider = credential_provider
        self.mirrorer = mirrorer
        self.status_store = status_store

    def sync(
        self,
        repository_root: Path,
        destination: str,
        cancel: Optional[threading.Event] = None,
    ) -> SyncOutcome:
        """
        Sync a repository to a destination container.

        Returns:
            SyncOutcome with status "done", or "failed" and the first
            failing stage
        """
        run = _Run(root=Path(repository_root), destination=destination)
        log_extra = {"repository": str(run.root)}

        logger.info(f"[sync] {run.root} → {destination}", extra=log_extra)

        try:
            with repository_lock(
                run.root, Path(self.config.lock_dir), self.config.lock_max_age_seconds
            ):
                self._detect_mode(run)
                self._normalize(run)
                credential = self._acquire_credential(run)
                self._mirror(run, credential, cancel)
        except SyncError as e:
            run.advance(STATE_FAILED)
            logger.error(
                f"[sync] Failed at stage '{e.stage}': {e.message}",
                extra={**log_extra, "stage": e.stage},
            )
            outcome = SyncOutcome.failed(
                repository=str(run.root),
                destination=destination,
                stage=e.stage,
                reason=e.message,
                details=e.details,
                transitions=run.transitions,
                mode=run.mode,
                mirror_exit_code=run.mirror_exit_code,
            )
        else:
            run.advance(STATE_DONE)
            logger.info(f"[sync] Done ({len(run.changed_files)} descriptor(s) normalized)", extra=log_extra)
            outcome = SyncOutcome.done(
                repository=str(run.root),
                destination=destination,
                mode=run.mode,
                transitions=run.transitions,
                changed_files=run.changed_files,
                mirror_exit_code=run.mirror_exit_code,
            )

        if self.status_store is not None:
            try:
                self.status_store.record(outcome)
            except OSError as e:
                logger.warning(f"[sync] Could not save sync status: {e}")

        return outcome

    # ─── Stages ─────────────────────────────────────────────

    def _detect_mode(self, run: _Run) -> None:
        run.mode = detect_mode(run.root, self.config.manifest_name, self.config.encoding)
        run.advance(STATE_MODE_DETECTED)
        logger.info(f"[sync] Repository mode: {run.mode}")

    def _normalize(self, run: _Run) -> None:
        if run.mode == MODE_CLOUD:
            logger.info("[sync] Cloud-managed repository, skipping normalization")
            run.advance(STATE_NORMALIZATION_SKIPPED)
            return

        report = normalize(
            run.root,
            manifest_name=self.config.manifest_name,
            suffix=self.config.descriptor_suffix,
            encoding=self.config.encoding,
            workers=self.config.workers,
        )
        run.changed_files = [str(p.relative_to(run.root)) for p in report.changed_paths]
        run.advance(STATE_NORMALIZED)

    def _acquire_credential(self, run: _Run) -> StorageCredential:
        try:
            credential = self.credential_provider.acquire()
        except CredentialError:
            raise
        except Exception as e:
            raise CredentialError(
                f"Credential provider '{self.credential_provider.name}' failed: {e}"
            ) from e

        remaining = credential.remaining_seconds()
        minimum = self.config.min_credential_lifetime_seconds
        if remaining < minimum:
            raise CredentialError(
                f"Credential expires in {int(remaining)}s, need at least {minimum}s",
                details={"remaining_seconds": int(remaining), "source": credential.source},
            )

        run.advance(STATE_CREDENTIAL_ACQUIRED)
        logger.info(f"[sync] Credential acquired from {credential.source} ({int(remaining)}s left)")
        return credential

    def _mirror(self, run: _Run, credential: StorageCredential, cancel: Optional[threading.Event]) -> None:
        target = destination_with_credential(run.destination, credential)

        result = self.mirrorer.mirror(run.root, target, delete_extraneous=True, cancel=cancel)
        run.mirror_exit_code = result.exit_code

        if result.cancelled:
            raise SyncCancelled("Mirror cancelled by caller", details={"exit_code": result.exit_code})
        if not result.ok:
            raise MirrorError(
                f"{self.mirrorer.name} exited with code {result.exit_code}",
                exit_code=result.exit_code,
            )

        run.advance(STATE_MIRRORED)
