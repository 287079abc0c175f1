"""
Sync Outcome — Result of one sync invocation.

Every sync produces an outcome, whether it finished or failed. The
credential never appears in an outcome.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

# States of the sync state machine
STATE_START = "start"
STATE_MODE_DETECTED = "mode_detected"
STATE_NORMALIZED = "normalized"
STATE_NORMALIZATION_SKIPPED = "normalization_skipped"
STATE_CREDENTIAL_ACQUIRED = "credential_acquired"
STATE_MIRRORED = "mirrored"
STATE_DONE = "done"
STATE_FAILED = "failed"


class SyncOutcome(BaseModel):
    """Terminal result of a sync."""

    status: Literal["done", "failed"]
    repository: str
    destination: str  # never carries the credential
    mode: Optional[str] = None
    stage: Optional[str] = None  # first failing stage
    reason: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    changed_files: List[str] = Field(default_factory=list)
    transitions: List[str] = Field(default_factory=list)
    mirror_exit_code: Optional[int] = None
    ts_iso: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def ok(self) -> bool:
        return self.status == "done"

    @classmethod
    def done(
        cls,
        repository: str,
        destination: str,
        mode: str,
        transitions: List[str],
        changed_files: Optional[List[str]] = None,
        mirror_exit_code: Optional[int] = None,
    ) -> "SyncOutcome":
        """Create a successful outcome."""
        return cls(
            status="done",
            repository=repository,
            destination=destination,
            mode=mode,
            transitions=transitions,
            changed_files=changed_files or [],
            mirror_exit_code=mirror_exit_code,
        )

    @classmethod
    def failed(
        cls,
        repository: str,
        destination: str,
        stage: str,
        reason: str,
        transitions: List[str],
        mode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        mirror_exit_code: Optional[int] = None,
    ) -> "SyncOutcome":
        """Create a failed outcome."""
        return cls(
            status="failed",
            repository=repository,
            destination=destination,
            mode=mode,
            stage=stage,
            reason=reason,
            details=details,
            transitions=transitions,
            mirror_exit_code=mirror_exit_code,
        )
