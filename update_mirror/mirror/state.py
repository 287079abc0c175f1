"""
Sync Status — Record of the last sync per repository/destination.

Stored in state/sync_status.json, separate from the repository so the
record is never mirrored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.outcome import SyncOutcome
from ..persistence import write_atomic

logger = logging.getLogger(__name__)


def status_key(repository: str, destination: str) -> str:
    return f"{repository} → {destination}"


class SyncStatusStore:
    """Last outcome per (repository, destination) pair."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"syncs": {}}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load sync status from {self.path}: {e}")
            return {"syncs": {}}

        data.setdefault("syncs", {})
        return data

    def get(self, repository: str, destination: str) -> Optional[SyncOutcome]:
        entry = self.load()["syncs"].get(status_key(repository, destination))
        return SyncOutcome(**entry) if entry else None

    def record(self, outcome: SyncOutcome) -> None:
        data = self.load()
        data["syncs"][status_key(outcome.repository, outcome.destination)] = outcome.model_dump()
        data["last_sync_iso"] = outcome.ts_iso

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, indent=4, default=str) + "\n"
        write_atomic(self.path, payload.encode("utf-8"))
        logger.debug(f"Sync status saved → {self.path}")
