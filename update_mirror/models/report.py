"""
Change Report — What one normalization pass changed or failed on.

The report is for logging and CLI output only; it is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..repository.classifier import Classification


@dataclass(frozen=True)
class DescriptorState:
    """The fields of a descriptor the rewriter cares about."""

    category: str
    install_mode: Optional[str]
    reboot_token: Optional[str]

    @classmethod
    def from_classification(cls, c: Classification) -> "DescriptorState":
        return cls(
            category=c.category,
            install_mode=c.install_mode,
            reboot_token=c.reboot_token,
        )

    def describe(self) -> str:
        reboot = self.reboot_token or "-"
        mode = self.install_mode or "-"
        return f"{self.category} install={mode} reboot={reboot}"


@dataclass
class DescriptorChange:
    path: Path
    before: DescriptorState
    after: DescriptorState


@dataclass
class ChangeReport:
    """Changed and failed descriptors from one pass."""

    root: Path
    scanned: int = 0
    changed: List[DescriptorChange] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def changed_paths(self) -> List[Path]:
        return [c.path for c in self.changed]

    def record_change(self, path: Path, before: DescriptorState, after: DescriptorState) -> None:
        self.changed.append(DescriptorChange(path=path, before=before, after=after))

    def record_failure(self, path: Path, error: str) -> None:
        self.failed.append((path, error))

    def summary(self) -> str:
        verb = "would change" if self.dry_run else "changed"
        return (
            f"{self.scanned} scanned, {len(self.changed)} {verb}, "
            f"{len(self.failed)} failed"
        )

    def to_dict(self) -> Dict[str, Any]:
        def rel(p: Path) -> str:
            try:
                return str(p.relative_to(self.root))
            except ValueError:
                return str(p)

        return {
            "root": str(self.root),
            "dry_run": self.dry_run,
            "scanned": self.scanned,
            "changed": [
                {
                    "path": rel(c.path),
                    "before": c.before.describe(),
                    "after": c.after.describe(),
                }
                for c in self.changed
            ],
            "failed": [{"path": rel(p), "error": err} for p, err in self.failed],
        }
