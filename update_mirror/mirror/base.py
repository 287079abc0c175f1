"""
Mirrorer Base — Interface for the external mirror tool.

A mirror is one-way: the destination ends up matching the source,
including deletion of objects the source no longer has.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class MirrorOutcome:
    """What the mirror tool reported."""

    exit_code: int
    cancelled: bool = False
    output_tail: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.cancelled


class Mirrorer(ABC):
    """
    Synchronous mirror capability.

    Implementations block until the transfer finishes or ``cancel`` is
    set, and impose no timeout of their own beyond the tool's.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def mirror(
        self,
        source: Path,
        destination: str,
        delete_extraneous: bool = True,
        cancel: Optional[threading.Event] = None,
    ) -> MirrorOutcome:
        """
        Mirror ``source`` to ``destination``.

        Args:
            source: Local or UNC repository root
            destination: Container URL including the credential query string
            delete_extraneous: Delete destination objects absent from source
            cancel: Set by the caller to abort an in-progress transfer

        Raises:
            MirrorError: If the tool cannot be started
        """
        pass
