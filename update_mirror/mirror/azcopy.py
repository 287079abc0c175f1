"""
AzCopy Mirrorer — Run ``azcopy sync`` as a child process.

The process is polled so a cancellation event can terminate it. Output
goes to a temp file (not a pipe) so a chatty transfer cannot block on a
full pipe buffer.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from ..errors import MirrorError
from ..validation import redact_url
from .base import MirrorOutcome, Mirrorer

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0
TERMINATE_GRACE_SECONDS = 10.0
OUTPUT_TAIL_CHARS = 2000


class AzCopyMirrorer(Mirrorer):
    """Mirror a directory tree to a blob container with AzCopy."""

    def __init__(
        self,
        azcopy_path: str = "azcopy",
        dry_run: bool = False,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ):
        self.azcopy_path = azcopy_path
        self.dry_run = dry_run
        self.poll_interval = poll_interval

    @property
    def name(self) -> str:
        return "azcopy"

    def build_command(self, source: Path, destination: str, delete_extraneous: bool) -> List[str]:
        cmd = [
            self.azcopy_path, "sync",
            str(source),
            destination,
            "--recursive=true",
            f"--delete-destination={'true' if delete_extraneous else 'false'}",
        ]
        if self.dry_run:
            cmd.append("--dry-run")
        return cmd

    def mirror(
        self,
        source: Path,
        destination: str,
        delete_extraneous: bool = True,
        cancel: Optional[threading.Event] = None,
    ) -> MirrorOutcome:
        cmd = self.build_command(source, destination, delete_extraneous)

        logger.info(
            f"[mirror] azcopy sync {source} → {redact_url(destination)}"
            f"{' (dry run)' if self.dry_run else ''}"
        )

        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as output:
            try:
                proc = subprocess.Popen(cmd, stdout=output, stderr=subprocess.STDOUT, text=True)
            except OSError as e:
                raise MirrorError(f"Cannot start {self.azcopy_path}: {e}")

            cancelled = False
            while True:
                try:
                    proc.wait(timeout=self.poll_interval)
                    break
                except subprocess.TimeoutExpired:
                    if cancel is not None and cancel.is_set():
                        cancelled = True
                        logger.warning("[mirror] Cancellation requested, stopping azcopy")
                        self._stop(proc)
                        break

            output.seek(0)
            tail = output.read()[-OUTPUT_TAIL_CHARS:]

        outcome = MirrorOutcome(exit_code=proc.returncode, cancelled=cancelled, output_tail=tail)
        if outcome.ok:
            logger.info("[mirror] azcopy finished")
        elif not cancelled:
            logger.error(f"[mirror] azcopy exited {proc.returncode}")
        return outcome

    @staticmethod
    def _stop(proc: subprocess.Popen) -> None:
        proc.terminate()
        try:
            proc.wait(timeout=TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
