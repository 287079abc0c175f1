"""
Azure CLI Credential — User-delegation SAS via ``az``.

Runs ``az storage container generate-sas --auth-mode login --as-user``
against the signed-in account. Signing in is not this module's job.
"""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..errors import CredentialError
from .base import CredentialProvider, StorageCredential

logger = logging.getLogger(__name__)

# Read, add, create, write, delete, list: what a mirror with deletes needs
SAS_PERMISSIONS = "racwdl"


class AzCliCredentialProvider(CredentialProvider):
    """Generate a container SAS with the Azure CLI."""

    def __init__(
        self,
        storage_account: str,
        container: str,
        lifetime_minutes: int = 60,
        subscription_id: Optional[str] = None,
        az_path: str = "az",
        timeout: int = 120,
    ):
        self.storage_account = storage_account
        self.container = container
        self.lifetime_minutes = lifetime_minutes
        self.subscription_id = subscription_id
        self.az_path = az_path
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "az-cli"

    def build_command(self, expires_at: datetime) -> List[str]:
        cmd = [
            self.az_path, "storage", "container", "generate-sas",
            "--account-name", self.storage_account,
            "--name", self.container,
            "--permissions", SAS_PERMISSIONS,
            "--expiry", expires_at.strftime("%Y-%m-%dT%H:%MZ"),
            "--auth-mode", "login",
            "--as-user",
            "--https-only",
            "--output", "tsv",
        ]
        if self.subscription_id:
            cmd += ["--subscription", self.subscription_id]
        return cmd

    def acquire(self) -> StorageCredential:
        if not self.storage_account or not self.container:
            raise CredentialError("az-cli credential needs storage_account and container")

        expires_at = (datetime.now(timezone.utc) + timedelta(minutes=self.lifetime_minutes)).replace(
            second=0, microsecond=0
        )
        cmd = self.build_command(expires_at)

        logger.info(
            f"[credential] Requesting user-delegation SAS for "
            f"{self.storage_account}/{self.container} ({self.lifetime_minutes} min)"
        )

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise CredentialError(f"Azure CLI not found: {self.az_path}")
        except subprocess.TimeoutExpired:
            raise CredentialError(f"Azure CLI timed out after {self.timeout}s")

        if result.returncode != 0:
            error = result.stderr.strip() or result.stdout.strip() or "generate-sas failed"
            raise CredentialError(
                f"Azure CLI exited {result.returncode}: {error[:300]}",
                details={"exit_code": result.returncode},
            )

        token = result.stdout.strip().strip('"')
        if not token:
            raise CredentialError("Azure CLI returned an empty SAS token")

        return StorageCredential(token=token, expires_at=expires_at, source=self.name)
