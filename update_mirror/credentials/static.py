"""
Static Credential — A SAS token issued ahead of time.

The expiry comes from the token's own ``se`` (signed expiry) parameter.
"""

from __future__ import annotations

import logging
import urllib.parse
from datetime import datetime, timezone

from dateutil import parser as date_parser

from ..errors import CredentialError
from .base import CredentialProvider, StorageCredential

logger = logging.getLogger(__name__)


def parse_sas_expiry(token: str) -> datetime:
    """Read the signed expiry (``se=``) from a SAS query string."""
    params = urllib.parse.parse_qs(token.lstrip("?"))
    values = params.get("se")
    if not values:
        raise CredentialError("SAS token has no signed expiry (se=) parameter")

    try:
        expires = date_parser.isoparse(values[0])
    except ValueError as e:
        raise CredentialError(f"SAS token has an unreadable expiry: {e}")

    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires


class StaticCredentialProvider(CredentialProvider):
    """Serve a pre-issued SAS token from configuration."""

    def __init__(self, sas_token: str | None):
        self._sas_token = (sas_token or "").strip()

    @property
    def name(self) -> str:
        return "static"

    def acquire(self) -> StorageCredential:
        if not self._sas_token:
            raise CredentialError("No SAS token configured (UPDATE_MIRROR_SAS_TOKEN)")

        expires = parse_sas_expiry(self._sas_token)
        logger.info(f"[credential] Using configured SAS token (expires {expires.isoformat()})")
        return StorageCredential(token=self._sas_token, expires_at=expires, source=self.name)
