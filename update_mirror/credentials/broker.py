"""
Token Broker Credential — Fetch a SAS from an HTTP endpoint.

The broker answers ``GET <url>?account=..&container=..&tenant=..`` with
JSON ``{"token": "...", "expires_on": "<ISO-8601 or epoch seconds>"}``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from dateutil import parser as date_parser

from ..errors import CredentialError
from .base import CredentialProvider, StorageCredential

logger = logging.getLogger(__name__)


def _parse_expiry(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    text = str(value).strip()
    if text.isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    expires = date_parser.isoparse(text)
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires


class HttpCredentialProvider(CredentialProvider):
    """Request a credential from a token broker service."""

    def __init__(
        self,
        url: str,
        storage_account: Optional[str] = None,
        container: Optional[str] = None,
        tenant_id: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 30,
    ):
        self.url = url
        self.storage_account = storage_account
        self.container = container
        self.tenant_id = tenant_id
        self.api_key = api_key
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "http"

    def _params(self) -> Dict[str, str]:
        params = {
            "account": self.storage_account,
            "container": self.container,
            "tenant": self.tenant_id,
        }
        return {k: v for k, v in params.items() if v}

    def acquire(self) -> StorageCredential:
        if not self.url:
            raise CredentialError("No credential broker URL configured")

        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.info(f"[credential] Requesting SAS from broker {self.url}")

        try:
            resp = httpx.get(self.url, params=self._params(), headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise CredentialError(f"Credential broker unreachable: {e}")

        if resp.status_code != 200:
            raise CredentialError(
                f"Credential broker returned HTTP {resp.status_code}",
                details={"status_code": resp.status_code},
            )

        try:
            data = resp.json()
            token = data["token"]
            expires_at = _parse_expiry(data["expires_on"])
        except (ValueError, KeyError, TypeError) as e:
            raise CredentialError(f"Credential broker response is malformed: {e}")

        if not token:
            raise CredentialError("Credential broker returned an empty token")

        return StorageCredential(token=token, expires_at=expires_at, source=self.name)
