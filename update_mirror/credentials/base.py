"""
Credential Provider Base — Interface for storage credential sources.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class StorageCredential:
    """An opaque, time-bounded token (e.g. a SAS query string)."""

    token: str = field(repr=False)
    expires_at: datetime
    source: str = "unknown"

    def remaining_seconds(self, now: Optional[datetime] = None) -> float:
        now = now or datetime.now(timezone.utc)
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return (expires - now).total_seconds()

    def query_string(self) -> str:
        """Token without a leading '?'."""
        return self.token.lstrip("?")


class CredentialProvider(ABC):
    """
    Abstract base class for credential providers.

    Providers do not retry; a failure surfaces as CredentialError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g. 'static', 'az-cli')."""
        pass

    @abstractmethod
    def acquire(self) -> StorageCredential:
        """
        Acquire a credential.

        Raises:
            CredentialError: If no credential can be produced
        """
        pass
