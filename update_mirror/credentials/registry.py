"""
Credential Registry — Pick the provider named by configuration.
"""

from __future__ import annotations

from ..config.loader import SyncConfig
from ..validation import ConfigurationError
from .az_cli import AzCliCredentialProvider
from .base import CredentialProvider
from .broker import HttpCredentialProvider
from .static import StaticCredentialProvider


def build_credential_provider(config: SyncConfig) -> CredentialProvider:
    """Create the credential provider for ``config.credential_source``."""
    source = config.credential_source

    if source == "static":
        return StaticCredentialProvider(config.sas_token)

    if source == "az-cli":
        if not config.storage_account or not config.container:
            raise ConfigurationError("az-cli credentials need storage_account and container")
        return AzCliCredentialProvider(
            storage_account=config.storage_account,
            container=config.container,
            lifetime_minutes=config.sas_lifetime_minutes,
            subscription_id=config.subscription_id,
            az_path=config.az_path,
        )

    if source == "http":
        if not config.credential_url:
            raise ConfigurationError("http credentials need credential_url")
        return HttpCredentialProvider(
            url=config.credential_url,
            storage_account=config.storage_account,
            container=config.container,
            tenant_id=config.tenant_id,
            api_key=config.credential_api_key,
        )

    raise ConfigurationError(f"Unknown credential source: {source}")
