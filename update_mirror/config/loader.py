"""
Config Loader — Build a SyncConfig from a YAML file and env vars.

Priority (later wins):
1. Defaults
2. YAML file (``--config`` or UPDATE_MIRROR_CONFIG)
3. UPDATE_MIRROR_* environment variables

## Usage

    # config.yaml
    storage_account: contosoupdates
    container: repository
    credential_source: az-cli

    export UPDATE_MIRROR_SAS_LIFETIME_MINUTES=90

The result is passed explicitly to the orchestrator; nothing here is
global.
"""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..validation import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "UPDATE_MIRROR_"
CONFIG_PATH_ENV = "UPDATE_MIRROR_CONFIG"

CREDENTIAL_SOURCES = ("static", "az-cli", "http")


@dataclass(frozen=True)
class SyncConfig:
    """Everything a sync run needs besides its two inputs."""

    # Storage target
    storage_account: Optional[str] = None
    container: Optional[str] = None
    tenant_id: Optional[str] = None
    subscription_id: Optional[str] = None

    # Repository layout
    manifest_name: str = "database.xml"
    descriptor_suffix: str = ".xml"
    encoding: str = "utf-8"
    workers: int = 1

    # Credentials
    credential_source: str = "static"
    sas_token: Optional[str] = None
    credential_url: Optional[str] = None
    credential_api_key: Optional[str] = None
    sas_lifetime_minutes: int = 60
    min_credential_lifetime_seconds: int = 300

    # Tools
    azcopy_path: str = "azcopy"
    az_path: str = "az"

    # Local state
    status_file: str = "state/sync_status.json"
    lock_dir: str = "state/locks"
    lock_max_age_seconds: Optional[int] = None  # reclaim older locks even if the owner looks alive

    def redacted(self) -> Dict[str, Any]:
        """Config as a dict with secrets masked (for display)."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        for key in ("sas_token", "credential_api_key"):
            if data.get(key):
                data[key] = "***"
        return data


_INT_FIELDS = {"workers", "lock_max_age_seconds", "sas_lifetime_minutes", "min_credential_lifetime_seconds"}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return str(value)


def _validate(config: SyncConfig) -> SyncConfig:
    if config.credential_source not in CREDENTIAL_SOURCES:
        raise ConfigurationError(
            f"credential_source must be one of {', '.join(CREDENTIAL_SOURCES)}, "
            f"got {config.credential_source!r}"
        )
    if config.workers < 1:
        raise ConfigurationError("workers must be at least 1")
    if config.sas_lifetime_minutes < 1:
        raise ConfigurationError("sas_lifetime_minutes must be at least 1")
    if config.min_credential_lifetime_seconds < 0:
        raise ConfigurationError("min_credential_lifetime_seconds must not be negative")
    if not config.descriptor_suffix.startswith("."):
        raise ConfigurationError("descriptor_suffix must start with '.'")
    if config.lock_max_age_seconds is not None and config.lock_max_age_seconds < 1:
        raise ConfigurationError("lock_max_age_seconds must be at least 1")
    try:
        codecs.lookup(config.encoding)
    except LookupError:
        raise ConfigurationError(f"Unknown encoding: {config.encoding!r}")
    return config


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file; an empty file is an empty mapping."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _from_mapping(base: SyncConfig, data: Mapping[str, Any], origin: str) -> SyncConfig:
    known = {f.name for f in fields(SyncConfig)}
    updates: Dict[str, Any] = {}

    for key, value in data.items():
        name = str(key).lower().replace("-", "_")
        if name not in known:
            logger.warning(f"Ignoring unknown config key '{key}' from {origin}")
            continue
        updates[name] = _coerce(name, value)

    return replace(base, **updates)


def load_config(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SyncConfig:
    """
    Load configuration.

    Args:
        path: YAML config file; falls back to UPDATE_MIRROR_CONFIG
        env: Environment mapping (defaults to os.environ)

    Raises:
        ConfigurationError: If any value is invalid
    """
    env = os.environ if env is None else env
    config = SyncConfig()

    config_path = path or (Path(env[CONFIG_PATH_ENV]) if env.get(CONFIG_PATH_ENV) else None)
    if config_path:
        config = _from_mapping(config, load_yaml(Path(config_path)), str(config_path))
        logger.debug(f"Loaded configuration from {config_path}")

    env_values = {
        key[len(ENV_PREFIX):]: value
        for key, value in env.items()
        if key.startswith(ENV_PREFIX) and key != CONFIG_PATH_ENV and value != ""
    }
    if env_values:
        config = _from_mapping(config, env_values, "environment")

    return _validate(config)
