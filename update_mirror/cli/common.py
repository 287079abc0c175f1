"""
Shared CLI helpers — config loading and input validation.
"""

from __future__ import annotations

from pathlib import Path

import click

from ..config.loader import SyncConfig, load_config
from ..validation import (
    ConfigurationError,
    ValidationError,
    validate_destination_url,
    validate_repository_path,
)


def get_config(ctx: click.Context) -> SyncConfig:
    """Load the config once per invocation; bad config is a usage error."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            obj["config"] = load_config(obj.get("config_path"))
        except ConfigurationError as e:
            raise click.UsageError(f"Configuration error: {e}", ctx=ctx)
    return obj["config"]


def repository_arg(value: str) -> Path:
    try:
        return validate_repository_path(value)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="REPOSITORY")


def destination_arg(value: str) -> str:
    try:
        return validate_destination_url(value)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="DESTINATION")
