"""
Update Mirror — CLI Entry Point

Usage:
    update-mirror sync REPOSITORY DESTINATION
    update-mirror normalize REPOSITORY [--dry-run]
    update-mirror detect-mode REPOSITORY
    update-mirror status
"""

from __future__ import annotations

# Load .env FIRST, before anything reads UPDATE_MIRROR_* variables
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from typing import Optional

import click

from . import __version__
from .cli.repo import detect_mode_cmd, normalize_cmd
from .cli.sync import status_cmd, sync_cmd
from .logging_config import setup_logging


@click.group()
@click.version_option(__version__, prog_name="update-mirror")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: $UPDATE_MIRROR_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.option("--log-format", type=click.Choice(["text", "json"]), default=None)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    verbose: bool,
    log_format: Optional[str],
) -> None:
    """Update Mirror — normalize a vendor update repository and mirror it to blob storage."""
    setup_logging(level="DEBUG" if verbose else None, format_type=log_format)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


cli.add_command(sync_cmd)
cli.add_command(status_cmd)
cli.add_command(normalize_cmd)
cli.add_command(detect_mode_cmd)


if __name__ == "__main__":
    cli()
