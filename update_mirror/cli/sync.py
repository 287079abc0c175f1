"""
CLI sync commands — mirror a repository and show past results.

Usage:
    update-mirror sync REPOSITORY DESTINATION [--dry-run-mirror] [--json]
    update-mirror status [--json]
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from ..validation import ConfigurationError
from .common import destination_arg, get_config, repository_arg


@click.command("sync")
@click.argument("repository")
@click.argument("destination")
@click.option("--dry-run-mirror", is_flag=True, help="Pass --dry-run to azcopy (no transfer)")
@click.option("--json", "as_json", is_flag=True, help="Output the outcome as JSON")
@click.pass_context
def sync_cmd(
    ctx: click.Context,
    repository: str,
    destination: str,
    dry_run_mirror: bool,
    as_json: bool,
) -> None:
    """Normalize REPOSITORY (if local) and mirror it to DESTINATION."""
    from ..credentials.registry import build_credential_provider
    from ..mirror.azcopy import AzCopyMirrorer
    from ..mirror.orchestrator import SyncOrchestrator
    from ..mirror.state import SyncStatusStore

    config = get_config(ctx)
    root = repository_arg(repository)
    url = destination_arg(destination)

    try:
        provider = build_credential_provider(config)
    except ConfigurationError as e:
        raise click.UsageError(f"Configuration error: {e}", ctx=ctx)

    orchestrator = SyncOrchestrator(
        config,
        provider,
        AzCopyMirrorer(config.azcopy_path, dry_run=dry_run_mirror),
        status_store=SyncStatusStore(Path(config.status_file)),
    )
    outcome = orchestrator.sync(root, url)

    if as_json:
        click.echo(json.dumps(outcome.model_dump(), indent=2, default=str))
    elif outcome.ok:
        click.secho(f"✓ Synced {root} → {url}", fg="green")
        click.echo(f"  Mode:        {outcome.mode}")
        click.echo(f"  Normalized:  {len(outcome.changed_files)} descriptor(s)")
    else:
        click.secho(f"✗ Sync failed at stage '{outcome.stage}'", fg="red", bold=True)
        click.echo(f"  {outcome.reason}")
        failed = (outcome.details or {}).get("failed_files") or {}
        for path, error in failed.items():
            click.echo(f"    {path}: {error}")

    if not outcome.ok:
        ctx.exit(1)


@click.command("status")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show the last sync result per repository and destination."""
    from ..mirror.state import SyncStatusStore

    config = get_config(ctx)
    data = SyncStatusStore(Path(config.status_file)).load()

    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
        return

    syncs = data.get("syncs", {})
    if not syncs:
        click.echo("No syncs recorded yet.")
        return

    for key, entry in syncs.items():
        ok = entry.get("status") == "done"
        icon = "✅" if ok else "❌"
        click.echo(f"{icon} {key}")
        click.echo(f"    At:    {entry.get('ts_iso', '?')[:19]}")
        click.echo(f"    Mode:  {entry.get('mode') or '-'}")
        if ok:
            click.echo(f"    Normalized: {len(entry.get('changed_files') or [])} descriptor(s)")
        else:
            click.echo(f"    Stage: {entry.get('stage')} — {entry.get('reason')}")
