"""
CLI repository commands — inspect and normalize without mirroring.

Usage:
    update-mirror detect-mode REPOSITORY
    update-mirror normalize REPOSITORY [--dry-run] [--json]
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from ..errors import ManifestMissing, NormalizationFailed, SyncError
from ..models.report import ChangeReport
from .common import get_config, repository_arg


@click.command("detect-mode")
@click.argument("repository")
@click.pass_context
def detect_mode_cmd(ctx: click.Context, repository: str) -> None:
    """Print whether REPOSITORY is cloud-managed or local."""
    from ..repository.mode import detect_mode

    config = get_config(ctx)
    root = repository_arg(repository)

    try:
        mode = detect_mode(root, config.manifest_name, config.encoding)
    except ManifestMissing as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)

    click.echo(mode)


def _print_report(report: ChangeReport) -> None:
    data = report.to_dict()
    verb = "Would rewrite" if report.dry_run else "Rewrote"

    for entry in data["changed"]:
        click.echo(f"  ✎ {verb} {entry['path']}")
        click.echo(f"      {entry['before']} → {entry['after']}")
    for entry in data["failed"]:
        click.secho(f"  ✗ {entry['path']}: {entry['error']}", fg="red")

    click.echo("")
    click.echo(f"  {report.summary()}")


@click.command("normalize")
@click.argument("repository")
@click.option("--dry-run", is_flag=True, help="Report changes without writing files")
@click.option("--json", "as_json", is_flag=True, help="Output the change report as JSON")
@click.pass_context
def normalize_cmd(
    ctx: click.Context,
    repository: str,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Rewrite BIOS/firmware descriptors in REPOSITORY for silent, deferred installs."""
    from ..repository.lock import repository_lock
    from ..repository.mode import MODE_CLOUD, detect_mode
    from ..repository.normalizer import normalize

    config = get_config(ctx)
    root = repository_arg(repository)

    try:
        with repository_lock(root, Path(config.lock_dir), config.lock_max_age_seconds):
            mode = detect_mode(root, config.manifest_name, config.encoding)
            if mode == MODE_CLOUD:
                click.secho("Cloud-managed repository — nothing to normalize.", fg="cyan")
                return

            report = normalize(
                root,
                manifest_name=config.manifest_name,
                suffix=config.descriptor_suffix,
                encoding=config.encoding,
                workers=config.workers,
                dry_run=dry_run,
            )
    except NormalizationFailed as e:
        if as_json:
            click.echo(json.dumps(e.report.to_dict(), indent=2))
        else:
            _print_report(e.report)
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)
    except SyncError as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    _print_report(report)
    if dry_run:
        click.secho("\n(Dry run — no files written)", fg="cyan")
    else:
        click.secho("✓ Normalization complete", fg="green")
