"""
CLI commands for the setup configuration.

Usage::

    aegis config check
    aegis config check /etc/aegis-backup/config.yml --json
    aegis config paths --root /tmp/aegis-test
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def config() -> None:
    """Setup configuration — validate config.yml, show resolved paths."""


@config.command("check")
@click.argument(
    "path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def config_check(path: Path | None, as_json: bool) -> None:
    """Validate a published config.yml (default: /etc/aegis-backup/config.yml)."""
    from aegis.core.use_cases.config_check import check_config

    result = check_config(config_path=path)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None
        summary = result.to_dict()
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Backend: {summary['backend']}")
        click.echo(f"   Provider: {summary['provider']}")
        click.echo(f"   Jobs: {summary['job_count']}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


@config.command("paths")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Relocate every default path under this directory.",
)
@click.option(
    "--paths",
    "paths_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file overriding individual paths.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def config_paths(root: Path | None, paths_file: Path | None, as_json: bool) -> None:
    """Print the paths setup would use."""
    from aegis.core.config.loader import ConfigError, resolve_setup_config

    try:
        setup_config = resolve_setup_config(root, paths_file)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    paths = setup_config.paths()
    if as_json:
        click.echo(json.dumps(paths, indent=2))
        return

    width = max(len(name) for name in paths)
    for name, value in paths.items():
        click.echo(f"   {name.ljust(width)}  {value}")
