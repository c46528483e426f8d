"""
Aegis — CLI entrypoint.

Usage:
    aegis --help
    aegis setup
    aegis setup --root /tmp/aegis-test --mock
    aegis config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from aegis import __version__
from aegis.core.observability.logging_config import resolve_level, setup_logging

EXIT_FAILED = 1
EXIT_ABORTED = 130

BANNER = "Aegis backup setup"


@click.group()
@click.version_option(version=__version__, prog_name="aegis")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """Aegis — provision this host for automated, offsite backups."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


def _progress(index: int, total: int, name: str) -> None:
    click.secho(f"[{index}/{total}] {name}...", fg="blue")


@cli.command()
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
@click.option("--mock", is_flag=True, help="Use mock installer (no packages installed).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def setup(
    ctx: click.Context,
    root: Path | None,
    paths_file: Path | None,
    mock: bool,
    as_json: bool,
) -> None:
    """Run the interactive setup wizard.

    Examples:

        aegis setup

        aegis setup --root /tmp/aegis-test --mock

        aegis setup --paths paths.yml --json
    """
    from aegis.adapters.mock import MockToolInstaller
    from aegis.adapters.shell.packages import AptToolInstaller
    from aegis.adapters.terminal.prompt import ClickPrompter
    from aegis.core.config.loader import ConfigError, resolve_setup_config
    from aegis.core.use_cases.setup import run_setup

    try:
        config = resolve_setup_config(root, paths_file)
    except ConfigError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_FAILED)

    quiet = ctx.obj.get("quiet", False)
    if not quiet and not as_json:
        click.secho(f"\n🛡  {BANNER} v{__version__}\n", fg="cyan", bold=True)

    installer = MockToolInstaller() if mock else AptToolInstaller(work_dir=config.temp_dir)
    result = run_setup(
        config,
        ClickPrompter(err=as_json),
        installer,
        on_progress=None if as_json else _progress,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        click.echo()
        click.secho("✓ Setup complete", fg="green", bold=True)
        if not quiet:
            for path in result.published:
                click.echo(f"   • {path}")
        click.echo()
    else:
        failure = result.report.failure
        assert failure is not None
        click.secho(
            f"Error at [{failure.index}/{result.report.total}] {failure.name}: {failure.error}",
            fg="red",
            err=True,
        )

    if result.aborted:
        sys.exit(EXIT_ABORTED)
    if not result.ok:
        sys.exit(EXIT_FAILED)


from aegis.ui.cli.config import config

cli.add_command(config)


if __name__ == "__main__":
    cli()
