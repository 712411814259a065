"""
devstrap — CLI entrypoint.

Usage:
    devstrap                 # full bootstrap (same as `devstrap run`)
    devstrap run --dry-run
    devstrap detect --json
    devstrap dotfiles show zshrc
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devstrap import __version__
from devstrap.core.config.loader import CONFIG_ENV_VAR
from devstrap.core.observability.logging_config import resolve_level, setup_logging

_LEVEL_STYLES = {
    "info": ("[INFO]", "green"),
    "warn": ("[WARN]", "yellow"),
    "error": ("[ERROR]", "red"),
}


def console_reporter(level: str, message: str) -> None:
    """Print a progress line the way the bootstrap talks to the user."""
    tag, color = _LEVEL_STYLES.get(level, ("[INFO]", "green"))
    click.secho(tag, fg=color, nl=False, err=level == "error")
    click.echo(f" {message}", err=level == "error")


def _prompt(label: str) -> str:
    """Ask for a value; Ctrl-C propagates as KeyboardInterrupt, not click.Abort."""
    try:
        return click.prompt(label, default="", show_default=False)
    except click.Abort:
        raise KeyboardInterrupt from None


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="devstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    envvar=CONFIG_ENV_VAR,
    help=f"Path to devstrap.yml (default: ${CONFIG_ENV_VAR}, else none).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devstrap — bootstrap a developer machine (zsh, vim, git, packages)."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("DEVSTRAP_LOG_LEVEL"),
        ),
        log_file=os.environ.get("DEVSTRAP_LOG_FILE"),
        log_file_level=os.environ.get("DEVSTRAP_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Show what would run, change nothing.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.pass_context
def run(ctx: click.Context, as_json: bool = False, dry_run: bool = False, mock: bool = False) -> None:
    """Provision this machine."""
    from devstrap.core.config.loader import ConfigError, load_settings
    from devstrap.core.use_cases.bootstrap import run_bootstrap

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)

    def reporter(level: str, message: str) -> None:
        if as_json or (quiet and level == "info"):
            return
        console_reporter(level, message)

    try:
        result = run_bootstrap(
            settings=settings,
            reporter=reporter,
            prompt=_prompt,
            dry_run=dry_run,
            mock_mode=mock,
        )
    except (KeyboardInterrupt, click.Abort):
        click.echo("\n\nSetup cancelled by user.", err=True)
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        sys.exit(1)

    if dry_run and not quiet:
        click.echo()
        click.secho("   Planned actions:", bold=True)
        for receipt in result.report.receipts:
            if receipt.status == "skipped":
                click.echo(f"     • {receipt.action_id}")

    click.echo()
    console_reporter("info", "Required actions:")
    for note in result.notes:
        click.echo(note)
    click.echo()
    for line in result.closing:
        console_reporter("warn", line)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(as_json: bool) -> None:
    """Show the detected OS profile."""
    from devstrap.core.engine.executor import Runner
    from devstrap.core.errors import UnsupportedPlatformError
    from devstrap.core.services.os_detect import detect_os, probe_curl
    from devstrap.core.use_cases.bootstrap import default_registry

    try:
        profile = probe_curl(detect_os(), Runner(default_registry()))
    except UnsupportedPlatformError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(profile.to_dict(), indent=2))
        return

    click.secho(f"\n🔍 {profile.pretty_name or profile.tag.value}", fg="cyan", bold=True)
    click.echo(f"   Profile:         {profile.tag.value}")
    click.echo(f"   Platform:        {profile.platform}")
    click.echo(f"   Package manager: {profile.package_manager or '(none)'}")
    if profile.curl_minimal:
        click.secho("   curl-minimal installed (will be swapped for curl-full)", fg="yellow")
    click.echo()


# ── Register sub-command groups from devstrap/ui/cli/ ─────────────

from devstrap.ui.cli.dotfiles import dotfiles  # noqa: E402

cli.add_command(dotfiles)


if __name__ == "__main__":
    cli()
