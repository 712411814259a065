"""
CLI commands for the generated dotfiles.

Thin wrappers over ``devstrap.core.services.generators`` and
``devstrap.core.services.dotfiles``.
"""

from __future__ import annotations

import sys

import click

from devstrap.core.services.generators import GENERATORS

_NAMES = click.Choice(sorted(GENERATORS))


@click.group()
def dotfiles() -> None:
    """Dotfiles — show or write the generated .zshrc / .vimrc."""


@dotfiles.command()
@click.argument("name", type=_NAMES)
def show(name: str) -> None:
    """Print a generated dotfile to stdout."""
    click.echo(GENERATORS[name]().content, nl=False)


@dotfiles.command()
@click.argument("name", type=_NAMES)
@click.option("--dry-run", is_flag=True, help="Show the target path, write nothing.")
def write(name: str, dry_run: bool) -> None:
    """Overwrite one dotfile in the home directory."""
    from devstrap.core.errors import BootstrapError
    from devstrap.core.engine.executor import Runner
    from devstrap.core.models.profile import BootstrapConfig, HostEnvironment
    from devstrap.core.services.dotfiles import write_dotfile
    from devstrap.core.services.os_detect import detect_os
    from devstrap.core.use_cases.bootstrap import default_registry
    from devstrap.main import console_reporter

    try:
        host = HostEnvironment.from_environ()
        config = BootstrapConfig(profile=detect_os(), host=host, dry_run=dry_run)
        runner = Runner(
            default_registry(),
            home=str(host.home),
            dry_run=dry_run,
            reporter=console_reporter,
        )
        generated = write_dotfile(config, runner, name)
    except BootstrapError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    target = host.home / generated.path
    if dry_run:
        click.echo(f"   [dry-run] Would overwrite {target}")
    else:
        click.secho(f"✅ {target}", fg="green")
