"""Main CLI entry point for unipkg."""

import os
import sys
import logging
from typing import List, Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from ..backend import backend_factory
from ..core.aggregation import SearchProgress
from ..core.configuration import ConfigurationManager, dump_config
from ..core.engine import UnipkgEngine
from ..core.exceptions import UnipkgError
from ..core.system_dependency_checker import SystemDependencyChecker

# Initialize rich console for better output formatting
console = Console()


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    # Check environment variable for log level override
    env_log_level = os.getenv('UNIPKG_LOG_LEVEL', '').upper()
    if env_log_level in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
        level = getattr(logging, env_log_level)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    log_format = os.getenv('UNIPKG_LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logging.basicConfig(
        level=level,
        format=log_format
    )


class RichSearchProgress(SearchProgress):
    """One spinner per backend on a rich Progress display."""

    def __init__(self, progress: Progress):
        self.progress = progress
        self._tasks = {}

    def start(self, source_name: str) -> None:
        self._tasks[source_name] = self.progress.add_task(f"Searching {source_name}...", total=None)

    def finish(self, source_name: str, result_count: int) -> None:
        self.progress.update(
            self._tasks[source_name],
            description=f"{source_name} search done ({result_count} found)",
            total=1,
            completed=1
        )


def parse_backend_list(value: Optional[str]) -> Optional[List[str]]:
    """Parse a comma-separated backend list, rejecting unknown names."""
    if not value:
        return None
    names = [name.strip() for name in value.split(',') if name.strip()]
    unknown = [name for name in names if not backend_factory.is_backend_registered(name)]
    if unknown:
        raise click.BadParameter(
            f"unknown backend(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(backend_factory.get_registered_backends())}",
            param_hint="'--backends'"
        )
    return names


@click.group()
@click.option('--config', '-c', type=click.Path(),
              default=lambda: os.getenv('UNIPKG_CONFIG'),
              help='Path to configuration file (env: UNIPKG_CONFIG)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose logging (env: UNIPKG_VERBOSE)')
@click.pass_context
def cli(ctx, config, verbose):
    """
    Search dnf, flatpak and cargo at once and install what you pick.

    \b
    Examples:

      # Search every installed package manager
      unipkg search ripgrep

      # Only search flatpak and cargo
      unipkg search editor --backends flatpak,cargo

      # Show which package managers were found
      unipkg backends
    """
    ctx.ensure_object(dict)
    ctx.obj['config'] = config

    if not verbose and os.getenv('UNIPKG_VERBOSE', '').lower() in ['true', '1', 'yes']:
        verbose = True

    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@cli.command()
@click.argument('query')
@click.option('--backends', '-b',
              default=lambda: os.getenv('UNIPKG_BACKENDS'),
              help='Comma-separated list of backends to search (dnf,flatpak,cargo) (env: UNIPKG_BACKENDS)')
@click.option('--no-install', is_flag=True,
              help='Print the selected package instead of installing it')
@click.pass_context
def search(ctx, query, backends, no_install):
    """
    Search for packages and install the one you select.

    Results are grouped by package manager. Browse with j/k or the arrow
    keys, switch package manager with h/l or Tab, press Enter to install the
    highlighted package and q to quit without installing.
    """
    query = query.strip()
    if not query:
        raise click.UsageError("Search query must not be empty")
    names = parse_backend_list(backends)

    try:
        engine = UnipkgEngine(config_path=ctx.obj['config'])
        available = engine.get_available_backends(names)

        with Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            groups = engine.search(query, available, RichSearchProgress(progress))

        chosen = engine.select(groups)
        if chosen is None:
            console.print("[yellow]No package selected.[/yellow]")
            return

        if no_install:
            click.echo(f"{chosen.source}\t{chosen.install_id}")
            return

        console.print(f"Installing [cyan]{chosen.display_name}[/cyan] via [magenta]{chosen.source}[/magenta]...")
        engine.install(chosen, available)
        console.print("[green]Installation complete.[/green]")

    except UnipkgError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if ctx.obj['verbose']:
            console.print_exception()
        sys.exit(1)


@cli.command(name='backends')
@click.pass_context
def list_backends(ctx):
    """Show the supported package managers and whether they are installed."""
    checker = SystemDependencyChecker()

    table = Table(title="Package managers")
    table.add_column("Backend", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Notes", style="white")

    for backend in backend_factory.create_backends(dependency_checker=checker):
        if checker.check_command_availability(backend.command):
            table.add_row(backend.get_name(), "[green]available[/green]", "")
        else:
            table.add_row(
                backend.get_name(),
                "[red]not installed[/red]",
                checker.get_installation_instructions(backend.command)
            )

    console.print(table)


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--force', is_flag=True, help='Overwrite existing configuration')
@click.pass_context
def config_init(ctx, force):
    """Write a configuration file with the default settings."""
    try:
        path = ConfigurationManager(ctx.obj['config']).write_defaults(force=force)
    except UnipkgError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    console.print(f"✅ Configuration written to [green]{path}[/green]")


@config.command('show')
@click.pass_context
def config_show(ctx):
    """Show the effective configuration."""
    manager = ConfigurationManager(ctx.obj['config'])
    try:
        effective = manager.load()
    except UnipkgError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    source = manager.config_path if manager.config_path.exists() else "built-in defaults"
    console.print(f"[dim]# {source}[/dim]")
    console.print(Syntax(dump_config(effective), "yaml", theme="monokai", background_color="default"))


def main() -> int:
    """Main CLI entry point."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.exceptions.Abort:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except SystemExit as e:
        return e.code
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
