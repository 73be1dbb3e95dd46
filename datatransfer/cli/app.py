"""
datatransfer CLI Application - Built with Click.

Commands:
    datatransfer run      Run the transfers described by a settings file
    datatransfer list     List the registered source and sink extensions
"""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from datatransfer import __version__
from datatransfer.config import DEFAULT_SETTINGS_FILE, load_config
from datatransfer.config.model import SINK_KEY, SOURCE_KEY
from datatransfer.core.cancellation import CancellationScope
from datatransfer.core.env import get_env
from datatransfer.core.exceptions import OperationCancelledError
from datatransfer.core.logger import configure_default_logging
from datatransfer.engine.runner import RunResult, TransferRunner
from datatransfer.extensions.registry import default_registry

EXIT_CANCELLED = 130

console = Console(stderr=True)


class OrderedGroup(click.Group):
    """Click Group that lists commands in the order they were added."""

    def list_commands(self, ctx):
        return list(self.commands.keys())


@click.group(cls=OrderedGroup)
@click.version_option(version=__version__, prog_name="datatransfer")
def cli():
    """
    datatransfer - Stream records from a source extension to a sink extension.

    \b
    Commands:
      run      Run the operations in a settings file
      list     Show available source and sink extensions
    """


# ============================================================================
# datatransfer run
# ============================================================================


@click.command()
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Settings file (JSON or YAML). Defaults to ./{DEFAULT_SETTINGS_FILE} if present.",
)
@click.option("--source", default=None, help="Source extension name (overrides the file)")
@click.option("--sink", default=None, help="Sink extension name (overrides the file)")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=None,
    help="Load environment variables from this .env file first",
)
@click.option("--no-plugins", is_flag=True, help="Only use the bundled extensions")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def run_cmd(ctx, settings_path, source, sink, env_file, no_plugins, verbose):
    """
    Run every operation of a transfer configuration.

    \b
    Exit codes:
      0    all operations completed
      1    Source or Sink is not configured
      130  cancelled (Ctrl+C / SIGTERM)
    Any other failure aborts with a traceback.

    \b
    Example:
        datatransfer run --settings migrationsettings.json
        datatransfer run --source JSON --sink JSON
    """
    configure_default_logging(logging.DEBUG if verbose else logging.INFO, rich=True)

    env = get_env()
    env.load(env_file)

    if settings_path is None and Path(DEFAULT_SETTINGS_FILE).exists():
        settings_path = Path(DEFAULT_SETTINGS_FILE)

    overrides = {}
    if source is not None:
        overrides[SOURCE_KEY] = source
    if sink is not None:
        overrides[SINK_KEY] = sink

    config = load_config(settings_path, overrides=overrides)
    registry = default_registry(load_entry_points=not no_plugins)

    try:
        result = asyncio.run(_execute(TransferRunner(registry), config))
    except OperationCancelledError as e:
        console.print(f"[yellow]Transfer cancelled[/yellow]{f' ({e.reason})' if e.reason else ''}")
        ctx.exit(EXIT_CANCELLED)

    if result.success:
        _print_summary(result)
    else:
        console.print(f"[red]{result.error}[/red]")
    ctx.exit(result.exit_code)


async def _execute(runner: TransferRunner, config) -> RunResult:
    cancellation = CancellationScope()
    cancellation.install_signal_handlers()
    return await runner.execute(config, cancellation)


def _print_summary(result: RunResult) -> None:
    table = Table(title="Transfer Summary")
    table.add_column("#", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Sink", style="cyan")
    table.add_column("Items", justify="right", style="green")
    table.add_column("Seconds", justify="right")
    table.add_column("Items/s", justify="right")

    for op in result.operations:
        table.add_row(
            str(op.index + 1),
            op.source,
            op.sink,
            str(op.items),
            f"{op.duration_seconds:.2f}",
            f"{op.items_per_second:.1f}",
        )
    console.print(table)


# ============================================================================
# datatransfer list
# ============================================================================


@click.command()
@click.option("--no-plugins", is_flag=True, help="Only show the bundled extensions")
def list_cmd(no_plugins):
    """List registered source and sink extensions."""
    registry = default_registry(load_entry_points=not no_plugins)

    table = Table(title="Extensions")
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    table.add_column("Sink")

    source_names = {ext.display_name for ext in registry.sources}
    sink_names = {ext.display_name for ext in registry.sinks}
    for name in sorted(source_names | sink_names):
        table.add_row(
            name,
            "[green]●[/green]" if name in source_names else "",
            "[green]●[/green]" if name in sink_names else "",
        )
    Console().print(table)


cli.add_command(run_cmd, name="run")
cli.add_command(list_cmd, name="list")

if __name__ == "__main__":
    cli()
