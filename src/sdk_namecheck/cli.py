"""Command-line interface for SDK Namecheck"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .api import analyze
from .config import load_config
from .exceptions import ConfigurationError, GraphError, NamecheckError
from .formatters import RichFormatter, get_formatter
from .graph import load_graph
from .logging_config import setup_logging

app = typer.Typer(
    name="sdk-namecheck",
    help="SDK Namecheck - client name resolution and collision checks",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_INPUT_ERROR = 2


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]SDK Namecheck[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Resolve client names and report naming conflicts."""


@app.command()
def check(
    graph_file: Path = typer.Argument(
        ...,
        help="Service graph JSON exported by the type-checker",
        dir_okay=False,
    ),
    emitter: Optional[str] = typer.Option(
        None,
        "--emitter",
        "-e",
        help="Emitter package name, e.g. @azure-tools/typespec-python",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Flatten every namespace into this one and report cross-namespace collisions",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), json, quiet",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
):
    """
    Check a service graph for duplicate and synthesized client names.

    [bold cyan]Examples:[/bold cyan]

      sdk-namecheck check service.json

      sdk-namecheck check service.json --emitter @azure-tools/typespec-python

      sdk-namecheck check service.json --namespace Contoso --format json | jq .
    """
    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(EXIT_INPUT_ERROR)

    try:
        formatter = get_formatter(fmt)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_INPUT_ERROR)
    if isinstance(formatter, RichFormatter):
        formatter.console = console

    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = load_config(
            config_file=config,
            emitter_name=emitter,
            namespace=namespace,
            verbose=verbose,
            quiet=quiet,
        )
        logger.debug(f"Loaded settings: {settings}")

        graph = load_graph(graph_file)
        logger.info(
            f"Loaded graph: {len(graph.types)} types, {len(graph.operations)} operations, "
            f"{len(graph.namespaces)} namespaces"
        )

        result = analyze(graph, config=settings)

    except (ConfigurationError, GraphError) as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_INPUT_ERROR)

    except NamecheckError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_DIAGNOSTICS)

    formatter.render(result)
    raise typer.Exit(EXIT_DIAGNOSTICS if result.has_errors else EXIT_OK)


if __name__ == "__main__":
    app()
