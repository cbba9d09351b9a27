import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from digraph._graph import DirectedGraph
from digraph._io import GraphFileError, load_graph, save_graph

from .config import ConfigError, DigraphConfig, get_config
from .graph_render import render_adjacency_table, render_back_edges, render_order

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GraphArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to a .json or .toml graph file (defaults to [tool.digraph].graph)"),
]
SourceOption = Annotated[
    list[str] | None,
    typer.Option("-s", "--source", help="Start the traversal from this node (repeatable)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Digraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> DigraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_graph(graph_path: Path | None, config: DigraphConfig) -> DirectedGraph[Any]:
    """Load the graph named on the command line, or the configured one."""
    if graph_path is None:
        if config.graph is None:
            err_console.print("[red]Error: No graph file given and no [tool.digraph].graph configured[/red]")
            raise typer.Exit(code=1)
        graph_path = config.graph
        logger.debug(f"Using graph file from config: {graph_path}")

    if not graph_path.is_file():
        err_console.print(f"[red]Error: Graph file not found: {escape(str(graph_path))}[/red]")
        raise typer.Exit(code=1)

    try:
        return load_graph(graph_path)
    except GraphFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    except ValidationError as e:
        err_console.print(f"[red]Error: Invalid graph in {escape(str(graph_path))}[/red]")
        err_console.print(escape(str(e)))
        raise typer.Exit(code=1) from e


def _check_sources(graph: DirectedGraph[Any], sources: list[str]) -> None:
    for source in sources:
        if source not in graph:
            logger.warning(f"Source node '{source}' is not in the graph")


@app.command()
def show(graph_path: GraphArgument = None) -> None:
    """Show every node of a graph with its successors."""
    graph = _load_graph(graph_path, _load_config())
    render_adjacency_table(graph, out_console)


@app.command()
def sort(
    graph_path: GraphArgument = None,
    *,
    source: SourceOption = None,
    exclude_sources: Annotated[
        bool,
        typer.Option("--exclude-sources", help="Leave the source nodes out of the order"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the order as a JSON array"),
    ] = False,
) -> None:
    """Print the nodes of a graph in topological order."""
    config = _load_config()
    graph = _load_graph(graph_path, config)

    if source:
        _check_sources(graph, source)
    # Configured exclusion only applies to explicit sources
    include_source_nodes = not (exclude_sources or (config.exclude_sources and bool(source)))
    order = graph.topological_sort(source or None, include_source_nodes=include_source_nodes)

    if as_json:
        typer.echo(json.dumps(order))
    else:
        render_order(order, out_console)


@app.command()
def cycles(
    graph_path: GraphArgument = None,
    *,
    source: SourceOption = None,
) -> None:
    """List the edges that close a cycle (exit non-zero if there are any)."""
    graph = _load_graph(graph_path, _load_config())

    if source:
        _check_sources(graph, source)
    back_edges = graph.back_edges(source or None)

    if not back_edges:
        err_console.print("[green]✓ No cycles found[/green]")
        raise typer.Exit(code=0)

    err_console.print(f"[yellow]⚠ {len(back_edges)} edge(s) close a cycle and are ignored when sorting:[/yellow]")
    render_back_edges(back_edges, out_console)
    raise typer.Exit(code=1)


@app.command()
def convert(
    graph_path: GraphArgument = None,
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to the output .json or .toml file"),
    ],
) -> None:
    """Rewrite a graph file as JSON or TOML (chosen by the output suffix)."""
    graph = _load_graph(graph_path, _load_config())

    try:
        save_graph(graph, output)
    except GraphFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print(f"[green]✓ Wrote {len(graph)} nodes to {escape(str(output))}[/green]")


def main() -> None:
    app()
