"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from digraph._graph import DirectedGraph


def render_adjacency_table(graph: DirectedGraph[Any], console: Console) -> None:
    """Render every node with its successors as a Rich table.

    Args:
        graph: The graph to render.
        console: Rich Console to output to.

    """
    if not graph:
        console.print("[dim]Graph has no nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="bold")
    table.add_column("Successors")

    for position, node in enumerate(graph):
        successors = ", ".join(escape(str(target)) for target in graph.adjacent(node))
        table.add_row(str(position), escape(str(node)), successors or "[dim]-[/dim]")

    console.print(table)
    console.print(f"\n[dim]Total: {len(graph)} nodes, {len(graph.edges())} edges[/dim]")


def render_order(order: list[Any], console: Console) -> None:
    """Render a node order, one node per line."""
    for node in order:
        console.print(escape(str(node)), highlight=False)


def render_back_edges(back_edges: list[tuple[Any, Any]], console: Console) -> None:
    """Render cycle-closing edges as a Rich table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Source", style="bold")
    table.add_column("Target")

    for source, target in back_edges:
        table.add_row(escape(str(source)), escape(str(target)))

    console.print(table)
