"""Mutable, insertion-ordered directed graph."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

from digraph._serialization import Link, SerializedGraph

from ._algorithms import find_back_edges, topological_sort

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from typing import Self

logger = logging.getLogger(__name__)


class DirectedGraph[T: Hashable]:
    """A directed graph built up incrementally from nodes and edges.

    Nodes are arbitrary hashable identifiers without payload. The graph keeps
    one insertion-ordered mapping from each node to its successors, itself an
    insertion-ordered mapping used as an ordered set. Enumeration order of
    ``nodes()``, ``adjacent()`` and ``serialize()`` therefore follows the order
    in which nodes and edges were added.

    No operation raises for unknown nodes, missing edges or cycles: queries
    return empty results and removals are no-ops.

    Example:
        >>> graph = DirectedGraph().add_edge("socks", "shoes").add_edge("pants", "shoes")
        >>> graph.nodes()
        ['socks', 'shoes', 'pants']
        >>> graph.topological_sort()
        ['pants', 'socks', 'shoes']

    """

    __slots__ = ("_successors",)

    def __init__(self, serialized: SerializedGraph | Mapping[str, Any] | None = None) -> None:
        """Create an empty graph, or one populated from its serialized form."""
        self._successors: dict[T, dict[T, None]] = {}
        if serialized is not None:
            self.deserialize(serialized)

    # -----------------
    # NODE OPERATIONS
    # -----------------

    def add_node(self, node: T) -> Self:
        """Add a node if it is not already present."""
        self._successors.setdefault(node, {})
        return self

    def remove_node(self, node: T) -> Self:
        """Remove a node together with all of its incoming and outgoing edges."""
        if self._successors.pop(node, None) is None:
            return self
        for targets in self._successors.values():
            targets.pop(node, None)
        logger.debug(f"Removed node {node!r}")
        return self

    def nodes(self) -> list[T]:
        """Return all nodes in insertion order."""
        return list(self._successors)

    # -----------------
    # EDGE OPERATIONS
    # -----------------

    def add_edge(self, source: T, target: T) -> Self:
        """Add the edge ``source -> target``, adding missing endpoints first.

        Adding an edge that already exists leaves the graph unchanged.
        """
        targets = self._successors.setdefault(source, {})
        self._successors.setdefault(target, {})
        targets[target] = None
        return self

    def remove_edge(self, source: T, target: T) -> Self:
        """Remove the edge ``source -> target``. Both nodes stay in the graph."""
        targets = self._successors.get(source)
        if targets is not None:
            targets.pop(target, None)
        return self

    def adjacent(self, node: T) -> list[T]:
        """Get the direct successors of a node, in the order their edges were added.

        Args:
            node: The node to query.

        Returns:
            List of successors. Empty if the node is unknown or has no outgoing edges.

        """
        return list(self._successors.get(node, ()))

    def edges(self) -> list[tuple[T, T]]:
        """Return all edges as ``(source, target)`` pairs, node by node in adjacency order."""
        return [(source, target) for source, targets in self._successors.items() for target in targets]

    # -----------------
    # ORDERING
    # -----------------

    def topological_sort(
        self,
        source_nodes: Iterable[T] | None = None,
        *,
        include_source_nodes: bool = True,
    ) -> list[T]:
        """Return nodes so that every node comes before its successors.

        The traversal is depth-first from each source node in turn. An edge that
        leads back to a node still being visited closes a cycle and is ignored
        for ordering; use ``back_edges()`` to find out which edges those were.

        Args:
            source_nodes: Nodes to start from. Defaults to every node in
                insertion order.
            include_source_nodes: If False, the source nodes are still
                traversed but are left out of the result.

        Returns:
            List of nodes in topological order.

        """
        roots = self.nodes() if source_nodes is None else list(source_nodes)
        return topological_sort(self._successors, roots, include_roots=include_source_nodes)

    def back_edges(
        self,
        source_nodes: Iterable[T] | None = None,
        *,
        include_source_nodes: bool = True,
    ) -> list[tuple[T, T]]:
        """Return the edges ``topological_sort`` ignores with the same arguments."""
        roots = self.nodes() if source_nodes is None else list(source_nodes)
        return find_back_edges(self._successors, roots, include_roots=include_source_nodes)

    def has_cycle(self) -> bool:
        """Check if the graph contains a cycle."""
        return bool(self.back_edges())

    # -----------------
    # SERIALIZATION
    # -----------------

    def serialize(self) -> SerializedGraph:
        """Convert the graph to its node-list / link-list form."""
        nodes = self.nodes()
        index = {node: position for position, node in enumerate(nodes)}
        links = [Link(source=index[source], target=index[target]) for source, target in self.edges()]
        return SerializedGraph(nodes=nodes, links=links)

    def deserialize(self, serialized: SerializedGraph | Mapping[str, Any]) -> Self:
        """Replace the contents of the graph with a serialized graph.

        Args:
            serialized: A ``SerializedGraph`` or a mapping of the same shape,
                e.g. parsed JSON.

        Returns:
            The graph itself.

        Raises:
            pydantic.ValidationError: If the mapping is not a valid serialized graph.

        """
        if not isinstance(serialized, SerializedGraph):
            serialized = SerializedGraph.model_validate(serialized)

        self._successors.clear()
        for node in serialized.nodes:
            self.add_node(node)
        for link in serialized.links:
            self.add_edge(serialized.nodes[link.source], serialized.nodes[link.target])

        logger.debug(f"Deserialized graph with {len(serialized.nodes)} nodes and {len(serialized.links)} links")
        return self

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._successors)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._successors

    def __iter__(self) -> Iterator[T]:
        """Iterate over nodes in insertion order."""
        return iter(self.nodes())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectedGraph):
            return NotImplemented
        return self.nodes() == other.nodes() and self.edges() == other.edges()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self)}, edges={len(self.edges())})"
