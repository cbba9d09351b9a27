"""Depth-first algorithms over successor mappings."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping

logger = logging.getLogger(__name__)


def _depth_first[T: Hashable](
    successors: Mapping[T, Iterable[T]],
    roots: Iterable[T],
    *,
    include_roots: bool,
) -> tuple[list[T], list[tuple[T, T]]]:
    """Run the depth-first traversal shared by the public functions.

    Returns:
        The topological order and the edges that were ignored because they
        lead back onto the active path.

    """
    roots = list(roots)
    excluded: set[T] = set() if include_roots else set(roots)

    # Excluded roots count as visited before the traversal starts, so they
    # are expanded once from the root loop and never emitted.
    finished: set[T] = set(excluded)
    active: set[T] = set()
    finalized: list[T] = []
    back_edges: list[tuple[T, T]] = []

    def walk(start: T) -> None:
        active.add(start)
        stack = [(start, iter(successors.get(start, ())))]
        while stack:
            node, children = stack[-1]
            for child in children:
                if child in active:
                    back_edges.append((node, child))
                    continue
                if child in finished:
                    continue
                active.add(child)
                stack.append((child, iter(successors.get(child, ()))))
                break
            else:
                stack.pop()
                active.discard(node)
                finished.add(node)
                if node not in excluded:
                    finalized.append(node)

    for root in roots:
        if root in excluded or root not in finished:
            walk(root)

    finalized.reverse()
    return finalized, back_edges


def topological_sort[T: Hashable](
    successors: Mapping[T, Iterable[T]],
    roots: Iterable[T] | None = None,
    *,
    include_roots: bool = True,
) -> list[T]:
    """Sort a graph topologically (sources before their successors).

    Edges that would re-enter a node still on the active path close a cycle;
    they are ignored for ordering instead of raising.

    Args:
        successors: Mapping from node to its successors, in traversal order.
        roots: Nodes to start the traversal from. Defaults to every key of
            ``successors`` in mapping order.
        include_roots: If False, the roots are traversed but left out of the
            result, even when reached again through another path.

    Returns:
        List of nodes where each node appears before its successors.

    Example:
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": ["a"]}, ["a"], include_roots=False)
        ['b', 'c']

    """
    if roots is None:
        roots = successors.keys()
    order, back_edges = _depth_first(successors, roots, include_roots=include_roots)
    if back_edges:
        logger.debug(f"Ignored {len(back_edges)} cycle edge(s) while sorting: {back_edges}")
    return order


def find_back_edges[T: Hashable](
    successors: Mapping[T, Iterable[T]],
    roots: Iterable[T] | None = None,
    *,
    include_roots: bool = True,
) -> list[tuple[T, T]]:
    """Find the edges that ``topological_sort`` ignores because they close a cycle.

    Takes the same arguments as ``topological_sort`` and reports the edges in
    the order the traversal discovers them. An empty list means the part of the
    graph reachable from ``roots`` is acyclic.

    Example:
        >>> find_back_edges({"a": ["b"], "b": ["a"]})
        [('b', 'a')]

    """
    if roots is None:
        roots = successors.keys()
    _, back_edges = _depth_first(successors, roots, include_roots=include_roots)
    return back_edges
