"""Graph module providing the directed graph container.

This module contains:
- DirectedGraph[T]: A mutable, insertion-ordered directed graph
- topological_sort: Depth-first ordering that tolerates cycles
- find_back_edges: The edges that topological_sort ignores
"""

from ._algorithms import find_back_edges, topological_sort
from ._directed_graph import DirectedGraph

__all__ = ["DirectedGraph", "find_back_edges", "topological_sort"]
