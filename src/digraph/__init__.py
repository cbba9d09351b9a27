"""Insertion-ordered directed graph with topological sorting."""

__all__ = [
    "DirectedGraph",
    "GraphFileError",
    "Link",
    "SerializedGraph",
    "dump_graph",
    "find_back_edges",
    "load_graph",
    "save_graph",
    "topological_sort",
]

from ._graph import DirectedGraph, find_back_edges, topological_sort
from ._io import GraphFileError, dump_graph, load_graph, save_graph
from ._serialization import Link, SerializedGraph
