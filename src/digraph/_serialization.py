"""Node-list / link-list interchange format for directed graphs.

The format is the only wire representation of a graph:

    {
        "nodes": ["a", "b", "c"],
        "links": [{"source": 0, "target": 1}, {"source": 1, "target": 2}]
    }

Link endpoints are zero-based positions into ``nodes``.
"""

from __future__ import annotations

from collections.abc import Hashable  # noqa: TC003 - Pydantic requires Hashable at runtime for field validation
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_validator

if TYPE_CHECKING:
    from typing import Self


class Link(BaseModel):
    """A directed edge expressed as indices into ``SerializedGraph.nodes``."""

    model_config = ConfigDict(frozen=True)

    source: NonNegativeInt
    target: NonNegativeInt


class SerializedGraph(BaseModel):
    """Serialized form of a ``DirectedGraph``.

    Node order is the graph's insertion order, and links are listed node by
    node in adjacency order, so serializing the same graph twice gives equal
    results.

    Use ``model_dump()`` to obtain the plain dict form for JSON or TOML.
    """

    model_config = ConfigDict(frozen=True)

    nodes: list[Hashable]
    links: list[Link]

    @model_validator(mode="after")
    def _check_link_indices(self) -> Self:
        node_count = len(self.nodes)
        for position, link in enumerate(self.links):
            for index in (link.source, link.target):
                if index >= node_count:
                    msg = f"links[{position}] refers to node index {index}, but only {node_count} nodes are defined"
                    raise ValueError(msg)
        return self
