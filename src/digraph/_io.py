import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from ._graph import DirectedGraph

logger = logging.getLogger(__name__)

GRAPH_FORMATS = ("json", "toml")


class GraphFileError(Exception):
    """Error reading or writing a graph file."""


def graph_format(path: Path) -> str:
    """Get the interchange format of a graph file from its suffix.

    Raises:
        GraphFileError: If the suffix is not one of ``.json`` or ``.toml``.

    """
    fmt = path.suffix.lower().removeprefix(".")
    if fmt not in GRAPH_FORMATS:
        msg = f"Unsupported graph file '{path}'. Expected a .json or .toml file"
        raise GraphFileError(msg)
    return fmt


def load_graph(path: Path) -> DirectedGraph[Any]:
    """Load a graph from a JSON or TOML file holding its serialized form.

    Args:
        path: Path to the graph file.

    Returns:
        The deserialized graph.

    Raises:
        GraphFileError: If the file format is unsupported or the content cannot be decoded.
        pydantic.ValidationError: If the content is not a valid serialized graph.

    """
    fmt = graph_format(path)
    with path.open("rb") as f:
        try:
            data = tomllib.load(f) if fmt == "toml" else json.load(f)
        except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Invalid {fmt.upper()} in {path}: {e}"
            raise GraphFileError(msg) from e

    graph: DirectedGraph[Any] = DirectedGraph(data)
    logger.debug(f"Loaded graph with {len(graph)} nodes from {path}")
    return graph


def dump_graph(graph: DirectedGraph[Any], fmt: str, *, indent: int = 2) -> str:
    """Render the serialized form of a graph as JSON or TOML text.

    The text is parsed back before it is returned, so a graph whose node
    identifiers would not load back unchanged (e.g. tuples, which both
    formats turn into arrays) is rejected instead of written lossily.

    Raises:
        GraphFileError: If the format is unknown or a node identifier cannot be
            represented in it.

    """
    data = graph.serialize().model_dump()
    try:
        match fmt:
            case "json":
                text = json.dumps(data, indent=indent) + "\n"
                reloaded = json.loads(text)
            case "toml":
                text = tomli_w.dumps(data)
                reloaded = tomllib.loads(text)
            case _:
                msg = f"Unsupported graph format '{fmt}'. Expected one of {', '.join(GRAPH_FORMATS)}"
                raise GraphFileError(msg)
    except TypeError as e:
        msg = f"Cannot write graph as {fmt.upper()}: {e}"
        raise GraphFileError(msg) from e

    changed = [node for node, loaded in zip(data["nodes"], reloaded["nodes"], strict=True) if node != loaded]
    if changed:
        msg = f"Cannot write graph as {fmt.upper()}: node(s) {changed} would not load back unchanged"
        raise GraphFileError(msg)
    return text


def save_graph(graph: DirectedGraph[Any], path: Path) -> None:
    """Write the serialized form of a graph to a JSON or TOML file.

    Parent directories are created as needed.
    """
    text = dump_graph(graph, graph_format(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug(f"Saved graph with {len(graph)} nodes to {path}")
