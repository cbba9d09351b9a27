"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in digraph configuration."""


@dataclass(slots=True, frozen=True)
class DigraphConfig:
    """Configuration loaded from the ``[tool.digraph]`` section of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    exclude_sources: bool = False
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find the pyproject.toml closest to start_dir (the working directory by default)."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(pyproject_path: Path) -> DigraphConfig:
    """Load and validate [tool.digraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DigraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("digraph", {})
    if not section:
        return DigraphConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in section:
        graph_value = section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.digraph].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    exclude_sources = section.get("exclude-sources", False)
    if not isinstance(exclude_sources, bool):
        msg = "Invalid [tool.digraph].exclude-sources: expected boolean"
        raise ConfigError(msg)

    return DigraphConfig(
        graph=graph_path,
        exclude_sources=exclude_sources,
        project_root=project_root,
    )


def get_config() -> DigraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DigraphConfig (may be empty if no pyproject.toml or no [tool.digraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DigraphConfig()
    return load_config(pyproject_path)
