"""Tests for the digraph CLI commands."""

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from digraph import DirectedGraph, load_graph, save_graph
from digraph._cli.main import app

runner = CliRunner()


@pytest.fixture
def chain_file(tmp_path: Path) -> Path:
    """a -> b -> c, saved as JSON."""
    path = tmp_path / "chain.json"
    save_graph(DirectedGraph().add_edge("a", "b").add_edge("b", "c"), path)
    return path


@pytest.fixture
def cycle_file(tmp_path: Path) -> Path:
    """a -> b -> c -> a, saved as TOML."""
    path = tmp_path / "cycle.toml"
    save_graph(DirectedGraph().add_edge("a", "b").add_edge("b", "c").add_edge("c", "a"), path)
    return path


class TestSort:
    def test_plain_output(self, chain_file: Path) -> None:
        result = runner.invoke(app, ["sort", str(chain_file)])
        assert result.exit_code == 0, result.output
        assert result.stdout.split() == ["a", "b", "c"]

    def test_json_output(self, chain_file: Path) -> None:
        result = runner.invoke(app, ["sort", str(chain_file), "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["a", "b", "c"]

    def test_exclude_sources(self, chain_file: Path) -> None:
        result = runner.invoke(app, ["sort", str(chain_file), "-s", "a", "--exclude-sources", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["b", "c"]

    def test_cycle_with_excluded_source(self, cycle_file: Path) -> None:
        result = runner.invoke(app, ["sort", str(cycle_file), "--source", "a", "--exclude-sources", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["b", "c"]

    def test_graph_from_config(self, tmp_path: Path, chain_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text(
            f'[tool.digraph]\ngraph = "{chain_file.name}"\nexclude-sources = true\n',
        )
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["sort", "-s", "b", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["c"]

    def test_no_graph(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'test'\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["sort"])

        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["sort", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_invalid_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"nodes": ["a"], "links": [{"source": 0, "target": 9}]}))

        result = runner.invoke(app, ["sort", str(path)])

        assert result.exit_code == 1


class TestShow:
    def test_lists_nodes(self, chain_file: Path) -> None:
        result = runner.invoke(app, ["show", str(chain_file)])
        assert result.exit_code == 0, result.output
        assert "Total: 3 nodes, 2 edges" in result.stdout

    def test_empty_graph(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        save_graph(DirectedGraph(), path)

        result = runner.invoke(app, ["show", str(path)])

        assert result.exit_code == 0, result.output
        assert "Graph has no nodes" in result.stdout


class TestCycles:
    def test_acyclic(self, chain_file: Path) -> None:
        result = runner.invoke(app, ["cycles", str(chain_file)])
        assert result.exit_code == 0, result.output

    def test_cycle(self, cycle_file: Path) -> None:
        result = runner.invoke(app, ["cycles", str(cycle_file)])
        assert result.exit_code == 1
        assert "Source" in result.stdout


class TestConvert:
    def test_json_to_toml(self, tmp_path: Path, chain_file: Path) -> None:
        output = tmp_path / "out" / "chain.toml"

        result = runner.invoke(app, ["convert", str(chain_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert load_graph(output) == load_graph(chain_file)

    def test_unsupported_output(self, tmp_path: Path, chain_file: Path) -> None:
        result = runner.invoke(app, ["convert", str(chain_file), "-o", str(tmp_path / "chain.yaml")])
        assert result.exit_code == 1


class TestConfiguredExclusion:
    def test_applies_to_explicit_sources_only(
        self,
        tmp_path: Path,
        chain_file: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        (tmp_path / "pyproject.toml").write_text(
            f'[tool.digraph]\ngraph = "{chain_file.name}"\nexclude-sources = true\n',
        )
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["sort", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["a", "b", "c"]


class TestLogging:
    def test_unknown_source_is_warned_about(self, chain_file: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="digraph"):
            result = runner.invoke(app, ["sort", str(chain_file), "-s", "z", "--json"])

        assert result.exit_code == 0, result.output
        assert "Source node 'z' is not in the graph" in caplog.text
        assert json.loads(result.stdout) == ["z"]

    def test_verbose_reports_loading(self, chain_file: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="digraph"):
            result = runner.invoke(app, ["--verbose", "sort", str(chain_file), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == ["a", "b", "c"]
        assert f"Loaded graph with 3 nodes from {chain_file}" in caplog.text
