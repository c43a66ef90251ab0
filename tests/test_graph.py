from __future__ import annotations

import logging
from typing import Dict

from conftest import make_graph
from tenderly_plugin.core.graph import DependencyGraph, resolve_dependencies
from tenderly_plugin.core.types import Metadata


class CountingGraph(DependencyGraph):
    def __init__(self, source: DependencyGraph):
        super().__init__(files=source.files, dependencies=source.dependencies)
        self.lookups: Dict[str, int] = {}

    def dependencies_of(self, source_name):
        self.lookups[source_name] = self.lookups.get(source_name, 0) + 1
        return super().dependencies_of(source_name)


def resolve(graph, start):
    metadata = Metadata(compiler_version="0.8.0")
    visited: Dict[str, bool] = {}
    resolve_dependencies(graph, start, metadata, visited)
    return metadata, visited


def test_collects_transitive_imports():
    graph = make_graph({
        "A.sol": ("a", ["B.sol"]),
        "B.sol": ("b", ["C.sol"]),
        "C.sol": ("c", []),
        "Unrelated.sol": ("u", []),
    })
    metadata, visited = resolve(graph, "A.sol")

    assert metadata.sources == {"B.sol": {"content": "b"}, "C.sol": {"content": "c"}}
    assert visited == {"A.sol": True, "B.sol": True, "C.sol": True}


def test_starting_file_is_left_to_the_caller():
    graph = make_graph({"A.sol": ("a", [])})
    metadata, _ = resolve(graph, "A.sol")
    assert metadata.sources == {}


def test_cycle_terminates_and_visits_each_node_once():
    graph = CountingGraph(make_graph({
        "A.sol": ("a", ["B.sol"]),
        "B.sol": ("b", ["C.sol"]),
        "C.sol": ("c", ["A.sol"]),
    }))
    metadata, visited = resolve(graph, "A.sol")

    assert set(visited) == {"A.sol", "B.sol", "C.sol"}
    assert graph.lookups == {"A.sol": 1, "B.sol": 1, "C.sol": 1}
    assert set(metadata.sources) == {"A.sol", "B.sol", "C.sol"}


def test_diamond_visits_shared_dependency_once():
    graph = CountingGraph(make_graph({
        "Top.sol": ("top", ["Left.sol", "Right.sol"]),
        "Left.sol": ("left", ["Base.sol"]),
        "Right.sol": ("right", ["Base.sol"]),
        "Base.sol": ("base", []),
    }))
    metadata, _ = resolve(graph, "Top.sol")

    assert graph.lookups["Base.sol"] == 1
    assert list(metadata.sources).count("Base.sol") == 1
    assert set(metadata.sources) == {"Left.sol", "Right.sol", "Base.sol"}


def test_already_visited_path_is_skipped():
    graph = make_graph({"A.sol": ("a", ["B.sol"]), "B.sol": ("b", [])})
    metadata = Metadata(compiler_version="0.8.0")
    visited = {"A.sol": True}
    resolve_dependencies(graph, "A.sol", metadata, visited)
    assert metadata.sources == {}


def test_missing_start_path_fails_soft(caplog):
    graph = make_graph({"A.sol": ("a", [])})
    with caplog.at_level(logging.WARNING, logger="Tenderly"):
        metadata, visited = resolve(graph, "Missing.sol")

    assert metadata.sources == {}
    assert visited == {"Missing.sol": True}
    assert "Missing.sol" in caplog.text


def test_edges_to_unresolved_files_are_dropped():
    graph = make_graph({"A.sol": ("a", ["Ghost.sol", "B.sol"]), "B.sol": ("b", [])})
    assert [f.source_name for f in graph.dependencies_of("A.sol")] == ["B.sol"]
    assert graph.dependencies_of("Ghost.sol") is None
