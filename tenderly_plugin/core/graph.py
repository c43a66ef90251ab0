"""
Dependency graph of resolved source files and the recursive walk that
collects a contract's full source closure.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .types import Metadata

logger = logging.getLogger("Tenderly")


@dataclass(frozen=True)
class FileContent:
    raw_content: str
    imports: tuple = ()


@dataclass(frozen=True)
class ResolvedFile:
    """A source file as resolved by the host build tool."""

    source_name: str
    content: FileContent


@dataclass
class DependencyGraph:
    """
    Resolved source files keyed by source name, plus the import edges
    between them. Iteration follows insertion order.
    """

    files: Dict[str, ResolvedFile] = field(default_factory=dict)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)

    def add_file(self, resolved_file: ResolvedFile, imports: Iterable[str] = ()) -> None:
        self.files[resolved_file.source_name] = resolved_file
        self.dependencies[resolved_file.source_name] = list(imports)

    def resolved_files(self) -> List[ResolvedFile]:
        return list(self.files.values())

    def dependencies_of(self, source_name: str) -> Optional[List[ResolvedFile]]:
        """
        Files imported by `source_name`, or None when the name is not in the graph.

        Edges pointing at names the graph never resolved are dropped.
        """
        if source_name not in self.files:
            return None
        return [
            self.files[dep]
            for dep in self.dependencies.get(source_name, [])
            if dep in self.files
        ]


def resolve_dependencies(
    graph: DependencyGraph,
    source_path: str,
    metadata: Metadata,
    visited: Dict[str, bool],
) -> None:
    """
    Add every file transitively imported by `source_path` to `metadata`.

    `visited` is shared across the recursion; a path already in it is not
    walked again, so cycles and diamond imports terminate. The starting
    file's own content is added by the caller.
    """
    if visited.get(source_path):
        return
    visited[source_path] = True

    dependencies = graph.dependencies_of(source_path)
    if dependencies is None:
        logger.warning(f"Source {source_path} is missing from the dependency graph, skipping")
        return

    for dependency in dependencies:
        resolve_dependencies(graph, dependency.source_name, metadata, visited)
        metadata.add_source(dependency.source_name, dependency.content.raw_content)
