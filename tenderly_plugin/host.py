"""
Host build tool collaborator.

`HostRuntime` is the interface the plugin needs from the build tool;
`LocalSourceHost` implements it by reading Solidity sources straight from
the project directory.
"""

import logging
import re
from collections import deque
from pathlib import Path, PurePosixPath
from typing import List, Optional, Protocol, Tuple

from .config import Config
from .core.graph import DependencyGraph, FileContent, ResolvedFile

# Each pattern captures the quote in group 1 and the path in group 2.
IMPORT_PATTERNS = (
    re.compile(r'import\s+(?:\{[^}]*\}\s+from\s+)?(["\'])([^"\']+)\1\s*;'),
    re.compile(r'import\s+\*\s+as\s+\w+\s+from\s+(["\'])([^"\']+)\1\s*;'),
    re.compile(r'import\s+(["\'])([^"\']+)\1\s+as\s+\w+\s*;'),
)

# String literals are matched first so `//` inside a quoted URL is kept.
COMMENT_PATTERN = re.compile(
    r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')|//[^\n]*|/\*.*?\*/', re.S
)


class HostRuntime(Protocol):
    """Protocol for the host build tool's compile subtasks."""

    async def get_source_paths(self) -> List[str]: ...

    async def get_source_names(self, source_paths: List[str]) -> List[str]: ...

    async def get_dependency_graph(self, source_names: List[str]) -> DependencyGraph: ...


def strip_comments(content: str) -> str:
    """Blank out line and block comments, leaving string literals intact."""
    return COMMENT_PATTERN.sub(lambda m: m.group(1) or " ", content)


def parse_imports(content: str) -> List[str]:
    """Import paths referenced by a Solidity source, in order of appearance."""
    code = strip_comments(content)
    found: List[Tuple[int, str]] = []
    for pattern in IMPORT_PATTERNS:
        found.extend((m.start(), m.group(2)) for m in pattern.finditer(code))
    seen = set()
    imports = []
    for _, path in sorted(found):
        if path not in seen:
            seen.add(path)
            imports.append(path)
    return imports


class LocalSourceHost:
    """
    Builds the dependency graph from the project's sources on disk.

    Source names are POSIX paths relative to the project root, the same
    names the compiled artifacts are laid out under.
    """

    def __init__(self, config: Config):
        self.config = config
        self.root = config.root.resolve()
        self.logger = logging.getLogger("LocalSourceHost")

    async def get_source_paths(self) -> List[str]:
        sources_dir = self.config.sources_dir.resolve()
        if not sources_dir.is_dir():
            self.logger.warning(f"Sources directory {sources_dir} does not exist")
            return []
        return [str(path) for path in sorted(sources_dir.rglob("*.sol"))]

    async def get_source_names(self, source_paths: List[str]) -> List[str]:
        return [self._source_name(Path(path).resolve()) for path in source_paths]

    async def get_dependency_graph(self, source_names: List[str]) -> DependencyGraph:
        graph = DependencyGraph()
        queue = deque(source_names)

        while queue:
            source_name = queue.popleft()
            if source_name in graph.files:
                continue

            file_path = self._file_for(source_name)
            if file_path is None:
                self.logger.warning(f"Source {source_name} not found under {self.root}")
                continue
            try:
                raw_content = file_path.read_text(encoding="utf-8")
            except OSError as err:
                self.logger.warning(f"Failed to read {source_name}: {err}")
                continue

            raw_imports = parse_imports(raw_content)
            dependencies = []
            for raw_import in raw_imports:
                resolved = self._resolve_import(source_name, raw_import)
                if resolved is None:
                    self.logger.debug(f"Unresolved import {raw_import!r} in {source_name}")
                    continue
                dependencies.append(resolved)
                queue.append(resolved)

            graph.add_file(
                ResolvedFile(
                    source_name=source_name,
                    content=FileContent(raw_content=raw_content, imports=tuple(raw_imports)),
                ),
                dependencies,
            )

        return graph

    def _source_name(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def _resolve_import(self, importer: str, raw_import: str) -> Optional[str]:
        """Source name for an import, or None when no file backs it."""
        if raw_import.startswith("./") or raw_import.startswith("../"):
            candidate = PurePosixPath(importer).parent / raw_import
            parts: List[str] = []
            for part in candidate.parts:
                if part == "..":
                    if not parts:
                        return None
                    parts.pop()
                elif part != ".":
                    parts.append(part)
            name = "/".join(parts)
            return name if self._file_for(name) is not None else None

        if self._file_for(raw_import) is not None:
            return raw_import
        return None

    def _file_for(self, source_name: str) -> Optional[Path]:
        """Project file first, then an installed package under node_modules."""
        for candidate in (self.root / source_name, self.root / "node_modules" / source_name):
            if candidate.is_file():
                return candidate
        return None
