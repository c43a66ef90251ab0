from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Tuple

import httpx
import pytest

from tenderly_plugin.config import Config, SolidityConfig
from tenderly_plugin.core import Tenderly, TenderlyOptions
from tenderly_plugin.core.graph import DependencyGraph, FileContent, ResolvedFile
from tenderly_plugin.service import TenderlyService


def make_graph(files: Dict[str, Tuple[str, List[str]]]) -> DependencyGraph:
    """{source_name: (content, [imported source names])} -> DependencyGraph"""
    graph = DependencyGraph()
    for name, (content, imports) in files.items():
        graph.add_file(ResolvedFile(source_name=name, content=FileContent(raw_content=content)), imports)
    return graph


class FakeHost:
    """In-memory host build tool that counts graph requests."""

    def __init__(self, graph: DependencyGraph):
        self.graph = graph
        self.graph_calls = 0

    async def get_source_paths(self):
        return list(self.graph.files)

    async def get_source_names(self, source_paths):
        return list(source_paths)

    async def get_dependency_graph(self, source_names):
        self.graph_calls += 1
        return self.graph


class BrokenHost(FakeHost):
    async def get_dependency_graph(self, source_names):
        raise RuntimeError("compiler exploded")


class Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200, body=None, error: Exception | None = None):
        self.status_code = status_code
        self.body = body if body is not None else {"contracts": []}
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    def payload(self, index: int = 0):
        return json.loads(self.requests[index].content)


TOKEN_SOURCE = 'pragma solidity ^0.8.0;\nimport "./lib/SafeMath.sol";\ncontract Token {}\n'
VAULT_SOURCE = 'pragma solidity ^0.8.0;\nimport "./lib/SafeMath.sol";\ncontract Vault {}\n'
SAFEMATH_SOURCE = "pragma solidity ^0.8.0;\nlibrary SafeMath {}\n"


@pytest.fixture
def graph() -> DependencyGraph:
    return make_graph({
        "contracts/Token.sol": (TOKEN_SOURCE, ["contracts/lib/SafeMath.sol"]),
        "contracts/Vault.sol": (VAULT_SOURCE, ["contracts/lib/SafeMath.sol"]),
        "contracts/lib/SafeMath.sol": (SAFEMATH_SOURCE, []),
    })


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        project="my-project",
        username="alice",
        access_key="secret-key",
        api_base_url="https://api.tenderly.test",
        root_path=str(tmp_path),
        solidity=SolidityConfig(version="0.8.0", optimizer_enabled=True, optimizer_runs=500),
    )


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def host(graph: DependencyGraph) -> FakeHost:
    return FakeHost(graph)


@pytest.fixture
def make_tenderly(recorder: Recorder, host: FakeHost):
    def _make(config: Config, host_=None, recorder_=None) -> Tenderly:
        service = TenderlyService(config, transport=httpx.MockTransport(recorder_ or recorder))
        return Tenderly(TenderlyOptions(config=config, host=host_ or host, service=service))

    return _make
