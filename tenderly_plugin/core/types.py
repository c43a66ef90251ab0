"""
Data model for Tenderly upload requests and persisted artifacts.

Internal accumulators are dataclasses; everything that crosses the wire or
lands on disk is a pydantic model serialized with the service's key names.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ContractByName:
    """A deployed contract identified by its declared name."""

    name: str
    address: str
    network: Optional[str] = None


@dataclass
class Metadata:
    """Compiler version plus the raw content of every collected source path."""

    compiler_version: str
    sources: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def add_source(self, source_path: str, content: str) -> None:
        self.sources[source_path] = {"content": content}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compiler": {"version": self.compiler_version},
            "sources": self.sources,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class NetworkAddress(BaseModel):
    address: str


class TenderlyCompiler(BaseModel):
    name: str = "solc"
    version: str


class TenderlyContract(BaseModel):
    """One source file as sent to Tenderly."""

    model_config = ConfigDict(populate_by_name=True)

    contract_name: str = Field(..., alias="contractName")
    source: str
    source_path: str = Field(..., alias="sourcePath")
    networks: Dict[str, NetworkAddress] = Field(default_factory=dict)
    compiler: TenderlyCompiler


class CompilerConfig(BaseModel):
    """Compiler settings shared by every contract in a request."""

    compiler_version: str
    optimizations_used: bool = False
    optimizations_count: int = 200
    evm_version: Optional[str] = None
    libraries: Dict[str, Any] = Field(default_factory=dict)


class TenderlyContractUploadRequest(BaseModel):
    """Top-level request envelope for verify and push."""

    contracts: List[TenderlyContract] = Field(default_factory=list)
    config: CompilerConfig

    def contract(self, name: str) -> Optional[TenderlyContract]:
        for contract in self.contracts:
            if contract.contract_name == name:
                return contract
        return None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with the service's key names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TenderlyArtifact(BaseModel):
    """Locally persisted deployment artifact."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: str
    address: str
    bytecode: str
    deployed_bytecode: str = Field(..., alias="deployedBytecode")
    abi: List[Any] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
