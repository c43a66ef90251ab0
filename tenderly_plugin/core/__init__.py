"""
Core plugin functionality.

Contains the data model, dependency resolution, network mapping, request
assembly and core exceptions.
"""

from .exceptions import (
    PluginException,
    PluginErrorCode,
    ConfigurationError,
    MissingProjectError,
    MissingUsernameError,
    MissingNetworkError,
    UnsupportedNetworkError,
    AssemblyError,
)
from .types import (
    ContractByName,
    Metadata,
    TenderlyArtifact,
    TenderlyContract,
    TenderlyContractUploadRequest,
    CompilerConfig,
)
from .graph import DependencyGraph, FileContent, ResolvedFile, resolve_dependencies
from .networks import NETWORK_MAP, LOCAL_NETWORK, map_network, resolve_network
from .tenderly import Tenderly, TenderlyOptions

__all__ = [
    "Tenderly",
    "TenderlyOptions",
    "ContractByName",
    "Metadata",
    "TenderlyArtifact",
    "TenderlyContract",
    "TenderlyContractUploadRequest",
    "CompilerConfig",
    "DependencyGraph",
    "FileContent",
    "ResolvedFile",
    "resolve_dependencies",
    "NETWORK_MAP",
    "LOCAL_NETWORK",
    "map_network",
    "resolve_network",
    "PluginException",
    "PluginErrorCode",
    "ConfigurationError",
    "MissingProjectError",
    "MissingUsernameError",
    "MissingNetworkError",
    "UnsupportedNetworkError",
    "AssemblyError",
]
