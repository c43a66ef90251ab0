"""
Tenderly plugin operations.

Assembles upload requests from the host's dependency graph and compiled
artifacts, then verifies, pushes or persists them.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..config import Config
from ..host import HostRuntime
from ..service import TenderlyService
from .exceptions import (
    PluginException,
    AssemblyError,
    ConfigurationError,
    MissingNetworkError,
    MissingProjectError,
    MissingUsernameError,
)
from .graph import DependencyGraph, ResolvedFile, resolve_dependencies
from .networks import map_network, resolve_network
from .types import (
    CompilerConfig,
    ContractByName,
    Metadata,
    NetworkAddress,
    TenderlyArtifact,
    TenderlyCompiler,
    TenderlyContract,
    TenderlyContractUploadRequest,
)

ContractArg = Union[ContractByName, Iterable[ContractByName]]


def contract_name_from_path(source_path: str) -> str:
    """`contracts/Token.sol` -> `Token`."""
    return PurePosixPath(source_path).name.split(".")[0]


def new_compiler_config(config: Config) -> CompilerConfig:
    solidity = config.solidity
    return CompilerConfig(
        compiler_version=solidity.version,
        optimizations_used=solidity.optimizer_enabled,
        optimizations_count=solidity.optimizer_runs,
        evm_version=solidity.evm_version,
        libraries=dict(solidity.libraries),
    )


def flatten_contracts(contracts: Iterable[ContractArg]) -> List[ContractByName]:
    """Accept contracts and lists of contracts in any mix."""
    flat: List[ContractByName] = []
    for value in contracts:
        if isinstance(value, ContractByName):
            flat.append(value)
        else:
            flat.extend(value)
    return flat


@dataclass
class TenderlyOptions:
    """Options for creating a Tenderly instance."""

    config: Config
    host: HostRuntime
    service: Optional[TenderlyService] = None


class Tenderly:
    """
    Entry point for the plugin operations.

    Holds no per-call state: every operation fetches its own graph and
    builds its own metadata.
    """

    def __init__(self, options: TenderlyOptions):
        self.config = options.config
        self.host = options.host
        self.service = options.service or TenderlyService(options.config)
        self.logger = logging.getLogger("Tenderly")

    async def verify(self, *contracts: ContractArg) -> bool:
        """Verify contracts on Tenderly. Failures are logged, never raised."""
        flat_contracts = flatten_contracts(contracts)

        request_data = await self._assemble(flat_contracts)
        if request_data is None:
            self.logger.error("Verification failed")
            return False

        try:
            await self.service.verify_contracts(request_data)
        except PluginException as err:
            self.logger.error(err.msg)
            return False
        return True

    async def push(self, *contracts: ContractArg) -> bool:
        """Push contracts to the configured Tenderly project. Failures are logged, never raised."""
        flat_contracts = flatten_contracts(contracts)

        try:
            project, username = self._project_context()
        except ConfigurationError as err:
            self.logger.error(err.msg)
            return False

        request_data = await self._assemble(flat_contracts)
        if request_data is None:
            self.logger.error("Push failed")
            return False

        try:
            await self.service.push_contracts(request_data, project, username)
        except PluginException as err:
            self.logger.error(err.msg)
            return False
        return True

    async def persist_artifacts(self, *contracts: ContractArg) -> List[Path]:
        """
        Write a metadata+bytecode+ABI bundle for each contract to the deployments dir.

        Returns:
            Paths of the written files

        Raises:
            OSError: If a compiled artifact cannot be read or the output written
        """
        flat_contracts = flatten_contracts(contracts)
        graph = await self._dependency_graph()
        bound = self._bind_contracts(graph, flat_contracts)
        dest_dir = self.config.persist_dir
        written: List[Path] = []

        for contract in flat_contracts:
            resolved_file = bound.get(contract.name)
            if resolved_file is None:
                continue
            source_path = resolved_file.source_name
            name = contract.name

            artifact_path = self.config.artifacts_dir / source_path / f"{name}.json"
            contract_data = json.loads(artifact_path.read_text(encoding="utf-8"))

            metadata = Metadata(compiler_version=self.config.solidity.version)
            metadata.add_source(source_path, resolved_file.content.raw_content)
            visited: Dict[str, bool] = {}
            resolve_dependencies(graph, source_path, metadata, visited)

            artifact = TenderlyArtifact(
                metadata=metadata.to_json(),
                address=contract.address,
                bytecode=contract_data.get("bytecode", ""),
                deployed_bytecode=contract_data.get("deployedBytecode", ""),
                abi=contract_data.get("abi", []),
            )

            dest_path = dest_dir / f"{name}.json"
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_text(artifact.to_json(), encoding="utf-8")
            self.logger.info(f"Persisted artifact for {name} to {dest_path}")
            written.append(dest_path)

        return written

    async def filter_contracts(
        self, flat_contracts: List[ContractByName]
    ) -> Optional[TenderlyContractUploadRequest]:
        """
        Build the upload request and attach each contract's address under its network.

        Returns None, after logging why, when any contract has no usable
        network; the whole batch is dropped in that case.

        Raises:
            AssemblyError: If the host could not produce a dependency graph
        """
        request_data = await self.get_contract_data(flat_contracts)

        try:
            self._attach_networks(request_data, flat_contracts)
        except ConfigurationError as err:
            self.logger.error(err.msg)
            return None

        return request_data

    async def get_contract_data(
        self, flat_contracts: List[ContractByName]
    ) -> TenderlyContractUploadRequest:
        contracts = await self.get_contracts(flat_contracts)
        return TenderlyContractUploadRequest(
            contracts=contracts,
            config=new_compiler_config(self.config),
        )

    async def get_contracts(self, flat_contracts: List[ContractByName]) -> List[TenderlyContract]:
        """One TenderlyContract per file in the source closure of the requested contracts."""
        if not flat_contracts:
            return []

        try:
            graph = await self._dependency_graph()
        except Exception as err:
            raise AssemblyError(f"Failed to resolve the dependency graph: {err}") from err

        version = self.config.solidity.version
        metadata = Metadata(compiler_version=version)
        bound = self._bind_contracts(graph, flat_contracts)

        for resolved_file in bound.values():
            source_path = resolved_file.source_name
            metadata.add_source(source_path, resolved_file.content.raw_content)
            visited: Dict[str, bool] = {}
            resolve_dependencies(graph, source_path, metadata, visited)

        contracts = []
        for source_path, source in metadata.sources.items():
            name = contract_name_from_path(source_path)
            if name in bound and bound[name].source_name != source_path:
                self.logger.warning(
                    f"Dropping {source_path} from the request, contract {name} "
                    f"is bound to {bound[name].source_name}"
                )
                continue
            contracts.append(
                TenderlyContract(
                    contract_name=name,
                    source=source["content"],
                    source_path=source_path,
                    networks={},
                    compiler=TenderlyCompiler(name="solc", version=version),
                )
            )
        return contracts

    def _bind_contracts(
        self, graph: DependencyGraph, flat_contracts: List[ContractByName]
    ) -> Dict[str, ResolvedFile]:
        """Requested contract name -> first resolved file carrying that name."""
        requested = {contract.name for contract in flat_contracts}
        bound: Dict[str, ResolvedFile] = {}

        for resolved_file in graph.resolved_files():
            source_path = resolved_file.source_name
            name = contract_name_from_path(source_path)
            if name not in requested:
                continue

            if name in bound:
                self.logger.warning(
                    f"Contract {name} matches both {bound[name].source_name} and "
                    f"{source_path}, using {bound[name].source_name}"
                )
                continue
            bound[name] = resolved_file

        return bound

    async def _assemble(
        self, flat_contracts: List[ContractByName]
    ) -> Optional[TenderlyContractUploadRequest]:
        try:
            return await self.filter_contracts(flat_contracts)
        except AssemblyError as err:
            self.logger.error(err.msg)
            return None

    def _attach_networks(
        self,
        request_data: TenderlyContractUploadRequest,
        flat_contracts: List[ContractByName],
    ) -> None:
        """
        Raises:
            MissingNetworkError: If a contract has no network
            UnsupportedNetworkError: If a network has no Tenderly identifier
        """
        for contract in flat_contracts:
            network = resolve_network(self.config.network, contract.network)
            if network is None:
                raise MissingNetworkError(contract.name)
            network_id = map_network(network)

            request_contract = request_data.contract(contract.name)
            if request_contract is None:
                continue
            request_contract.networks[network_id] = NetworkAddress(address=contract.address)

    def _project_context(self) -> Tuple[str, str]:
        """
        Raises:
            MissingProjectError: If no project is configured
            MissingUsernameError: If no username is configured
        """
        if not self.config.project:
            raise MissingProjectError()
        if not self.config.username:
            raise MissingUsernameError()
        return self.config.project, self.config.username

    async def _dependency_graph(self) -> DependencyGraph:
        source_paths = await self.host.get_source_paths()
        source_names = await self.host.get_source_names(source_paths)
        return await self.host.get_dependency_graph(source_names)
