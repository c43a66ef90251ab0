"""
Configuration management for the Tenderly plugin.

This module provides type-safe configuration handling with validation.
"""

import json
import os
from pathlib import Path
from typing import Optional, Dict, Any, Union
from dataclasses import dataclass, field, replace


DEFAULT_API_BASE_URL = "https://api.tenderly.co"
ACCESS_KEY_ENV = "TENDERLY_ACCESS_KEY"


@dataclass
class SolidityConfig:
    """Compiler settings the contracts were built with."""

    version: str = "0.8.0"
    optimizer_enabled: bool = False
    optimizer_runs: int = 200
    evm_version: Optional[str] = None
    libraries: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.version, str) or not self.version.strip():
            raise ValueError(
                f"Invalid solidity version: {self.version}. Must be a non-empty string."
            )

        if not isinstance(self.optimizer_runs, int) or self.optimizer_runs < 0:
            raise ValueError(
                f"Invalid optimizer runs: {self.optimizer_runs}. Must be a non-negative integer."
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SolidityConfig":
        """Build from the `solidity` section of a config file."""
        defaults = cls()
        settings = data.get("settings") or {}
        optimizer = settings.get("optimizer") or {}
        return cls(
            version=data.get("version", defaults.version),
            optimizer_enabled=bool(optimizer.get("enabled", defaults.optimizer_enabled)),
            optimizer_runs=optimizer.get("runs", defaults.optimizer_runs),
            evm_version=settings.get("evmVersion", defaults.evm_version),
            libraries=dict(settings.get("libraries") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        settings: Dict[str, Any] = {
            "optimizer": {
                "enabled": self.optimizer_enabled,
                "runs": self.optimizer_runs,
            },
            "libraries": dict(self.libraries),
        }
        if self.evm_version is not None:
            settings["evmVersion"] = self.evm_version
        return {"version": self.version, "settings": settings}


@dataclass
class Config:
    """Configuration for the Tenderly plugin, read-only once built."""

    project: Optional[str] = None
    username: Optional[str] = None
    access_key: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL
    network: Optional[str] = None
    root_path: str = "."
    artifacts_path: str = "artifacts"
    sources_path: str = "contracts"
    deployments_path: str = "deployments"
    persist_network_dir: str = "localhost_5777"
    request_timeout: float = 30.0
    solidity: SolidityConfig = field(default_factory=SolidityConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.api_base_url, str) or not self.api_base_url.strip():
            raise ValueError(
                f"Invalid api_base_url: {self.api_base_url}. Must be a non-empty string."
            )

        for name in ("root_path", "artifacts_path", "sources_path", "deployments_path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Invalid {name}: {value}. Must be a non-empty string.")

        if not isinstance(self.request_timeout, (int, float)) or self.request_timeout <= 0:
            raise ValueError(
                f"Invalid request_timeout: {self.request_timeout}. Must be a positive number."
            )

        if isinstance(self.solidity, dict):
            self.solidity = SolidityConfig.from_dict(self.solidity)

    @property
    def root(self) -> Path:
        return Path(self.root_path)

    @property
    def artifacts_dir(self) -> Path:
        """Directory holding the compiled artifacts (absolute paths are kept)."""
        return self.root / self.artifacts_path

    @property
    def sources_dir(self) -> Path:
        return self.root / self.sources_path

    @property
    def persist_dir(self) -> Path:
        return self.root / self.deployments_path / self.persist_network_dir

    def resolved_access_key(self) -> Optional[str]:
        """Access key from config, falling back to the environment."""
        if self.access_key:
            return self.access_key
        env_key = os.environ.get(ACCESS_KEY_ENV)
        return env_key.strip() if env_key else None

    @classmethod
    def from_file(cls, filepath: str) -> "Config":
        """Load configuration from JSON file."""
        if not filepath or not filepath.strip():
            raise ValueError("Filepath must be a non-empty string")

        try:
            config_data = json.loads(Path(filepath).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as err:
            raise ValueError(f"Failed to load config from {filepath}: {err}") from err

        defaults = cls()
        tenderly = config_data.get("tenderly") or {}
        paths = config_data.get("paths") or {}

        return cls(
            project=tenderly.get("project", defaults.project),
            username=tenderly.get("username", defaults.username),
            access_key=tenderly.get("accessKey", defaults.access_key),
            api_base_url=tenderly.get("apiBaseUrl", defaults.api_base_url),
            network=config_data.get("network", defaults.network),
            root_path=paths.get("root", defaults.root_path),
            artifacts_path=paths.get("artifacts", defaults.artifacts_path),
            sources_path=paths.get("sources", defaults.sources_path),
            deployments_path=paths.get("deployments", defaults.deployments_path),
            persist_network_dir=config_data.get(
                "persistNetworkDir", defaults.persist_network_dir
            ),
            request_timeout=config_data.get("requestTimeout", defaults.request_timeout),
            solidity=SolidityConfig.from_dict(config_data.get("solidity") or {}),
        )

    def update(self, **kwargs: Union[str, int, float, None]) -> "Config":
        """Create a copy with updated values."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization. The access key is never written out."""
        return {
            "tenderly": {
                "project": self.project,
                "username": self.username,
                "apiBaseUrl": self.api_base_url,
            },
            "network": self.network,
            "requestTimeout": self.request_timeout,
            "persistNetworkDir": self.persist_network_dir,
            "paths": {
                "root": self.root_path,
                "artifacts": self.artifacts_path,
                "sources": self.sources_path,
                "deployments": self.deployments_path,
            },
            "solidity": self.solidity.to_dict(),
        }
