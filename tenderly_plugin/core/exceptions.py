"""
Core plugin exceptions for request assembly and configuration checks.

Provides standardized error codes and messages for Tenderly plugin operations.
"""

from typing import Any, Dict, Optional

DEFAULT_MODULE = "plugin"
PLUGIN_NAME = "tenderly-plugin"


class PluginErrorCode:
    """Error code constants for plugin errors."""

    UNKNOWN = 1
    MISSING_PROJECT = 2
    MISSING_USERNAME = 3
    MISSING_NETWORK = 4
    UNSUPPORTED_NETWORK = 5
    ASSEMBLY_FAILED = 6
    TRANSPORT_FAILED = 7
    SERVICE_RESPONSE = 8


class PluginException(Exception):
    """
    Base exception for all plugin errors.

    Carries a numeric code and the module it was raised in so log lines and
    HTTP responses can report failures uniformly.
    """

    def __init__(
        self, message: str, code: int = PluginErrorCode.UNKNOWN, module: str = DEFAULT_MODULE
    ):
        super().__init__(message)
        self.code = code
        self.module = module
        self.msg = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "module": self.module, "msg": self.msg}


class ConfigurationError(PluginException):
    """Base class for missing or invalid host configuration."""

    pass


class MissingProjectError(ConfigurationError):
    """The tenderly project is not configured."""

    def __init__(self) -> None:
        message = (
            f"Error in {PLUGIN_NAME}: Please provide the project field "
            "in the tenderly section of the plugin config"
        )
        super().__init__(message, code=PluginErrorCode.MISSING_PROJECT, module="config")


class MissingUsernameError(ConfigurationError):
    """The tenderly username is not configured."""

    def __init__(self) -> None:
        message = (
            f"Error in {PLUGIN_NAME}: Please provide the username field "
            "in the tenderly section of the plugin config"
        )
        super().__init__(message, code=PluginErrorCode.MISSING_USERNAME, module="config")


class MissingNetworkError(ConfigurationError):
    """No network could be determined for a contract."""

    def __init__(self, contract_name: Optional[str] = None):
        message = (
            f"Error in {PLUGIN_NAME}: Please provide a network via the --network "
            "argument or directly in the contract"
        )
        if contract_name:
            message = f"{message} (contract {contract_name})"
        super().__init__(message, code=PluginErrorCode.MISSING_NETWORK, module="network")
        self.contract_name = contract_name


class UnsupportedNetworkError(ConfigurationError):
    """The network name has no Tenderly identifier."""

    def __init__(self, network: str):
        message = f"Error in {PLUGIN_NAME}: Network {network!r} is not supported by Tenderly"
        super().__init__(
            message, code=PluginErrorCode.UNSUPPORTED_NETWORK, module="network"
        )
        self.network = network


class AssemblyError(PluginException):
    """The upload request could not be built."""

    def __init__(self, message: str = "Request assembly failed"):
        super().__init__(message, code=PluginErrorCode.ASSEMBLY_FAILED, module="contract")
