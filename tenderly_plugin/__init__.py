"""
Tenderly Plugin Python Implementation

Pushes compiled contract sources, bytecode and addresses to Tenderly for
verification and monitoring.
"""

__version__ = "1.0.0"
__description__ = "Tenderly contract verification plugin for Solidity build pipelines"

# Public API exports
from .config import Config, SolidityConfig
from .core import Tenderly, TenderlyOptions, ContractByName
from .core.exceptions import PluginException
from .host import LocalSourceHost
from .service import TenderlyService

__all__ = [
    "Config",
    "SolidityConfig",
    "Tenderly",
    "TenderlyOptions",
    "ContractByName",
    "PluginException",
    "LocalSourceHost",
    "TenderlyService",
]
