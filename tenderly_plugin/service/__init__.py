"""
Transport module for the Tenderly plugin.

Provides the Tenderly API client and transport-specific exception handling.
"""

from .client import TenderlyService
from .exceptions import TransportError, ServiceResponseError

__all__ = [
    "TenderlyService",
    "TransportError",
    "ServiceResponseError",
]
