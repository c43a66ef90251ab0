"""
Transport exceptions for calls to the Tenderly API.
"""

from typing import Optional
from ..core.exceptions import PluginException, PluginErrorCode


class TransportError(PluginException):
    """The request never got a response."""

    def __init__(self, original_error: object, url: Optional[str] = None):
        if url:
            message = f"request to {url} failed: {original_error}"
        else:
            message = f"request failed: {original_error}"
        super().__init__(message, code=PluginErrorCode.TRANSPORT_FAILED, module="service")


class ServiceResponseError(PluginException):
    """Tenderly answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        message = f"Tenderly responded with status {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message, code=PluginErrorCode.SERVICE_RESPONSE, module="service")
        self.status_code = status_code
