"""
HTTP client for the Tenderly contract API.

One short-lived `httpx.AsyncClient` per call; no retries.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .. import __version__
from ..config import Config
from ..core.types import TenderlyContractUploadRequest
from .exceptions import TransportError, ServiceResponseError

VERIFY_PATH = "/api/v1/account/me/verify-contracts"
PUSH_PATH = "/api/v1/account/{username}/project/{project}/contracts"


class TenderlyService:
    """Dispatches upload requests to Tenderly."""

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.transport = transport
        self.logger = logging.getLogger("TenderlyService")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": f"tenderly-plugin/{__version__}",
            "Content-Type": "application/json",
        }
        access_key = self.config.resolved_access_key()
        if access_key:
            headers["X-Access-Key"] = access_key
        return headers

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        async with httpx.AsyncClient(
            base_url=self.config.api_base_url,
            headers=self._headers(),
            timeout=self.config.request_timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.post(path, json=payload)
            except httpx.HTTPError as err:
                raise TransportError(err, url=path) from err

        if response.is_error:
            raise ServiceResponseError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            return None

    def _log_contracts(self, action: str, data: Any) -> None:
        names = _contract_names(data)
        if not names:
            self.logger.info(f"Smart contracts successfully {action}")
            return
        self.logger.info(f"Smart contracts successfully {action}:")
        for name in names:
            self.logger.info(f"  - {name}")

    async def verify_contracts(self, request: TenderlyContractUploadRequest) -> None:
        """
        Submit contracts for verification.

        Raises:
            TransportError: If the request could not be sent
            ServiceResponseError: If Tenderly rejected the request
        """
        data = await self._post(VERIFY_PATH, request.to_payload())
        self._log_contracts("verified", data)

    async def push_contracts(
        self, request: TenderlyContractUploadRequest, project: str, username: str
    ) -> None:
        """
        Push contracts into a Tenderly project.

        Raises:
            TransportError: If the request could not be sent
            ServiceResponseError: If Tenderly rejected the request
        """
        path = PUSH_PATH.format(username=username, project=project)
        data = await self._post(path, request.to_payload())
        self._log_contracts("pushed", data)


def _contract_names(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return []
    contracts = data.get("contracts")
    if not isinstance(contracts, list):
        return []
    names = []
    for contract in contracts:
        if isinstance(contract, dict):
            name = contract.get("contract_name") or contract.get("contractName")
            if name:
                names.append(str(name))
    return names
