"""
FastAPI HTTP server for the Tenderly plugin.

Exposes the plugin operations as REST endpoints for build pipelines that
cannot call into Python directly.
"""

import logging
import os
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__
from .config import Config
from .core import Tenderly, TenderlyOptions, ContractByName, NETWORK_MAP
from .host import LocalSourceHost

CONFIG_ENV = "TENDERLY_PLUGIN_CONFIG"

logger = logging.getLogger("TenderlyServer")


# Request/Response Models
class ContractModel(BaseModel):
    """A deployed contract to verify, push or persist."""
    name: str
    address: str
    network: Optional[str] = None

    def to_contract(self) -> ContractByName:
        return ContractByName(name=self.name, address=self.address, network=self.network)


class ContractsRequest(BaseModel):
    """Request body listing contracts."""
    contracts: List[ContractModel] = Field(default_factory=list)


class OperationResponse(BaseModel):
    """Verify/push outcome."""
    success: bool


class PersistResponse(BaseModel):
    """Files written by persist-artifacts."""
    written: List[str]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    project: Optional[str] = None


def load_config() -> Config:
    """Config from the file named by TENDERLY_PLUGIN_CONFIG, defaults otherwise."""
    filepath = os.environ.get(CONFIG_ENV)
    if filepath:
        return Config.from_file(filepath)
    return Config()


def create_tenderly(config: Config) -> Tenderly:
    return Tenderly(TenderlyOptions(config=config, host=LocalSourceHost(config)))


def create_app(tenderly: Optional[Tenderly] = None) -> FastAPI:
    """Build the app around a Tenderly instance, created from the environment when omitted."""
    app = FastAPI(
        title="Tenderly Plugin Python",
        description="Push compiled contracts to Tenderly for verification and monitoring",
        version=__version__,
    )
    state: Dict[str, Tenderly] = {}

    def get_tenderly() -> Tenderly:
        if "tenderly" not in state:
            state["tenderly"] = tenderly or create_tenderly(load_config())
        return state["tenderly"]

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            project=get_tenderly().config.project,
        )

    @app.get("/networks")
    async def networks() -> Dict[str, str]:
        """Supported network names and their Tenderly identifiers."""
        return dict(NETWORK_MAP)

    @app.post("/verify", response_model=OperationResponse)
    async def verify(request: ContractsRequest):
        """Verify contracts on Tenderly."""
        contracts = [c.to_contract() for c in request.contracts]
        return OperationResponse(success=await get_tenderly().verify(contracts))

    @app.post("/push", response_model=OperationResponse)
    async def push(request: ContractsRequest):
        """Push contracts to the configured Tenderly project."""
        contracts = [c.to_contract() for c in request.contracts]
        return OperationResponse(success=await get_tenderly().push(contracts))

    @app.post("/persist-artifacts", response_model=PersistResponse)
    async def persist_artifacts(request: ContractsRequest):
        """Write deployment artifacts to the local deployments directory."""
        contracts = [c.to_contract() for c in request.contracts]
        try:
            written = await get_tenderly().persist_artifacts(contracts)
        except FileNotFoundError as e:
            logger.error(f"Persist artifacts error: {e}")
            raise HTTPException(status_code=404, detail=f"Artifact not found: {e.filename}")
        except OSError as e:
            logger.error(f"Persist artifacts error: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return PersistResponse(written=[str(path) for path in written])

    return app


app = create_app()


# Development server runner
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tenderly_plugin.server:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
