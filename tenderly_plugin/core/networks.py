"""
Network name resolution and mapping to Tenderly network identifiers.
"""

from typing import Dict, Optional

from .exceptions import UnsupportedNetworkError

# Network name used by the host for its in-process development chain.
LOCAL_NETWORK = "hardhat"

# Lowercase network name -> Tenderly network id
NETWORK_MAP: Dict[str, str] = {
    "mainnet": "1",
    "ropsten": "3",
    "rinkeby": "4",
    "goerli": "5",
    "kovan": "42",
    "sepolia": "11155111",
    "optimism": "10",
    "optimism-kovan": "69",
    "optimism-goerli": "420",
    "rsk": "30",
    "rsk-testnet": "31",
    "bsc": "56",
    "bsc-testnet": "97",
    "poa": "99",
    "xdai": "100",
    "heco": "128",
    "heco-testnet": "256",
    "matic-mainnet": "137",
    "matic-mumbai": "80001",
    "fantom": "250",
    "fantom-testnet": "4002",
    "moonbeam": "1284",
    "moonriver": "1285",
    "moonbase-alpha": "1287",
    "avalanche": "43114",
    "avalanche-fuji": "43113",
    "arbitrum": "42161",
    "arbitrum-rinkeby": "421611",
    "arbitrum-goerli": "421613",
    "base": "8453",
    "base-goerli": "84531",
}


def map_network(network: str) -> str:
    """
    Tenderly identifier for a network name.

    Raises:
        UnsupportedNetworkError: If the name is not in NETWORK_MAP
    """
    network_id = NETWORK_MAP.get(network.lower())
    if network_id is None:
        raise UnsupportedNetworkError(network)
    return network_id


def resolve_network(
    cli_network: Optional[str], contract_network: Optional[str]
) -> Optional[str]:
    """
    Pick the network a contract is pushed to.

    The CLI network wins unless it is the local development network; a
    missing CLI network defers to the contract. Returns None when neither
    names one.
    """
    if cli_network == LOCAL_NETWORK:
        return contract_network
    if cli_network:
        return cli_network
    return contract_network
