"""
Main entry point for the Tenderly plugin.

Verifies, pushes or persists contracts from the command line, or starts
the development HTTP server.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from tenderly_plugin.config import Config
from tenderly_plugin.core import ContractByName, Tenderly, TenderlyOptions
from tenderly_plugin.host import LocalSourceHost


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_contract(value: str) -> ContractByName:
    """Parse `Name=0xaddress` or `Name=0xaddress@network`."""
    name, sep, rest = value.partition("=")
    if not sep or not name or not rest:
        raise argparse.ArgumentTypeError(
            f"Invalid contract {value!r}, expected Name=0xaddress[@network]"
        )
    address, _, network = rest.partition("@")
    return ContractByName(name=name, address=address, network=network or None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tenderly-plugin",
        description="Push compiled contracts to Tenderly for verification and monitoring",
    )
    parser.add_argument("--config", help="Path to the plugin JSON config file")
    parser.add_argument("--network", help="Network the contracts are deployed to")
    parser.add_argument(
        "command", choices=["verify", "push", "persist", "serve"], help="Operation to run"
    )
    parser.add_argument(
        "contracts", nargs="*", type=parse_contract, help="Contracts as Name=0xaddress[@network]"
    )
    return parser


async def run_command(config: Config, command: str, contracts: List[ContractByName]) -> int:
    tenderly = Tenderly(TenderlyOptions(config=config, host=LocalSourceHost(config)))

    if command == "verify":
        return 0 if await tenderly.verify(contracts) else 1
    if command == "push":
        return 0 if await tenderly.push(contracts) else 1

    written = await tenderly.persist_artifacts(contracts)
    logger.info(f'Persisted {len(written)} artifact(s)')
    return 0


def serve(config: Config) -> None:
    """Run the development HTTP server."""
    import uvicorn
    from tenderly_plugin.server import create_app, create_tenderly

    uvicorn.run(create_app(create_tenderly(config)), host="127.0.0.1", port=8000, log_level="info")


def run(argv: Optional[List[str]] = None) -> None:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_file(args.config) if args.config else Config()
        if args.network:
            config = config.update(network=args.network)
    except ValueError as error:
        logger.error(f'Invalid configuration: {error}')
        sys.exit(1)

    if args.command == "serve":
        serve(config)
        return

    try:
        exit_code = asyncio.run(run_command(config, args.command, args.contracts))
    except KeyboardInterrupt:
        logger.info('Interrupted by user')
        exit_code = 1
    except (OSError, ValueError) as error:
        logger.error(f'Fatal error: {error}')
        exit_code = 1

    sys.exit(exit_code)


if __name__ == '__main__':
    run()
