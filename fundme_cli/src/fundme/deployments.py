"""
Tagged deploy scripts and a registry of what they deployed, with snapshot based fixtures for development chains.

Scripts are async functions taking the ``Deployments`` registry. They run in registration order, so a script may
rely on the deployments of the scripts registered before it.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from fundme_cli.src import DECIMALS, INITIAL_ANSWER, defaults
from fundme_cli.src.fundme.chain_data import Deployment
from fundme_cli.src.fundme.compiler import compile_contract
from fundme_cli.src.fundme.contracts import ContractBinding, bind
from fundme_cli.src.fundme.errors import ContractNotDeployedError, FundMeError
from fundme_cli.src.fundme.network_interface import EthereumInterface, Signer

logger = logging.getLogger("fundme")


@dataclass
class DeployScript:
    name: str
    func: Callable[["Deployments"], Awaitable[None]]
    tags: tuple[str, ...]

    def matches(self, tags: Iterable[str]) -> bool:
        return bool(set(self.tags) & set(tags))


DEPLOY_SCRIPTS: list[DeployScript] = []


def deploy_script(*tags: str):
    """Registers the decorated coroutine function as a deploy script carrying ``tags``."""

    def decorator(func):
        DEPLOY_SCRIPTS.append(DeployScript(func.__name__, func, tags))
        return func

    return decorator


class Deployments:
    def __init__(
        self,
        interface: EthereumInterface,
        scripts: Optional[list[DeployScript]] = None,
    ):
        self.interface = interface
        self.scripts = DEPLOY_SCRIPTS if scripts is None else scripts
        self._records: dict[str, Deployment] = {}
        self._fixtures: dict[tuple[str, ...], tuple[Any, dict[str, Deployment]]] = {}

    async def deploy(
        self,
        name: str,
        *args,
        signer: Union[Signer, str, None] = None,
        wait_confirmations: int = 1,
    ) -> Deployment:
        """Compiles and deploys the bundled contract ``name``, recording the deployment under that name."""
        abi, bytecode = compile_contract(name)
        signer = await self.interface.get_signer(signer)
        response = await self.interface.deploy_contract(
            abi, bytecode, *args, signer=signer
        )
        receipt = await response.wait(wait_confirmations)
        deployment = Deployment(
            name=name,
            address=receipt.contract_address,
            abi=abi,
            bytecode=bytecode,
            deployer=signer.address,
            args=list(args),
            transaction_hash=receipt.transaction_hash,
            block_number=receipt.block_number,
        )
        logger.info(f"Deployed {name} at {deployment.address}")
        self._records[name] = deployment
        return deployment

    async def run(self, tags: Optional[Iterable[str]] = None) -> list[Deployment]:
        """Runs every script carrying one of ``tags``, in registration order."""
        tags = list(tags or defaults.deploy_tags)
        for script in self.scripts:
            if script.matches(tags):
                logger.debug(f"Running deploy script {script.name}")
                await script.func(self)
        return self.all()

    async def fixture(self, tags: Optional[Iterable[str]] = None) -> list[Deployment]:
        """
        The first call for a set of tags runs the scripts and snapshots the chain. Later calls revert to that
        snapshot, so each caller starts from the same freshly deployed state.
        """
        key = tuple(sorted(tags or defaults.deploy_tags))
        if key in self._fixtures:
            snapshot_id, records = self._fixtures[key]
            if not await self.interface.revert(snapshot_id):
                raise FundMeError(
                    f"Could not revert to the {', '.join(key)} fixture snapshot {snapshot_id}"
                )
            self._records = dict(records)
        else:
            await self.run(key)
        self._fixtures[key] = (await self.interface.snapshot(), dict(self._records))
        return self.all()

    def get(self, name: str) -> Deployment:
        deployment = self._records.get(name)
        if deployment is None:
            raise ContractNotDeployedError(name, self.interface.network)
        return deployment

    def get_or_none(self, name: str) -> Optional[Deployment]:
        return self._records.get(name)

    def all(self) -> list[Deployment]:
        return list(self._records.values())

    def get_contract(
        self, name: str, signer: Union[Signer, str, None] = None
    ) -> ContractBinding:
        return bind(self.interface, self.get(name), signer)

    async def deployments_file(self, directory: str) -> str:
        network = self.interface.network
        if network == "custom":
            network = f"chain-{await self.interface.chain_id()}"
        return os.path.join(os.path.expanduser(directory), f"{network}.json")

    async def save(self, directory: str) -> str:
        path = await self.deployments_file(directory)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(
                {
                    "chain_id": await self.interface.chain_id(),
                    "deployments": {
                        name: deployment.to_dict()
                        for name, deployment in self._records.items()
                    },
                },
                f,
                indent=2,
            )
        logger.debug(f"Saved {len(self._records)} deployments to {path}")
        return path

    async def load(self, directory: str) -> bool:
        """
        Loads the deployments recorded for this network. A file recorded on another chain (e.g. a restarted local
        node) is ignored.
        """
        path = await self.deployments_file(directory)
        if not os.path.exists(path):
            return False
        with open(path, "r") as f:
            data = json.load(f)
        chain_id = await self.interface.chain_id()
        if data.get("chain_id") != chain_id:
            logger.warning(
                f"Ignoring {path}: recorded on chain {data.get('chain_id')}, connected to {chain_id}"
            )
            return False
        self._records = {
            name: Deployment.from_any(record)
            for name, record in data.get("deployments", {}).items()
        }
        return True


@deploy_script("all", "mocks")
async def deploy_mocks(deployments: Deployments):
    interface = deployments.interface
    if not interface.is_development_chain:
        return
    logger.info("Local network detected! Deploying mocks...")
    await deployments.deploy(
        "MockV3Aggregator",
        DECIMALS,
        INITIAL_ANSWER,
        signer="deployer",
    )


@deploy_script("all", "fundme")
async def deploy_fund_me(deployments: Deployments):
    interface = deployments.interface
    network_config = await interface.network_config()
    if interface.is_development_chain:
        price_feed = deployments.get("MockV3Aggregator").address
    else:
        price_feed = network_config.eth_usd_price_feed
    if not price_feed:
        raise FundMeError(
            f"No ETH/USD price feed configured for network '{interface.network}'"
        )
    await deployments.deploy(
        "FundMe",
        price_feed,
        signer="deployer",
        wait_confirmations=network_config.block_confirmations,
    )
