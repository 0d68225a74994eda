import asyncio
from typing import Any, Optional, Union

from fundme_cli.src import DECIMALS
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.chain_data import Deployment, FundMeInfo, RoundData
from fundme_cli.src.fundme.compiler import compile_contract
from fundme_cli.src.fundme.errors import ContractRevertError
from fundme_cli.src.fundme.network_interface import (
    EthereumInterface,
    Signer,
    TransactionResponse,
)

# Upper bound of the funders array in FundMe.vy
MAX_FUNDERS = 1024


def get_eth_price(round_data: RoundData, decimals: int = DECIMALS) -> int:
    """
    USD price of one ether with 18 decimals, from a feed answer carrying ``decimals`` decimals.
    """
    return round_data.answer * 10 ** (18 - decimals)


def get_conversion_rate(eth_amount: Union[Balance, int], eth_price: int) -> int:
    """USD value (18 decimals) of ``eth_amount`` wei at ``eth_price``, rounded down like the contract does."""
    return eth_price * int(eth_amount) // 10**18


class ContractBinding:
    """
    A deployed contract connected to a signer. Views go through ``eth_call``, state-changing functions return a
    ``TransactionResponse`` to ``wait()`` on.
    """

    contract_name: str = ""

    def __init__(
        self,
        interface: EthereumInterface,
        deployment: Deployment,
        signer: Union[Signer, str, None] = None,
    ):
        self.interface = interface
        self.deployment = deployment
        self.signer = signer
        self.contract = interface.contract_at(deployment.address, deployment.abi)

    def __repr__(self):
        return f"{type(self).__name__}({self.address})"

    @property
    def address(self) -> str:
        return self.deployment.address

    def connect(self, signer: Union[Signer, str]) -> "ContractBinding":
        """Same contract, sending from ``signer``."""
        return type(self)(self.interface, self.deployment, signer)

    async def _call(self, fn_name: str, *args) -> Any:
        return await self.interface.call(self.contract, fn_name, *args)

    async def _transact(
        self, fn_name: str, *args, value: Union[Balance, int] = 0
    ) -> TransactionResponse:
        return await self.interface.transact(
            self.contract, fn_name, *args, signer=self.signer, value=value
        )


class MockV3Aggregator(ContractBinding):
    contract_name = "MockV3Aggregator"

    async def decimals(self) -> int:
        return await self._call("decimals")

    async def description(self) -> str:
        return await self._call("description")

    async def version(self) -> int:
        return await self._call("version")

    async def latest_answer(self) -> int:
        return await self._call("latestAnswer")

    async def latest_round(self) -> int:
        return await self._call("latestRound")

    async def latest_round_data(self) -> RoundData:
        return RoundData.from_any(await self._call("latestRoundData"))

    async def get_round_data(self, round_id: int) -> RoundData:
        return RoundData.from_any(await self._call("getRoundData", round_id))

    async def update_answer(self, answer: int) -> TransactionResponse:
        return await self._transact("updateAnswer", answer)

    async def update_round_data(
        self, round_id: int, answer: int, timestamp: int, started_at: int
    ) -> TransactionResponse:
        return await self._transact(
            "updateRoundData", round_id, answer, timestamp, started_at
        )

    async def get_eth_price(self) -> int:
        round_data, decimals = await asyncio.gather(
            self.latest_round_data(), self.decimals()
        )
        return get_eth_price(round_data, decimals)


class FundMe(ContractBinding):
    contract_name = "FundMe"

    async def fund(self, value: Union[Balance, int] = 0) -> TransactionResponse:
        return await self._transact("fund", value=value)

    async def withdraw(self) -> TransactionResponse:
        return await self._transact("withdraw")

    async def cheaper_withdraw(self) -> TransactionResponse:
        return await self._transact("cheaperWithdraw")

    async def get_price_feed(self) -> str:
        return await self._call("getPriceFeed")

    async def get_address_to_amount_funded(self, address: str) -> Balance:
        return Balance.from_wei(await self._call("getAddressToAmountFunded", address))

    async def get_funder(self, index: int) -> str:
        return await self._call("getFunder", index)

    async def get_owner(self) -> str:
        return await self._call("getOwner")

    async def get_version(self) -> int:
        return await self._call("getVersion")

    async def minimum_usd(self) -> int:
        return await self._call("MINIMUM_USD")

    async def get_funders(self) -> list[str]:
        """
        The funders list is not exposed as a whole, so walk it until ``getFunder`` reverts past the end.
        """
        funders = []
        for index in range(MAX_FUNDERS):
            try:
                funders.append(await self.get_funder(index))
            except ContractRevertError:
                break
        return funders

    async def price_feed(self) -> MockV3Aggregator:
        """Binding for the feed this contract reads; the mock's ABI covers the AggregatorV3 views."""
        address = await self.get_price_feed()
        abi, _ = compile_contract(MockV3Aggregator.contract_name)
        feed = Deployment(
            name=MockV3Aggregator.contract_name,
            address=address,
            abi=abi,
            bytecode="",
            deployer="",
        )
        return MockV3Aggregator(self.interface, feed, self.signer)

    async def get_info(self) -> FundMeInfo:
        owner, price_feed, version, balance, minimum_usd, funders = await asyncio.gather(
            self.get_owner(),
            self.get_price_feed(),
            self.get_version(),
            self.interface.get_balance(self.address),
            self.minimum_usd(),
            self.get_funders(),
        )
        # a funder appears once per fund() call
        unique_funders = list(dict.fromkeys(funders))
        amounts = await asyncio.gather(
            *[self.get_address_to_amount_funded(f) for f in unique_funders]
        )
        return FundMeInfo.from_any(
            {
                "address": self.address,
                "owner": owner,
                "price_feed": price_feed,
                "version": version,
                "balance": int(balance),
                "minimum_usd": minimum_usd,
                "funders": [
                    (address, int(amount))
                    for address, amount in zip(unique_funders, amounts)
                ],
            }
        )


CONTRACT_BINDINGS: dict[str, type[ContractBinding]] = {
    FundMe.contract_name: FundMe,
    MockV3Aggregator.contract_name: MockV3Aggregator,
}


def bind(
    interface: EthereumInterface,
    deployment: Deployment,
    signer: Optional[Union[Signer, str]] = None,
) -> ContractBinding:
    binding_class = CONTRACT_BINDINGS.get(deployment.name, ContractBinding)
    return binding_class(interface, deployment, signer)
