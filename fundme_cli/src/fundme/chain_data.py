from abc import abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from hexbytes import HexBytes

from fundme_cli.src.fundme.balances import Balance


def _to_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return HexBytes(value).to_0x_hex()
    return str(value)


class InfoBase:
    """Base dataclass for info objects."""

    @abstractmethod
    def _fix_decoded(self, decoded: Any) -> "InfoBase":
        raise NotImplementedError(
            "This is an abstract method and must be implemented in a subclass."
        )

    @classmethod
    def from_any(cls, data: Any) -> "InfoBase":
        return cls._fix_decoded(data)

    def __getitem__(self, item):
        return getattr(self, item)

    def get(self, item, default=None):
        return getattr(self, item, default)


@dataclass
class TransactionReceipt(InfoBase):
    """
    A mined transaction, as reported by the node.

    Attributes:
        transaction_hash (str): 0x-prefixed hash of the transaction.
        block_number (int): Block the transaction was included in.
        status (int): 1 for success, 0 for a reverted transaction.
        gas_used (int): Gas consumed by the transaction.
        effective_gas_price (int): Price paid per unit of gas, in wei.
        from_address (str): Sender.
        to_address (Optional[str]): Recipient, None for contract creations.
        contract_address (Optional[str]): Address of a created contract.
    """

    transaction_hash: str
    block_number: int
    status: int
    gas_used: int
    effective_gas_price: int
    from_address: str
    to_address: Optional[str] = None
    contract_address: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == 1

    @property
    def gas_cost(self) -> Balance:
        return Balance.from_wei(self.gas_used * self.effective_gas_price)

    @classmethod
    def _fix_decoded(cls, decoded: Any) -> "TransactionReceipt":
        return cls(
            transaction_hash=_to_hex(decoded["transactionHash"]),
            block_number=decoded["blockNumber"],
            status=decoded.get("status", 1),
            gas_used=decoded["gasUsed"],
            effective_gas_price=decoded.get("effectiveGasPrice", 0),
            from_address=decoded["from"],
            to_address=decoded.get("to"),
            contract_address=decoded.get("contractAddress"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_hash": self.transaction_hash,
            "block_number": self.block_number,
            "status": self.status,
            "gas_used": self.gas_used,
            "effective_gas_price": self.effective_gas_price,
            "gas_cost": self.gas_cost.to_dict(),
        }


@dataclass
class Deployment(InfoBase):
    """A deployed contract, as recorded by the deployments registry."""

    name: str
    address: str
    abi: list[dict]
    bytecode: str
    deployer: str
    args: list[Any] = field(default_factory=list)
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None

    @classmethod
    def _fix_decoded(cls, decoded: Any) -> "Deployment":
        return cls(
            name=decoded["name"],
            address=decoded["address"],
            abi=decoded["abi"],
            bytecode=decoded["bytecode"],
            deployer=decoded["deployer"],
            args=list(decoded.get("args", [])),
            transaction_hash=decoded.get("transaction_hash"),
            block_number=decoded.get("block_number"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RoundData(InfoBase):
    """One round of an AggregatorV3 price feed."""

    round_id: int
    answer: int
    started_at: int
    updated_at: int
    answered_in_round: int

    @classmethod
    def _fix_decoded(cls, decoded: Any) -> "RoundData":
        round_id, answer, started_at, updated_at, answered_in_round = decoded
        return cls(
            round_id=round_id,
            answer=answer,
            started_at=started_at,
            updated_at=updated_at,
            answered_in_round=answered_in_round,
        )


@dataclass
class FunderInfo:
    address: str
    amount: Balance

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "amount": self.amount.to_dict()}


@dataclass
class FundMeInfo(InfoBase):
    """Snapshot of a FundMe contract's public state."""

    address: str
    owner: str
    price_feed: str
    version: int
    balance: Balance
    minimum_usd: Balance
    funders: list[FunderInfo]

    @classmethod
    def _fix_decoded(cls, decoded: Any) -> "FundMeInfo":
        return cls(
            address=decoded["address"],
            owner=decoded["owner"],
            price_feed=decoded["price_feed"],
            version=decoded["version"],
            balance=Balance.from_wei(decoded["balance"]),
            minimum_usd=Balance.from_wei(decoded["minimum_usd"]),
            funders=[
                FunderInfo(address=address, amount=Balance.from_wei(amount))
                for address, amount in decoded.get("funders", [])
            ],
        )

    @property
    def total_funded(self) -> Balance:
        return sum((funder.amount for funder in self.funders), Balance(0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "owner": self.owner,
            "price_feed": self.price_feed,
            "version": self.version,
            "balance": self.balance.to_dict(),
            "minimum_usd": self.minimum_usd.ether,
            "funders": [funder.to_dict() for funder in self.funders],
        }
