from decimal import Decimal
from typing import Union

from eth_utils import from_wei, to_wei


class Balance:
    """
    Represents an amount of ether, stored as an integer number of wei.

    Ints are treated as wei, floats/Decimals/strings as ether. Comparisons and
    arithmetic against plain ints therefore operate on wei, which keeps
    assertions such as ``balance == 0`` meaningful.
    """

    unit: str = chr(0x039E)  # Ξ
    wei: int

    def __init__(self, balance: Union[int, float, Decimal, str]):
        if isinstance(balance, bool):
            raise TypeError("balance must be an int (wei) or a float (ether)")
        if isinstance(balance, int):
            self.wei = balance
        elif isinstance(balance, (float, Decimal, str)):
            self.wei = int(to_wei(Decimal(str(balance)), "ether"))
        else:
            raise TypeError("balance must be an int (wei) or a float (ether)")

    @property
    def ether(self) -> float:
        return float(self.ether_decimal)

    @property
    def ether_decimal(self) -> Decimal:
        return Decimal(from_wei(self.wei, "ether"))

    @property
    def gwei(self) -> float:
        return float(from_wei(self.wei, "gwei"))

    def __int__(self):
        return self.wei

    def __float__(self):
        return self.ether

    def __str__(self):
        return f"{self.unit}{self.ether_decimal:,.6f}"

    def __rich__(self):
        return "[green]{}[/green][green]{}[/green][green].[/green][dim green]{}[/dim green]".format(
            self.unit,
            format(int(self.ether_decimal), ","),
            format(self.ether_decimal % 1, ".6f")[2:],
        )

    def __repr__(self):
        return f"Balance(wei={self.wei})"

    def __hash__(self):
        return hash(self.wei)

    @staticmethod
    def _to_wei(other) -> int:
        if hasattr(other, "wei"):
            return other.wei
        try:
            return int(other)
        except (TypeError, ValueError):
            raise NotImplementedError("Unsupported type")

    def __eq__(self, other):
        if other is None:
            return False
        return self.wei == self._to_wei(other)

    def __ne__(self, other):
        return not self == other

    def __gt__(self, other):
        return self.wei > self._to_wei(other)

    def __lt__(self, other):
        return self.wei < self._to_wei(other)

    def __le__(self, other):
        return self.wei <= self._to_wei(other)

    def __ge__(self, other):
        return self.wei >= self._to_wei(other)

    def __add__(self, other):
        return Balance.from_wei(self.wei + self._to_wei(other))

    def __radd__(self, other):
        return Balance.from_wei(self._to_wei(other) + self.wei)

    def __sub__(self, other):
        return Balance.from_wei(self.wei - self._to_wei(other))

    def __rsub__(self, other):
        return Balance.from_wei(self._to_wei(other) - self.wei)

    def __mul__(self, other):
        return Balance.from_wei(self.wei * self._to_wei(other))

    def __rmul__(self, other):
        return self * other

    def __floordiv__(self, other):
        return Balance.from_wei(self.wei // self._to_wei(other))

    def __bool__(self) -> bool:
        return bool(self.wei)

    def __neg__(self):
        return Balance.from_wei(-self.wei)

    def __abs__(self):
        return Balance.from_wei(abs(self.wei))

    def to_dict(self) -> dict:
        return {"wei": self.wei, "ether": self.ether}

    @staticmethod
    def from_wei(amount: int) -> "Balance":
        return Balance(int(amount))

    @staticmethod
    def from_gwei(amount: Union[int, float]) -> "Balance":
        return Balance(int(to_wei(Decimal(str(amount)), "gwei")))

    @staticmethod
    def from_ether(amount: Union[int, float, Decimal, str]) -> "Balance":
        """
        Given ether, return a Balance object with wei(``int``) and ether(``float``)

        :param amount: The amount in ether, e.g. ``1`` or ``"0.05"``.
        """
        return Balance(Decimal(str(amount)))
