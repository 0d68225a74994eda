from decimal import Decimal

import pytest

from fundme_cli.src.fundme.balances import Balance

ONE_ETHER = 10**18


@pytest.mark.parametrize(
    "value,expected_wei",
    [
        (1, 1),
        (ONE_ETHER, ONE_ETHER),
        (1.0, ONE_ETHER),
        (0.1, ONE_ETHER // 10),
        (Decimal("0.5"), ONE_ETHER // 2),
        ("2", 2 * ONE_ETHER),
    ],
)
def test_ints_are_wei_and_floats_are_ether(value, expected_wei):
    assert Balance(value).wei == expected_wei


def test_bool_is_rejected():
    with pytest.raises(TypeError):
        Balance(True)


def test_constructors():
    assert Balance.from_wei(5).wei == 5
    assert Balance.from_gwei(1).wei == 10**9
    assert Balance.from_ether(1).wei == ONE_ETHER
    assert Balance.from_ether("0.05").wei == 5 * 10**16


def test_views():
    balance = Balance.from_ether(1.5)

    assert balance.ether == 1.5
    assert balance.ether_decimal == Decimal("1.5")
    assert balance.gwei == 1.5e9
    assert int(balance) == 1_500_000_000_000_000_000
    assert float(balance) == 1.5
    assert str(balance) == "Ξ1.500000"
    assert str(Balance.from_ether("1234.5")) == "Ξ1,234.500000"
    assert balance.to_dict() == {"wei": 1_500_000_000_000_000_000, "ether": 1.5}


def test_comparisons_with_ints_use_wei():
    zero = Balance.from_wei(0)
    one = Balance.from_ether(1)

    assert zero == 0
    assert one == ONE_ETHER
    assert one != 0
    assert one > zero
    assert zero < 1
    assert one >= ONE_ETHER
    assert zero <= 0
    assert one != None  # noqa: E711


def test_arithmetic():
    one = Balance.from_ether(1)
    two = Balance.from_ether(2)

    assert one + two == Balance.from_ether(3)
    assert two - one == one
    assert one + 1 == ONE_ETHER + 1
    assert 1 + one == ONE_ETHER + 1
    assert 3 * one == Balance.from_ether(3)
    assert two // 2 == one
    assert -one == -ONE_ETHER
    assert abs(-one) == one
    assert sum([one, two], Balance(0)) == Balance.from_ether(3)
    assert isinstance(one + two, Balance)


def test_truthiness():
    assert not Balance(0)
    assert Balance(1)


def test_unsupported_operand():
    with pytest.raises(NotImplementedError):
        Balance(1) + object()
