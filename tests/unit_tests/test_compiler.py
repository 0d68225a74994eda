import pytest

from fundme_cli.src.fundme.compiler import available_contracts, compile_contract
from fundme_cli.src.fundme.errors import CompilationError


def _functions(abi: list[dict]) -> set[str]:
    return {item["name"] for item in abi if item.get("type") == "function"}


def test_bundled_contracts():
    assert available_contracts() == ["FundMe", "MockV3Aggregator"]


def test_compile_fund_me():
    abi, bytecode = compile_contract("FundMe")

    assert bytecode.startswith("0x")
    assert {
        "fund",
        "withdraw",
        "cheaperWithdraw",
        "getAddressToAmountFunded",
        "getFunder",
        "getOwner",
        "getPriceFeed",
        "getVersion",
        "MINIMUM_USD",
    } <= _functions(abi)
    assert any(item.get("type") == "fallback" for item in abi)


def test_compile_mock_aggregator():
    abi, _ = compile_contract("MockV3Aggregator")

    assert {
        "decimals",
        "latestRoundData",
        "getRoundData",
        "updateAnswer",
        "updateRoundData",
    } <= _functions(abi)


def test_compile_is_cached():
    assert compile_contract("FundMe") is compile_contract("FundMe")


def test_unknown_contract():
    with pytest.raises(CompilationError, match="Available: FundMe, MockV3Aggregator"):
        compile_contract("Crowdsale")
