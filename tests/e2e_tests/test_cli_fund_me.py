"""
E2E tests for the FundMe commands.

On the in-process chain every invocation starts from a fresh deployment of the `all` tags.

Verify commands:
* fundme fundme deploy
* fundme fundme fund
* fundme fundme withdraw
* fundme fundme info
* fundme feed price
* fundme feed update
* fundme accounts list
"""

import pytest

from fundme_cli.src.fundme.utils import is_development_network

from .utils import TEST_NETWORK, parse_json_output

pytestmark = pytest.mark.skipif(
    not is_development_network(TEST_NETWORK),
    reason="the CLI flows fund and withdraw with the development accounts",
)

JSON_NO_PROMPT = ["--no-prompt", "--json-output"]


def test_deploy(exec_command):
    result = exec_command("fundme", "deploy", extra_args=["--json-output"])
    output = parse_json_output(result)

    assert output["success"] is True, output
    names = [d["name"] for d in output["data"]["deployments"]]
    assert names == ["MockV3Aggregator", "FundMe"]
    if TEST_NETWORK == "hardhat":
        assert output["data"]["saved_to"] is None
    else:
        assert output["data"]["saved_to"].endswith(f"{TEST_NETWORK}.json")


def test_fund(exec_command):
    result = exec_command(
        "fundme",
        "fund",
        extra_args=["--amount", "0.1", "--account", "user"] + JSON_NO_PROMPT,
    )
    output = parse_json_output(result)

    assert output["success"] is True, output
    data = output["data"]
    assert data["amount"]["wei"] == 10**17
    assert data["usd_value"] == pytest.approx(200.0)
    assert data["total_funded"]["wei"] >= 10**17
    assert data["gas_cost"]["wei"] > 0
    assert data["transaction_hash"].startswith("0x")


def test_fund_below_minimum_is_refused(exec_command):
    # 0.01 ETH is 20 USD at the mock's 2000 USD answer
    result = exec_command(
        "fundme", "fund", extra_args=["--amount", "0.01"] + JSON_NO_PROMPT
    )
    output = parse_json_output(result)

    assert output["success"] is False
    assert "below the minimum" in output["error"]
    assert "$50.00" in output["error"]


def test_fund_cancelled_at_prompt(exec_command):
    result = exec_command(
        "fundme", "fund", extra_args=["--amount", "0.1"], inputs=["n"]
    )

    assert "Funding cancelled" in result.stdout


def test_withdraw_by_non_owner_is_refused(exec_command):
    result = exec_command(
        "fundme", "withdraw", extra_args=["--from", "user"] + JSON_NO_PROMPT
    )
    output = parse_json_output(result)

    assert output["success"] is False
    assert "Only the owner can withdraw" in output["error"]


@pytest.mark.parametrize("method", ["--standard", "--cheaper"])
def test_withdraw_by_owner(exec_command, method):
    result = exec_command("fundme", "withdraw", extra_args=[method] + JSON_NO_PROMPT)
    output = parse_json_output(result)

    assert output["success"] is True, output
    data = output["data"]
    assert data["method"] == (
        "cheaperWithdraw" if method == "--cheaper" else "withdraw"
    )
    assert data["contract_balance"]["wei"] == 0


def test_info(exec_command):
    accounts = parse_json_output(
        exec_command("accounts", "list", extra_args=["--json-output"])
    )["data"]["accounts"]
    result = exec_command("fundme", "info", extra_args=["--json-output"])
    output = parse_json_output(result)

    assert output["success"] is True, output
    data = output["data"]
    assert data["network"] == TEST_NETWORK
    assert data["minimum_usd"] == 50.0
    assert data["owner"] == accounts[0]["address"]
    if TEST_NETWORK == "hardhat":
        assert data["funders"] == []
        assert data["balance"]["wei"] == 0


def test_feed_price(exec_command):
    output = parse_json_output(
        exec_command("feed", "price", extra_args=["--json-output"])
    )

    assert output["success"] is True, output
    data = output["data"]
    assert data["decimals"] == 8
    assert data["version"] == 0
    if TEST_NETWORK == "hardhat":
        assert data["answer"] == 200_000_000_000
        assert data["eth_usd"] == 2000.0


def test_feed_update(exec_command):
    output = parse_json_output(
        exec_command("feed", "update", extra_args=["--price", "1800"] + JSON_NO_PROMPT)
    )

    assert output["success"] is True, output
    assert output["data"]["answer"] == 180_000_000_000
    assert output["data"]["round_id"] >= 2


def test_accounts_list(exec_command):
    output = parse_json_output(
        exec_command("accounts", "list", extra_args=["--json-output"])
    )

    assert output["success"] is True, output
    accounts = output["data"]["accounts"]
    assert [a["name"] for a in accounts[:2]] == ["deployer", "user"]
    assert all(a["name"] is None for a in accounts[2:])
    assert accounts[0]["balance"]["wei"] > 0
