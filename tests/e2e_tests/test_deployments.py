import pytest

from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.deployments import Deployments


@pytest.mark.asyncio
async def test_fixture_reverts_to_fresh_deployment(local_chain, deployments):
    fund_me = deployments.get_contract("FundMe")
    first = {d.name: d.address for d in deployments.all()}
    await (await fund_me.fund(Balance.from_ether(1))).wait()
    assert await local_chain.get_balance(fund_me.address) == Balance.from_ether(1)

    again = await deployments.fixture(["all"])

    assert {d.name: d.address for d in again} == first
    assert await local_chain.get_balance(fund_me.address) == 0
    assert await fund_me.get_funders() == []

    # the fixture can be returned to more than once
    await (await fund_me.fund(Balance.from_ether(1))).wait()
    await deployments.fixture(["all"])
    assert await local_chain.get_balance(fund_me.address) == 0


@pytest.mark.asyncio
async def test_tags_select_scripts(local_chain):
    deployments = Deployments(local_chain)

    await deployments.run(["mocks"])
    assert [d.name for d in deployments.all()] == ["MockV3Aggregator"]

    await deployments.run(["fundme"])
    fund_me = deployments.get_contract("FundMe")
    assert await fund_me.get_price_feed() == deployments.get("MockV3Aggregator").address


@pytest.mark.asyncio
async def test_deployer_named_account_owns_contracts(local_chain, deployments):
    named = await local_chain.get_named_accounts()

    for deployment in deployments.all():
        assert deployment.deployer == named["deployer"]
        assert deployment.block_number is not None
    assert await deployments.get_contract("FundMe").get_owner() == named["deployer"]
