import pytest
from eth_account import Account

from fundme_cli.src import DECIMALS, INITIAL_ANSWER
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import ContractRevertError
from fundme_cli.src.fundme.network_interface import EthereumInterface
from fundme_cli.src.fundme.utils import is_development_network

from .utils import TEST_NETWORK

pytestmark = pytest.mark.skipif(
    not is_development_network(TEST_NETWORK),
    reason="snapshots and unlocked accounts need a development chain",
)


@pytest.mark.asyncio
async def test_signers_are_unlocked_accounts(local_chain):
    signers = await local_chain.get_signers()
    accounts = await local_chain.get_accounts()

    assert [s.address for s in signers] == accounts
    assert not any(s.is_local for s in signers)
    balances = await local_chain.get_balances(*accounts[:2])
    assert all(balance > 0 for balance in balances.values())


@pytest.mark.asyncio
async def test_mine_and_snapshot(local_chain):
    start = await local_chain.block_number()
    snapshot_id = await local_chain.snapshot()

    await local_chain.mine(3)
    assert await local_chain.block_number() == start + 3

    assert await local_chain.revert(snapshot_id)
    assert await local_chain.block_number() == start


@pytest.mark.asyncio
async def test_wait_for_confirmations(local_chain):
    user = (await local_chain.get_named_accounts())["user"]
    response = await local_chain.send_value(user, Balance.from_ether(1))
    await local_chain.mine(2)

    receipt = await response.wait(confirmations=3)

    assert receipt.success
    assert await local_chain.block_number() >= receipt.block_number + 2


@pytest.mark.asyncio
async def test_mock_aggregator_rounds(deployments):
    mock = deployments.get_contract("MockV3Aggregator")

    assert await mock.decimals() == DECIMALS
    assert await mock.latest_answer() == INITIAL_ANSWER
    assert await mock.latest_round() == 1

    response = await mock.update_round_data(
        7, 150_000_000_000, 1_700_000_100, 1_700_000_000
    )
    await response.wait()

    latest = await mock.latest_round_data()
    assert latest.round_id == 7
    assert latest.answer == 150_000_000_000
    assert latest.updated_at == 1_700_000_100
    assert (await mock.get_round_data(7)) == latest
    assert await mock.get_eth_price() == 1500 * 10**18


@pytest.mark.asyncio
async def test_view_revert_is_translated(deployments):
    fund_me = deployments.get_contract("FundMe")

    with pytest.raises(ContractRevertError):
        await fund_me.get_funder(5)


@pytest.mark.asyncio
async def test_local_key_signer_deploys_funds_and_withdraws():
    local = Account.create()
    async with EthereumInterface(
        TEST_NETWORK, private_key=local.key.to_0x_hex()
    ) as interface:
        unlocked = (await interface.web3.eth.accounts)[0]
        await (
            await interface.send_value(
                local.address, Balance.from_ether(10), signer=unlocked
            )
        ).wait()

        signer = await interface.get_signer()
        assert signer.is_local
        assert signer.address == local.address

        deployments = Deployments(interface)
        await deployments.fixture(["all"])
        assert deployments.get("FundMe").deployer == local.address

        fund_me = deployments.get_contract("FundMe")
        await (await fund_me.fund(Balance.from_ether(1))).wait()
        start_contract = await interface.get_balance(fund_me.address)
        start_local = await interface.get_balance(local.address)

        receipt = await (await fund_me.withdraw()).wait()

        assert await interface.get_balance(fund_me.address) == 0
        assert start_contract + start_local == (
            await interface.get_balance(local.address)
        ) + receipt.gas_cost

        before = await interface.get_balance(unlocked)
        receipt = await (
            await interface.send_value(unlocked, Balance.from_ether(1))
        ).wait()
        assert receipt.success
        assert await interface.get_balance(unlocked) == before + Balance.from_ether(1)
