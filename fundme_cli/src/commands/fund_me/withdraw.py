import asyncio
from typing import Union

from rich.prompt import Confirm

from fundme_cli.src import COLORS
from fundme_cli.src.commands.fund_me.utils import get_fund_me, report_failure
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.json_utils import json_transaction, print_json
from fundme_cli.src.fundme.network_interface import EthereumInterface, Signer
from fundme_cli.src.fundme.utils import (
    console,
    format_error_message,
    shorten_address,
)


async def withdraw(
    interface: EthereumInterface,
    deployments: Deployments,
    cheaper: bool = False,
    signer: Union[Signer, str, None] = None,
    prompt: bool = True,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Withdraw every funded wei to the owner.

    Only the owner can withdraw, which is checked before sending so a non-owner
    never pays for a reverted transaction.

    Args:
        interface: EthereumInterface object for chain interaction
        deployments: registry holding the FundMe deployment
        cheaper: use ``cheaperWithdraw``, which reads the funders list once
        signer: account withdrawing (deployer when None)
        prompt: Whether to prompt for confirmation

    Returns:
        tuple[bool, str]: Success status and message
    """
    try:
        signer = await interface.get_signer(signer)
    except FundMeError as e:
        return report_failure(str(e), json_output)

    fund_me = get_fund_me(deployments, signer)
    if fund_me is None:
        return report_failure(
            f"FundMe is not deployed on {interface.network}. Run `fundme fundme deploy` first.",
            json_output,
        )

    try:
        owner, funders = await asyncio.gather(
            fund_me.get_owner(), fund_me.get_funders()
        )
    except FundMeError as e:
        return report_failure(
            "Failed to read FundMe.", json_output, format_error_message(e)
        )
    if owner != signer.address:
        return report_failure(
            f"Only the owner can withdraw. Owner: {owner}, your address: {signer.address}",
            json_output,
        )

    start_contract, start_owner = await asyncio.gather(
        interface.get_balance(fund_me.address), interface.get_balance(owner)
    )
    fn_name = "cheaperWithdraw" if cheaper else "withdraw"

    if not json_output:
        console.print(
            f"FundMe [{COLORS.G.ADDRESS}]{fund_me.address}[/{COLORS.G.ADDRESS}] holds "
            f"{start_contract} from [{COLORS.F.FUNDER}]{len(set(funders))}[/{COLORS.F.FUNDER}] funders."
        )
    if prompt and not Confirm.ask(
        f"\n[bold]Withdraw {start_contract} to {shorten_address(owner)} with {fn_name}?[/bold]",
        default=False,
    ):
        if json_output:
            print_json(json_transaction(False, error="Withdrawal cancelled by user."))
        else:
            console.print("[yellow]Withdrawal cancelled.[/yellow]")
        return False, "Withdrawal cancelled by user."

    network_config = await interface.network_config()
    with console.status(
        f":satellite: Submitting {fn_name} transaction...", spinner="aesthetic"
    ):
        success, error_message, receipt = await interface.sign_and_send_transaction(
            fund_me.contract,
            fn_name,
            signer=signer,
            wait_for_confirmations=network_config.block_confirmations,
        )

    if not success:
        return report_failure("Failed to withdraw.", json_output, error_message)

    end_contract, end_owner = await asyncio.gather(
        interface.get_balance(fund_me.address), interface.get_balance(owner)
    )
    if json_output:
        print_json(
            json_transaction(
                True,
                transaction_hash=receipt.transaction_hash,
                block_number=receipt.block_number,
                method=fn_name,
                withdrawn=start_contract.to_dict(),
                gas_cost=receipt.gas_cost.to_dict(),
                contract_balance=end_contract.to_dict(),
                owner_balance=end_owner.to_dict(),
            )
        )
    else:
        console.print(
            f"[{COLORS.G.SUCCESS}]Withdrew[/{COLORS.G.SUCCESS}] {start_contract} "
            f"(gas [{COLORS.F.GAS}]{receipt.gas_cost}[/{COLORS.F.GAS}]).\n"
            f"Contract balance: {start_contract} -> {end_contract}\n"
            f"Owner balance: {start_owner} -> {end_owner}\n"
            f"Transaction: [{COLORS.G.LINKS}]{receipt.transaction_hash}"
        )
    return True, f"Withdrew {start_contract}."
