import asyncio
from typing import Union

from rich.prompt import Confirm
from rich.table import Column, Table, box

from fundme_cli.src import COLORS
from fundme_cli.src.commands.fund_me.utils import (
    format_usd,
    get_fund_me,
    report_failure,
)
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.contracts import get_conversion_rate
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.json_utils import json_transaction, print_json
from fundme_cli.src.fundme.network_interface import EthereumInterface, Signer
from fundme_cli.src.fundme.utils import console, format_error_message


async def fund(
    interface: EthereumInterface,
    deployments: Deployments,
    amount: Balance,
    signer: Union[Signer, str, None] = None,
    prompt: bool = True,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Fund the deployed FundMe contract.

    The USD value of ``amount`` is checked against the contract's minimum before
    anything is sent, so an underfunded call never costs gas.

    Args:
        interface: EthereumInterface object for chain interaction
        deployments: registry holding the FundMe deployment
        amount: ether to send
        signer: account funding the contract (deployer when None)
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
        price_feed = await fund_me.price_feed()
        eth_price, minimum_usd, balance = await asyncio.gather(
            price_feed.get_eth_price(),
            fund_me.minimum_usd(),
            interface.get_balance(signer.address),
        )
    except FundMeError as e:
        return report_failure(
            "Failed to read the price feed.", json_output, format_error_message(e)
        )

    usd_value = get_conversion_rate(amount, eth_price)
    if usd_value < minimum_usd:
        return report_failure(
            f"{amount} is worth {format_usd(usd_value)}, below the minimum of {format_usd(minimum_usd)}.",
            json_output,
        )
    if amount > balance:
        return report_failure(
            f"Insufficient balance: {signer.address} holds {balance}, tried to send {amount}.",
            json_output,
        )

    if not json_output:
        info_table = Table(
            Column("[bold white]Property", style=COLORS.G.SUBHEAD),
            Column("[bold white]Value", style=COLORS.G.ARG),
            show_header=False,
            pad_edge=False,
            box=box.SIMPLE,
            show_edge=True,
            border_style="bright_black",
        )
        info_table.add_row("FundMe", fund_me.address)
        info_table.add_row("From", signer.address)
        info_table.add_row("Amount", amount)
        info_table.add_row("ETH/USD", format_usd(eth_price))
        info_table.add_row(
            "Value", f"[{COLORS.F.USD}]{format_usd(usd_value)}[/{COLORS.F.USD}]"
        )
        info_table.add_row("Minimum", format_usd(minimum_usd))
        console.print(info_table)

    if prompt and not Confirm.ask(
        f"\n[bold]Send {amount} to FundMe?[/bold]", default=False
    ):
        if json_output:
            print_json(json_transaction(False, error="Funding cancelled by user."))
        else:
            console.print("[yellow]Funding cancelled.[/yellow]")
        return False, "Funding cancelled by user."

    network_config = await interface.network_config()
    with console.status(
        ":satellite: Submitting fund transaction...", spinner="aesthetic"
    ):
        success, error_message, receipt = await interface.sign_and_send_transaction(
            fund_me.contract,
            "fund",
            signer=signer,
            value=amount,
            wait_for_confirmations=network_config.block_confirmations,
        )

    if not success:
        return report_failure("Failed to fund.", json_output, error_message)

    funded = await fund_me.get_address_to_amount_funded(signer.address)
    if json_output:
        print_json(
            json_transaction(
                True,
                transaction_hash=receipt.transaction_hash,
                block_number=receipt.block_number,
                amount=amount.to_dict(),
                usd_value=usd_value / 10**18,
                total_funded=funded.to_dict(),
                gas_cost=receipt.gas_cost.to_dict(),
            )
        )
    else:
        console.print(
            f"[{COLORS.G.SUCCESS}]Funded[/{COLORS.G.SUCCESS}] {amount} "
            f"(gas [{COLORS.F.GAS}]{receipt.gas_cost}[/{COLORS.F.GAS}]).\n"
            f"Total funded by {signer.address}: {funded}\n"
            f"Transaction: [{COLORS.G.LINKS}]{receipt.transaction_hash}"
        )
    return True, f"Funded {amount}."
