import asyncio
from decimal import Decimal
from typing import Optional, Union

from rich.prompt import Confirm
from rich.table import Column, Table, box

from fundme_cli.src import COLORS
from fundme_cli.src.commands.fund_me.utils import (
    format_usd,
    get_fund_me,
    report_failure,
)
from fundme_cli.src.fundme.contracts import MockV3Aggregator, get_eth_price
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.json_utils import (
    json_transaction,
    print_json,
    print_json_success,
)
from fundme_cli.src.fundme.network_interface import EthereumInterface, Signer
from fundme_cli.src.fundme.utils import console, format_error_message


async def _get_price_feed(deployments: Deployments) -> Optional[MockV3Aggregator]:
    """The feed FundMe reads from, falling back to a deployed mock."""
    fund_me = get_fund_me(deployments)
    if fund_me is not None:
        return await fund_me.price_feed()
    mock = deployments.get_or_none("MockV3Aggregator")
    if mock is not None:
        return deployments.get_contract(mock.name)
    return None


async def show_price(
    interface: EthereumInterface,
    deployments: Deployments,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Display the latest round of the ETH/USD price feed."""
    price_feed = await _get_price_feed(deployments)
    if price_feed is None:
        return report_failure(
            f"No price feed is deployed on {interface.network}.", json_output
        )

    try:
        description, decimals, version, round_data = await asyncio.gather(
            price_feed.description(),
            price_feed.decimals(),
            price_feed.version(),
            price_feed.latest_round_data(),
        )
    except FundMeError as e:
        return report_failure(
            "Failed to read the price feed.", json_output, format_error_message(e)
        )
    eth_price = get_eth_price(round_data, decimals)

    if json_output:
        print_json_success(
            {
                "address": price_feed.address,
                "description": description,
                "decimals": decimals,
                "version": version,
                "round_id": round_data.round_id,
                "answer": round_data.answer,
                "updated_at": round_data.updated_at,
                "eth_usd": eth_price / 10**18,
            }
        )
        return True, "Price retrieved."

    table = Table(
        Column("Field", style=COLORS.G.SUBHEAD, min_width=16),
        Column("Value", style=COLORS.G.ARG),
        title=f"\n[{COLORS.G.HEADER}]ETH / USD"
        f"\nNetwork: [{COLORS.G.SUBHEAD}]{interface.network}\n",
        show_header=False,
        box=box.SIMPLE,
        border_style="bright_black",
        title_justify="center",
    )
    table.add_row("Feed", f"[{COLORS.G.CONTRACT}]{price_feed.address}")
    table.add_row("Description", description)
    table.add_row("Version", str(version))
    table.add_row("Decimals", str(decimals))
    table.add_row("Round", str(round_data.round_id))
    table.add_row("Answer", str(round_data.answer))
    table.add_row("Price", f"[{COLORS.F.USD}]{format_usd(eth_price)}")
    console.print(table)
    return True, "Price retrieved."


async def update_answer(
    interface: EthereumInterface,
    deployments: Deployments,
    price: Union[float, Decimal],
    signer: Union[Signer, str, None] = None,
    prompt: bool = True,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Set a new ETH/USD price on the mock feed. Only development chains have a mock.

    Args:
        price: the new price in USD, scaled to the feed's decimals before sending
    """
    if not interface.is_development_chain:
        return report_failure(
            f"{interface.network} uses a live price feed; only mocks can be updated.",
            json_output,
        )
    mock = deployments.get_or_none("MockV3Aggregator")
    if mock is None:
        return report_failure(
            f"MockV3Aggregator is not deployed on {interface.network}.", json_output
        )
    feed = deployments.get_contract(mock.name, signer)
    decimals = await feed.decimals()
    answer = int(Decimal(str(price)) * 10**decimals)

    if prompt and not Confirm.ask(
        f"Set the mock ETH/USD price to [{COLORS.F.USD}]${price:,}[/{COLORS.F.USD}] "
        f"(answer {answer})?",
        default=False,
    ):
        console.print("[yellow]Update cancelled.[/yellow]")
        return False, "Update cancelled by user."

    with console.status(
        ":satellite: Submitting updateAnswer transaction...", spinner="aesthetic"
    ):
        success, error_message, receipt = await interface.sign_and_send_transaction(
            feed.contract, "updateAnswer", answer, signer=signer
        )
    if not success:
        return report_failure("Failed to update the price.", json_output, error_message)

    round_id = await feed.latest_round()
    if json_output:
        print_json(
            json_transaction(
                True,
                transaction_hash=receipt.transaction_hash,
                block_number=receipt.block_number,
                answer=answer,
                round_id=round_id,
            )
        )
    else:
        console.print(
            f"[{COLORS.G.SUCCESS}]Price updated[/{COLORS.G.SUCCESS}] to "
            f"{format_usd(answer * 10 ** (18 - decimals))} in round {round_id}."
        )
    return True, f"Price updated to {answer}."
