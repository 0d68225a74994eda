from rich.table import Column, Table, box

from fundme_cli.src import COLORS
from fundme_cli.src.commands.fund_me.utils import (
    format_usd,
    get_fund_me,
    report_failure,
)
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.json_utils import print_json_success
from fundme_cli.src.fundme.network_interface import EthereumInterface
from fundme_cli.src.fundme.utils import console, format_error_message


async def show_fund_me(
    interface: EthereumInterface,
    deployments: Deployments,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Display the FundMe contract's state and its funders."""
    fund_me = get_fund_me(deployments)
    if fund_me is None:
        return report_failure(
            f"FundMe is not deployed on {interface.network}. Run `fundme fundme deploy` first.",
            json_output,
        )

    with console.status(":satellite: Fetching FundMe state...", spinner="aesthetic"):
        try:
            info = await fund_me.get_info()
        except FundMeError as e:
            return report_failure(
                "Failed to read FundMe.", json_output, format_error_message(e)
            )

    if json_output:
        print_json_success({"network": interface.network, **info.to_dict()})
        return True, "FundMe info retrieved."

    table = Table(
        Column("Field", style=COLORS.G.SUBHEAD, min_width=20),
        Column("Value", style=COLORS.G.ARG),
        title=f"\n[{COLORS.G.HEADER}]FundMe"
        f"\nNetwork: [{COLORS.G.SUBHEAD}]{interface.network}\n",
        show_header=False,
        box=box.SIMPLE,
        border_style="bright_black",
        title_justify="center",
    )
    table.add_row("Address", f"[{COLORS.G.ADDRESS}]{info.address}")
    table.add_row("Owner", f"[{COLORS.G.ADDRESS}]{info.owner}")
    table.add_row("Price Feed", f"[{COLORS.G.CONTRACT}]{info.price_feed}")
    table.add_row("Feed Version", str(info.version))
    table.add_row("Minimum", format_usd(int(info.minimum_usd)))
    table.add_row("Balance", info.balance)
    table.add_row("Funders", str(len(info.funders)))
    console.print(table)

    if not info.funders:
        console.print("[dim]No funders yet.[/dim]")
        return True, "FundMe info retrieved."

    funders_table = Table(
        title=f"[{COLORS.G.HEADER}]Funders",
        show_footer=True,
        show_edge=False,
        header_style="bold white",
        border_style="bright_black",
        title_justify="center",
        pad_edge=True,
    )
    funders_table.add_column("[bold white]#", style="grey89", justify="center")
    funders_table.add_column(
        "[bold white]Funder", style=COLORS.F.FUNDER, footer="Total"
    )
    funders_table.add_column(
        "[bold white]Amount",
        style=COLORS.F.AMOUNT,
        justify="right",
        footer=str(info.total_funded),
    )
    for index, funder in enumerate(info.funders):
        funders_table.add_row(str(index), funder.address, funder.amount)
    console.print(funders_table)
    return True, "FundMe info retrieved."
