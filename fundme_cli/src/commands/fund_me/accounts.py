from rich.table import Table

from fundme_cli.src import COLORS
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.json_utils import print_json_success
from fundme_cli.src.fundme.network_interface import EthereumInterface
from fundme_cli.src.fundme.utils import console


async def list_accounts(
    interface: EthereumInterface, json_output: bool = False
) -> tuple[bool, str]:
    """Display the accounts able to send transactions, with their named roles and balances."""
    accounts, named = await interface.get_accounts(), await interface.get_named_accounts()
    balances = await interface.get_balances(*accounts)
    roles = {address: name for name, address in named.items()}

    if json_output:
        print_json_success(
            {
                "network": interface.network,
                "accounts": [
                    {
                        "index": index,
                        "address": address,
                        "name": roles.get(address),
                        "balance": balances[address].to_dict(),
                    }
                    for index, address in enumerate(accounts)
                ],
            }
        )
        return True, f"{len(accounts)} accounts."

    if not accounts:
        console.print(
            f"[yellow]No accounts available on {interface.network}. "
            "Pass --private-key or set PRIVATE_KEY.[/yellow]"
        )
        return True, "0 accounts."

    table = Table(
        title=f"\n[{COLORS.G.HEADER}]Accounts"
        f"\nNetwork: [{COLORS.G.SUBHEAD}]{interface.network}\n",
        show_footer=True,
        show_edge=False,
        header_style="bold white",
        border_style="bright_black",
        title_justify="center",
        pad_edge=True,
    )
    table.add_column("[bold white]#", style="grey89", justify="center")
    table.add_column("[bold white]Name", style=COLORS.G.SUBHEAD)
    table.add_column("[bold white]Address", style=COLORS.G.ADDRESS, footer="Total")
    table.add_column(
        "[bold white]Balance",
        style=COLORS.G.BALANCE,
        justify="right",
        footer=str(sum(balances.values(), Balance(0))),
    )
    for index, address in enumerate(accounts):
        table.add_row(str(index), roles.get(address, ""), address, balances[address])
    console.print(table)
    return True, f"{len(accounts)} accounts."
