from typing import Optional

from rich.prompt import Confirm
from rich.table import Table
from web3.exceptions import Web3Exception

from fundme_cli.src import COLORS
from fundme_cli.src.commands.fund_me.utils import report_failure
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.json_utils import print_json_success
from fundme_cli.src.fundme.network_interface import EthereumInterface
from fundme_cli.src.fundme.utils import console, format_error_message, print_verbose


async def deploy_contracts(
    interface: EthereumInterface,
    deployments: Deployments,
    tags: list[str],
    deployments_path: Optional[str] = None,
    prompt: bool = True,
    json_output: bool = False,
) -> tuple[bool, str]:
    """Runs the deploy scripts matching ``tags`` and records what they deployed.

    On persistent networks the records are saved to ``deployments_path`` so later
    invocations can find the contracts.

    Args:
        interface: EthereumInterface object for chain interaction
        deployments: registry the scripts deploy into
        tags: deploy script tags to run, e.g. ``["all"]``
        deployments_path: directory holding the per-network deployment files
        prompt: Whether to prompt for confirmation on live networks

    Returns:
        tuple[bool, str]: Success status and message
    """
    if prompt and not interface.is_development_chain:
        network_config = await interface.network_config()
        if not Confirm.ask(
            f"Deploy [{COLORS.G.ARG}]{', '.join(tags)}[/{COLORS.G.ARG}] to "
            f"[{COLORS.G.SUBHEAD}]{interface.network}[/{COLORS.G.SUBHEAD}], waiting "
            f"{network_config.block_confirmations} confirmations per contract?",
            default=False,
        ):
            console.print("[yellow]Deployment cancelled.[/yellow]")
            return False, "Deployment cancelled by user."

    before = {d.name: d.address for d in deployments.all()}
    with console.status(
        f":satellite: Deploying to {interface.network}...", spinner="aesthetic"
    ):
        try:
            await deployments.run(tags)
        except (FundMeError, Web3Exception) as e:
            return report_failure(
                "Deployment failed.", json_output, format_error_message(e)
            )

    deployed = [
        d for d in deployments.all() if before.get(d.name) != d.address
    ]
    for d in deployed:
        print_verbose(
            f"{d.name} deployed at {d.address} by {d.deployer} in block {d.block_number}"
        )
    saved_to = None
    if deployments_path and interface.network != "hardhat":
        saved_to = await deployments.save(deployments_path)

    if json_output:
        print_json_success(
            {
                "network": interface.network,
                "deployments": [
                    {
                        "name": d.name,
                        "address": d.address,
                        "deployer": d.deployer,
                        "transaction_hash": d.transaction_hash,
                        "block_number": d.block_number,
                    }
                    for d in deployed
                ],
                "saved_to": saved_to,
            }
        )
        return True, f"Deployed {len(deployed)} contracts."

    if not deployed:
        console.print(f"[yellow]No deploy scripts matched tags: {', '.join(tags)}[/yellow]")
        return True, "Nothing to deploy."

    table = Table(
        title=f"\n[{COLORS.G.HEADER}]Deployments"
        f"\nNetwork: [{COLORS.G.SUBHEAD}]{interface.network}\n",
        show_edge=False,
        header_style="bold white",
        border_style="bright_black",
        title_justify="center",
        pad_edge=True,
    )
    table.add_column("[bold white]Contract", style=COLORS.G.CONTRACT)
    table.add_column("[bold white]Address", style=COLORS.G.ADDRESS)
    table.add_column("[bold white]Block", style="grey89", justify="right")
    table.add_column("[bold white]Transaction", style=COLORS.G.LINKS)
    for d in deployed:
        table.add_row(d.name, d.address, str(d.block_number), d.transaction_hash)
    console.print(table)
    if saved_to:
        console.print(f"Deployments saved to [{COLORS.G.LINKS}]{saved_to}")
    return True, f"Deployed {len(deployed)} contracts."
