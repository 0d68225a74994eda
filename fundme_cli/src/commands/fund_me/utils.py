from typing import Optional, Union

from fundme_cli.src.fundme.contracts import FundMe
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import ContractNotDeployedError
from fundme_cli.src.fundme.json_utils import print_json_error
from fundme_cli.src.fundme.network_interface import Signer
from fundme_cli.src.fundme.utils import print_error


def report_failure(
    error_msg: str, json_output: bool, details: Optional[str] = None
) -> tuple[bool, str]:
    """Prints a failure the way the output mode asks for, and returns it as a command result."""
    if json_output:
        print_json_error(error_msg)
    else:
        print_error(f"[red]{error_msg}[/red]" + (f"\n{details}" if details else ""))
    return False, error_msg


def get_fund_me(
    deployments: Deployments, signer: Union[Signer, str, None] = None
) -> Optional[FundMe]:
    """
    The deployed FundMe contract connected to ``signer``, or None when it is not deployed on this network.
    """
    try:
        return deployments.get_contract("FundMe", signer)
    except ContractNotDeployedError:
        return None


def format_usd(amount: int) -> str:
    """Formats a USD amount carrying 18 decimals."""
    return f"${amount / 10**18:,.2f}"
