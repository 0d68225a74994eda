import os
import re
from typing import Optional, Union
from urllib.parse import urlparse

import typer
from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_tester.exceptions import TransactionFailed
from eth_utils import is_checksum_address, is_hex_address, to_checksum_address
from rich.console import Console
from web3.exceptions import ContractLogicError

from fundme_cli.src import Constants, defaults
from fundme_cli.src.fundme.errors import ContractRevertError, FundMeError

console = Console()
json_console = Console()
err_console = Console(stderr=True)
verbose_console = Console(quiet=True)

ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
_REVERT_PREFIX = re.compile(
    r"^(?:VM Exception while processing transaction: )?"
    r"(?:execution reverted|reverted with reason string)"
    r"[:\s]*"
)


def print_console(message: str, colour: str, title: str, console_: Console):
    console_.print(
        f"[bold {colour}][{title}]:[/bold {colour}] [{colour}]{message}[/{colour}]\n"
    )


def print_verbose(message: str, status=None):
    """Print verbose messages while temporarily pausing the status spinner."""
    if status:
        status.stop()
        print_console(message, "green", "Verbose", verbose_console)
        status.start()
    else:
        print_console(message, "green", "Verbose", verbose_console)


def print_error(message: str, status=None):
    """Print error messages while temporarily pausing the status spinner."""
    if status:
        status.stop()
        print_console(message, "red", "Error", err_console)
        status.start()
    else:
        print_console(message, "red", "Error", err_console)


def is_valid_address(address: str) -> bool:
    """
    Checks if the given string is a valid 20-byte hex address. Mixed-case addresses must carry a valid
    EIP-55 checksum; all-lowercase and all-uppercase addresses are accepted as-is.

    :param address: The address to check.
    :return: True if the address is valid, False otherwise.
    """
    if not isinstance(address, str) or not is_hex_address(address):
        return False
    body = address[2:] if address.startswith(("0x", "0X")) else address
    if body.islower() or body.isupper() or body.isdigit():
        return True
    return is_checksum_address(address)


def validate_account(account: Optional[str]) -> Optional[str]:
    """
    Typer callback for account options. Addresses are checksummed or rejected, names are left for the interface
    to resolve.
    """
    if account is None or not account.startswith(("0x", "0X")):
        return account
    if not is_valid_address(account):
        raise typer.BadParameter(f"Invalid address: {account}")
    return to_checksum_address(account)


def shorten_address(address: str, size: int = 6) -> str:
    if len(address) <= 2 * size + 2:
        return address
    return f"{address[: size + 2]}...{address[-size:]}"


def decode_error_data(data: bytes) -> str:
    """Decodes ABI-encoded ``Error(string)`` revert data; other payloads decode to an empty reason."""
    if data[:4] != ERROR_STRING_SELECTOR:
        return ""
    try:
        return decode(["string"], data[4:])[0]
    except DecodingError:
        return ""


def decode_revert_reason(error: Union[Exception, str]) -> str:
    """
    Extracts the human-readable revert reason from a node error.

    Nodes and eth-tester word the same revert in different ways, e.g.
    ``execution reverted: You need to spend more ETH!`` or
    ``reverted with reason string 'You need to spend more ETH!'``.
    """
    if isinstance(error, ContractLogicError) and error.message:
        message = error.message
    elif isinstance(error, Exception):
        parts = []
        for arg in error.args:
            if isinstance(arg, Exception):
                parts.append(decode_revert_reason(arg))
            elif isinstance(arg, (bytes, bytearray)):
                parts.append(decode_error_data(bytes(arg)))
            elif arg is not None:
                parts.append(str(arg))
        message = " ".join(parts)
    else:
        message = error
    message = _REVERT_PREFIX.sub("", message.strip(), count=1).strip()
    if message in ("b''", 'b""', "None", "0x"):
        # revert without a reason string
        return ""
    return message.strip("'\"")


def to_revert_error(error: Union[ContractLogicError, TransactionFailed]) -> ContractRevertError:
    data = getattr(error, "data", None)
    return ContractRevertError(
        decode_revert_reason(error), data if isinstance(data, str) else None
    )


def format_error_message(error_message: Union[dict, Exception, str]) -> str:
    """
    Formats an error returned by the node, or raised by this library, for display.

    Args:
        error_message: A JSON-RPC error dictionary (``{"code": ..., "message": ...}``), an exception, or a string.

    Returns:
        str: A formatted error message string.
    """
    if isinstance(error_message, ContractRevertError):
        if error_message.reason:
            return f"Transaction reverted: `{error_message.reason}`."
        return "Transaction reverted without a reason."

    if isinstance(error_message, FundMeError):
        return str(error_message)

    if isinstance(error_message, (ContractLogicError, TransactionFailed)):
        return format_error_message(to_revert_error(error_message))

    if isinstance(error_message, Exception):
        if error_message.args and isinstance(error_message.args[0], dict):
            error_message = error_message.args[0]
        else:
            return f"Node returned: {' '.join(str(a) for a in error_message.args)}"

    if isinstance(error_message, dict):
        code = error_message.get("code", "UnknownCode")
        message = error_message.get("message", "Unknown Description")
        return f"Node returned `{code}` error. This means: `{message}`."

    return str(error_message)


def validate_rpc_url(endpoint_url: str) -> tuple[bool, str]:
    """Validates if the provided endpoint URL is a valid HTTP(S) URL."""
    parsed = urlparse(endpoint_url)
    if parsed.scheme not in ("http", "https"):
        return False, (
            "Invalid URL or network name provided: "
            f"[bright_cyan]({endpoint_url})[/bright_cyan].\n"
            f"Allowed network names are [bright_cyan]{', '.join(Constants.networks)}[/bright_cyan]. "
            "Valid RPC urls start with [bright_cyan]http:// or https://[/bright_cyan]."
        )
    if not parsed.netloc:
        return False, "Invalid URL passed as the endpoint"
    return True, ""


def rpc_url_for_network(network: str) -> Optional[str]:
    """
    Resolves the RPC url for a named network, preferring the matching ``<NETWORK>_RPC_URL`` env var over the
    public entrypoint.
    """
    env_var = Constants.rpc_url_env_vars.get(network)
    if env_var and os.getenv(env_var):
        return os.getenv(env_var)
    return Constants.network_map.get(network)


def get_effective_network(config: dict, network: Optional[str]) -> str:
    """
    Determines the network to use: the explicit option wins over the config value, which wins over the default.
    """
    if network:
        return network
    if config.get("network"):
        return config["network"]
    return defaults.network.name


def is_development_network(network: str) -> bool:
    return network in Constants.development_chains
