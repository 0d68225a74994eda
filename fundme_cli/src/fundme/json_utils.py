"""
JSON output for ``--json-output``.

Every command prints a single envelope::

    {"success": bool, "data": ..., "error": str}

``data`` and ``error`` are left out when empty. Transaction results carry ``transaction_hash`` and
``block_number`` in ``data`` next to the command's own fields.
"""

import json
from typing import Any, Optional

from fundme_cli.src.fundme.utils import json_console


def json_response(
    success: bool,
    data: Optional[Any] = None,
    error: Optional[str] = None,
) -> str:
    """
    Builds the envelope.

    >>> json_response(True, {"eth_usd": 2000.0})
    '{"success": true, "data": {"eth_usd": 2000.0}}'
    >>> json_response(False, error="FundMe is not deployed")
    '{"success": false, "error": "FundMe is not deployed"}'
    """
    response: dict[str, Any] = {"success": success}
    if data is not None:
        response["data"] = data
    if error is not None:
        response["error"] = error
    return json.dumps(response)


def json_success(data: Any) -> str:
    return json_response(success=True, data=data)


def json_error(error: str, data: Optional[Any] = None) -> str:
    return json_response(success=False, data=data, error=error)


def json_transaction(
    success: bool,
    transaction_hash: Optional[str] = None,
    block_number: Optional[int] = None,
    error: Optional[str] = None,
    **extra_data: Any,
) -> str:
    """
    Envelope for a sent transaction. ``extra_data`` (amounts, gas cost, new balances) is merged into ``data``
    after the hash and block number.
    """
    data: dict[str, Any] = {}
    if transaction_hash is not None:
        data["transaction_hash"] = transaction_hash
    if block_number is not None:
        data["block_number"] = block_number
    data.update(extra_data)
    return json_response(success=success, data=data or None, error=error)


def print_json(response: str) -> None:
    # one line, no rich markup, so the output stays parseable
    json_console.print(response, soft_wrap=True, markup=False, highlight=False)


def print_json_success(data: Any) -> None:
    print_json(json_success(data))


def print_json_error(error: str, data: Optional[Any] = None) -> None:
    print_json(json_error(error, data))
