"""
Unit tests for JSON output utilities.

Tests the standardized JSON response formatting used across fundme commands.
"""

import json
from unittest.mock import patch

from fundme_cli.src.fundme.json_utils import (
    json_error,
    json_response,
    json_success,
    json_transaction,
    print_json_error,
    print_json_success,
)


class TestJsonResponse:
    """Tests for the json_response function."""

    def test_success_with_data(self):
        """Test successful response with data."""
        result = json_response(success=True, data={"key": "value"})
        parsed = json.loads(result)

        assert parsed["success"] is True
        assert parsed["data"] == {"key": "value"}
        assert "error" not in parsed

    def test_success_without_data(self):
        result = json_response(success=True)
        parsed = json.loads(result)

        assert parsed["success"] is True
        assert "data" not in parsed
        assert "error" not in parsed

    def test_error_with_data(self):
        """Test error response with additional data."""
        result = json_response(
            success=False, data={"partial": "data"}, error="Partial failure"
        )
        parsed = json.loads(result)

        assert parsed["success"] is False
        assert parsed["data"] == {"partial": "data"}
        assert parsed["error"] == "Partial failure"


class TestJsonHelpers:
    def test_success(self):
        parsed = json.loads(json_success([1, 2, 3]))

        assert parsed["success"] is True
        assert parsed["data"] == [1, 2, 3]

    def test_error(self):
        parsed = json.loads(json_error("FundMe is not deployed"))

        assert parsed["success"] is False
        assert parsed["error"] == "FundMe is not deployed"
        assert "data" not in parsed


class TestJsonTransaction:
    """Tests for the json_transaction helper."""

    def test_successful_transaction(self):
        result = json_transaction(
            True,
            transaction_hash="0xabc",
            block_number=7,
            amount={"wei": 1, "ether": 1e-18},
        )
        parsed = json.loads(result)

        assert parsed["success"] is True
        assert parsed["data"]["transaction_hash"] == "0xabc"
        assert parsed["data"]["block_number"] == 7
        assert parsed["data"]["amount"]["wei"] == 1
        assert "error" not in parsed

    def test_failed_transaction_has_no_data(self):
        parsed = json.loads(json_transaction(False, error="execution reverted"))

        assert parsed["success"] is False
        assert parsed["error"] == "execution reverted"
        assert "data" not in parsed


class TestPrintJson:
    def test_print_json_success(self):
        with patch("fundme_cli.src.fundme.json_utils.json_console") as mock_console:
            print_json_success({"network": "hardhat"})

        printed = mock_console.print.call_args[0][0]
        assert json.loads(printed) == {
            "success": True,
            "data": {"network": "hardhat"},
        }

    def test_print_json_error(self):
        with patch("fundme_cli.src.fundme.json_utils.json_console") as mock_console:
            print_json_error("Failed to fund.")

        printed = mock_console.print.call_args[0][0]
        assert json.loads(printed) == {"success": False, "error": "Failed to fund."}
