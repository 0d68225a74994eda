import importlib.metadata
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
import yaml
from packaging.version import Version, parse as parse_version
from typer.testing import CliRunner

from fundme_cli.cli import CLIManager, verbosity_console_handler
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.utils import (
    console,
    err_console,
    json_console,
    verbose_console,
)


def _runner() -> CliRunner:
    if parse_version(importlib.metadata.version("click")) < Version("8.2.0"):
        return CliRunner(mix_stderr=False)
    return CliRunner()


def _invoke(cli_manager: CLIManager, args: list[str], input_text: str = None):
    return _runner().invoke(
        cli_manager.app,
        args,
        input=input_text,
        env={"COLUMNS": "700"},
        catch_exceptions=False,
    )


@pytest.mark.parametrize(
    "level,quiet,verbose_quiet,json_quiet",
    [
        (0, True, True, False),
        (1, False, True, True),
        (2, False, False, True),
        (3, True, False, False),
    ],
)
def test_verbosity_console_handler(level, quiet, verbose_quiet, json_quiet):
    verbosity_console_handler(level)

    assert console.quiet is quiet
    assert err_console.quiet is quiet
    assert verbose_console.quiet is verbose_quiet
    assert json_console.quiet is json_quiet


def test_verbosity_console_handler_rejects_unknown_level():
    with pytest.raises(ValueError):
        verbosity_console_handler(4)


def test_quiet_and_verbose_are_exclusive():
    with pytest.raises(typer.Exit):
        CLIManager().verbosity_handler(quiet=True, verbose=True)


def test_config_set_network(isolated_config):
    result = _invoke(CLIManager(), ["config", "set", "--network", "sepolia"])

    assert result.exit_code == 0
    with open(isolated_config / "config.yml") as f:
        config = yaml.safe_load(f)
    assert config["network"] == "sepolia"
    assert config["use_cache"] is True
    assert "https://rpc.sepolia.org" in result.stdout


def test_config_set_rejects_invalid_network(isolated_config):
    result = _invoke(CLIManager(), ["config", "set", "--network", "not-a-network"])

    assert "Invalid URL or network name" in result.stderr
    with open(isolated_config / "config.yml") as f:
        config = yaml.safe_load(f)
    assert config["network"] is None


def test_config_is_backfilled(isolated_config):
    (isolated_config / "config.yml").write_text("network: localhost\n")

    _invoke(CLIManager(), ["config", "get"])

    with open(isolated_config / "config.yml") as f:
        config = yaml.safe_load(f)
    assert config == {
        "network": "localhost",
        "rpc_url": None,
        "deployments_path": None,
        "use_cache": True,
    }


def test_config_clear(isolated_config):
    _invoke(CLIManager(), ["config", "set", "--network", "localhost"])

    result = _invoke(CLIManager(), ["config", "clear", "--network"], input_text="y\n")

    assert "Cleared" in result.stdout
    with open(isolated_config / "config.yml") as f:
        config = yaml.safe_load(f)
    assert config["network"] is None
    assert config["use_cache"] is True


def test_version():
    result = _invoke(CLIManager(), ["--version"])

    assert result.exit_code == 0
    assert "FundMe CLI version: 1.0.0" in result.stdout


def test_command_tree_hides_aliases():
    tree = CLIManager().generate_command_tree()
    groups = [str(node.label) for node in tree.children]

    assert groups == [
        "[bold cyan]config[/]",
        "[bold cyan]fundme[/]",
        "[bold cyan]feed[/]",
        "[bold cyan]accounts[/]",
    ]
    fundme_commands = [str(node.label) for node in tree.children[1].children]
    assert fundme_commands == [
        "[green]deploy[/]",
        "[green]fund[/]",
        "[green]withdraw[/]",
        "[green]info[/]",
    ]


@patch("fundme_cli.cli.fund_cmds.fund")
def test_fund_passes_arguments(mock_fund):
    cli_manager = CLIManager()
    with patch.object(cli_manager, "_run_command") as mock_run:
        cli_manager.fundme_fund(
            amount=0.05,
            account="user",
            network="hardhat",
            rpc_url=None,
            private_key=None,
            prompt=False,
            quiet=False,
            verbose=False,
            json_output=True,
            deployments_path=None,
        )

    mock_run.assert_called_once()
    kwargs = mock_fund.call_args.kwargs
    assert kwargs["amount"] == Balance.from_ether("0.05")
    assert kwargs["signer"] == "user"
    assert kwargs["prompt"] is False
    assert kwargs["json_output"] is True
    assert kwargs["interface"].network == "hardhat"


@patch("fundme_cli.cli.fund_cmds.fund")
def test_fund_rejects_non_positive_amount(mock_fund):
    cli_manager = CLIManager()
    with patch.object(cli_manager, "_run_command") as mock_run:
        with pytest.raises(typer.Exit):
            cli_manager.fundme_fund(
                amount=0,
                account=None,
                network="hardhat",
                rpc_url=None,
                private_key=None,
                prompt=False,
                quiet=False,
                verbose=False,
                json_output=False,
                deployments_path=None,
            )

    mock_run.assert_not_called()
    mock_fund.assert_not_called()


@patch("fundme_cli.cli.withdraw_cmds.withdraw")
def test_withdraw_cheaper_flag(mock_withdraw):
    cli_manager = CLIManager()
    with patch.object(cli_manager, "_run_command") as mock_run:
        result = _invoke(
            cli_manager,
            ["fundme", "withdraw", "--cheaper", "--from", "user", "--no-prompt"],
        )

    assert result.exit_code == 0
    mock_run.assert_called_once()
    kwargs = mock_withdraw.call_args.kwargs
    assert kwargs["cheaper"] is True
    assert kwargs["signer"] == "user"
    assert kwargs["prompt"] is False


def test_run_command_returns_result():
    cli_manager = CLIManager()

    async def command():
        return True, ""

    assert cli_manager._run_command(command()) == (True, "")


def test_run_command_exits_on_library_error():
    cli_manager = CLIManager()
    command = AsyncMock(side_effect=FundMeError("FundMe is not deployed"))

    with pytest.raises(typer.Exit) as exc_info:
        cli_manager._run_command(command())

    assert exc_info.value.exit_code == 1


def test_run_command_closes_interface():
    cli_manager = CLIManager()
    cli_manager.interface = MagicMock()
    cli_manager.interface.network = "sepolia"
    cli_manager.interface.__aenter__ = AsyncMock()
    cli_manager.interface.__aexit__ = AsyncMock()
    cli_manager.deployments = MagicMock()
    cli_manager.deployments.load = AsyncMock(return_value=True)

    async def command():
        return "done"

    assert cli_manager._run_command(command()) == "done"
    cli_manager.deployments.load.assert_awaited_once_with(cli_manager.deployments_path)
    cli_manager.interface.__aexit__.assert_awaited_once()


@pytest.mark.parametrize(
    "args",
    [
        ["fundme", "fund", "--amount", "1", "--no-prompt"],
        ["fundme", "withdraw", "--no-prompt"],
        ["fundme", "info"],
        ["feed", "price"],
        ["feed", "update", "--price", "1800", "--no-prompt"],
    ],
    ids=["fund", "withdraw", "info", "feed-price", "feed-update"],
)
def test_commands_read_deployments_path(tmp_path, args):
    cli_manager = CLIManager()
    records = tmp_path / "records"
    with patch.object(cli_manager, "_run_command") as mock_run:
        result = _invoke(
            cli_manager,
            args + ["--network", "localhost", "--deployments-path", str(records)],
        )

    assert result.exit_code == 0
    mock_run.assert_called_once()
    mock_run.call_args.args[0].close()
    assert cli_manager.deployments_path == str(records)
