#!/usr/bin/env python3
import asyncio
import copy
import importlib.metadata
import logging
import os.path
import sys
import traceback
from pathlib import Path
from typing import Coroutine, Optional

import typer
from git import GitError, Repo
from rich import box
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Column, Table
from rich.tree import Tree
from typing_extensions import Annotated
from web3.exceptions import Web3Exception
from yaml import safe_dump, safe_load

from fundme_cli.src import COLORS, Constants, HELP_PANELS, defaults
from fundme_cli.src.commands.fund_me import (
    accounts as accounts_cmds,
    deploy as deploy_cmds,
    fund as fund_cmds,
    price as price_cmds,
    view as view_cmds,
    withdraw as withdraw_cmds,
)
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.errors import FundMeError
from fundme_cli.src.fundme.network_interface import EthereumInterface
from fundme_cli.src.fundme.utils import (
    console,
    err_console,
    format_error_message,
    get_effective_network,
    json_console,
    print_error,
    validate_account,
    validate_rpc_url,
    verbose_console,
)
from fundme_cli.version import __version__

logger = logging.getLogger("fundme")
_epilog = "Fund me, withdraw me, test me."


def arg__(arg_name: str) -> str:
    """
    Helper function to 'arg' format a string for rich console
    """
    return f"[{COLORS.G.ARG}]{arg_name}[/{COLORS.G.ARG}]"


class Options:
    """
    Re-usable typer args
    """

    @classmethod
    def edit_help(cls, option_name: str, help_text: str):
        """
        Edits the `help` attribute of a copied given Typer option in this class, returning
        the modified Typer option.

        Args:
            option_name: the name of the option (e.g. "account")
            help_text: New help text to be used (e.g. "Account funding the contract")

        Returns:
            Modified Typer Option with new help text.
        """
        copied_attr = copy.copy(getattr(cls, option_name))
        setattr(copied_attr, "help", help_text)
        return copied_attr

    network = typer.Option(
        None,
        "--network",
        "-n",
        help=f"The network to connect to: one of {', '.join(Constants.networks)}, or an http(s) RPC url. "
        f"Default: {defaults.network.name}.",
        show_default=False,
    )
    rpc_url = typer.Option(
        None,
        "--rpc-url",
        "--rpc",
        help="RPC url used for a named network, overriding the public endpoint and the config.",
        show_default=False,
    )
    private_key = typer.Option(
        None,
        "--private-key",
        "--pk",
        envvar=Constants.private_key_env_var,
        help="Private key of the deployer account on live networks.",
        show_default=False,
    )
    account = typer.Option(
        None,
        "--account",
        "--from",
        help="Named account (deployer, user) or address sending the transaction. Default: deployer.",
        show_default=False,
        callback=validate_account,
    )
    deployments_path = typer.Option(
        None,
        "--deployments-path",
        "--deployments",
        help=f"Directory holding the deployment records of persistent networks. "
        f"Default: {defaults.deployments.path}.",
        show_default=False,
    )
    prompt = typer.Option(
        True,
        "--prompt/--no-prompt",
        " /--yes",
        " /-y",
        help="Enable or disable interactive prompts.",
    )
    verbose = typer.Option(
        False,
        "--verbose",
        help="Enable verbose output.",
    )
    quiet = typer.Option(
        False,
        "--quiet",
        help="Display only critical information on the console.",
    )
    json_output = typer.Option(
        False,
        "--json-output",
        "--json-out",
        help="Outputs the result of the command as JSON.",
    )


# quiet flags of (console, err_console, verbose_console, json_console) per verbosity level
_VERBOSITY_LEVELS = {
    0: (True, True, True, False),  # quiet, json output
    1: (False, False, True, True),  # normal
    2: (False, False, False, True),  # verbose
    3: (True, True, False, False),  # json output + verbose
}


def verbosity_console_handler(verbosity_level: int = 1) -> None:
    """
    Silences or enables the shared consoles.

    :param verbosity_level: 0 (quiet + json output), 1 (normal), 2 (verbose) or 3 (json output + verbose)
    """
    if verbosity_level not in _VERBOSITY_LEVELS:
        raise ValueError(
            f"Invalid verbosity level: {verbosity_level}. "
            f"Must be one of: {', '.join(str(level) for level in _VERBOSITY_LEVELS)}"
        )
    consoles = (console, err_console, verbose_console, json_console)
    for console_, quiet in zip(consoles, _VERBOSITY_LEVELS[verbosity_level]):
        console_.quiet = quiet


def version_callback(value: bool):
    """
    Prints the current version/branch-name
    """
    if value:
        try:
            repo = Repo(os.path.dirname(os.path.dirname(__file__)))
            version = (
                f"FundMe CLI version: {__version__}/"
                f"{repo.active_branch.name}/"
                f"{repo.commit()}"
            )
        except (TypeError, GitError):
            version = f"FundMe CLI version: {__version__}"
        typer.echo(version)
        raise typer.Exit()


def commands_callback(value: bool):
    """
    Prints a tree of commands for the app
    """
    if value:
        cli = CLIManager()
        console.print(cli.generate_command_tree())
        raise typer.Exit()


def debug_callback(value: bool):
    """
    Copies the debug log of the previous command to a file of the user's choosing.
    """
    if not value:
        return
    debug_file = Path(
        os.getenv("FUNDME_DEBUG_FILE")
        or os.path.expanduser(defaults.config.debug_file_path)
    )
    if not debug_file.exists():
        print_error(
            f"No debug log at {arg__(str(debug_file))}. A log is written by every command while "
            f"{arg__('use_cache')} is enabled ({arg__('fundme config set --cache')}). If the log was written to a "
            f"custom {arg__('FUNDME_DEBUG_FILE')}, set it again before running {arg__('fundme --debug')}."
        )
        raise typer.Exit()
    target = Path(
        os.path.expanduser(
            Prompt.ask(
                "Where should the debug log of the previous command be saved?",
                default="~/.fundme/debug-export",
            ).strip()
        )
    )
    if not target.parent.exists() and Confirm.ask(
        f"The directory '{target.parent}' does not exist. Create it?"
    ):
        target.parent.mkdir(parents=True, exist_ok=True)
    try:
        target.write_text(debug_file.read_text())
        console.print(f"Saved debug log to {target}")
    except FileNotFoundError as e:
        print_error(str(e))
    raise typer.Exit()


class CLIManager:
    """
    :var app: the main CLI Typer app
    :var config_app: the Typer app as it relates to config commands
    :var fundme_app: the Typer app for deploying, funding and withdrawing from FundMe
    :var feed_app: the Typer app for the ETH/USD price feed
    :var accounts_app: the Typer app for the accounts of the connected network
    :var interface: the `EthereumInterface` object passed to the various commands that require it
    :var deployments: the `Deployments` registry the commands look contracts up in
    """

    interface: Optional[EthereumInterface]
    deployments: Optional[Deployments]
    app: typer.Typer
    config_app: typer.Typer
    fundme_app: typer.Typer
    feed_app: typer.Typer
    accounts_app: typer.Typer

    def __init__(self):
        self.config = {
            "network": None,
            "rpc_url": None,
            "deployments_path": None,
            "use_cache": True,
        }
        self.interface = None
        self.deployments = None
        self._deployments_path = None
        self.event_loop = asyncio.new_event_loop()

        self.config_path = os.getenv("FUNDME_CONFIG_PATH") or os.path.expanduser(
            defaults.config.path
        )
        self.config_base_path = os.path.dirname(self.config_path)
        self.debug_file_path = os.getenv("FUNDME_DEBUG_FILE") or os.path.expanduser(
            defaults.config.debug_file_path
        )

        self.app = typer.Typer(
            rich_markup_mode="rich",
            callback=self.main_callback,
            epilog=_epilog,
            no_args_is_help=True,
        )
        self.config_app = typer.Typer(
            epilog=_epilog,
            help=f"Allows for getting/setting the config. "
            f"Default path for the config file is {arg__(defaults.config.path)}. "
            f"You can set your own with the env var {arg__('FUNDME_CONFIG_PATH')}",
        )
        self.fundme_app = typer.Typer(epilog=_epilog)
        self.feed_app = typer.Typer(epilog=_epilog)
        self.accounts_app = typer.Typer(epilog=_epilog)

        # config aliases
        self.app.add_typer(
            self.config_app,
            name="config",
            short_help="Config commands, aliases: `c`, `conf`",
            no_args_is_help=True,
        )
        self.app.add_typer(
            self.config_app, name="conf", hidden=True, no_args_is_help=True
        )
        self.app.add_typer(self.config_app, name="c", hidden=True, no_args_is_help=True)

        # fundme aliases
        self.app.add_typer(
            self.fundme_app,
            name="fundme",
            short_help="FundMe commands, alias: `fm`",
            no_args_is_help=True,
        )
        self.app.add_typer(self.fundme_app, name="fm", hidden=True, no_args_is_help=True)

        # feed aliases
        self.app.add_typer(
            self.feed_app,
            name="feed",
            short_help="Price feed commands, alias: `f`",
            no_args_is_help=True,
        )
        self.app.add_typer(self.feed_app, name="f", hidden=True, no_args_is_help=True)

        # accounts aliases
        self.app.add_typer(
            self.accounts_app,
            name="accounts",
            short_help="Account commands, alias: `a`",
            no_args_is_help=True,
        )
        self.app.add_typer(
            self.accounts_app, name="a", hidden=True, no_args_is_help=True
        )

        # config commands
        self.config_app.command("set")(self.set_config)
        self.config_app.command("get")(self.get_config)
        self.config_app.command("clear")(self.del_config)

        # fundme commands
        self.fundme_app.command(
            "deploy", rich_help_panel=HELP_PANELS["FUNDME"]["DEPLOY"]
        )(self.fundme_deploy)
        self.fundme_app.command(
            "fund", rich_help_panel=HELP_PANELS["FUNDME"]["FUNDING"]
        )(self.fundme_fund)
        self.fundme_app.command(
            "withdraw", rich_help_panel=HELP_PANELS["FUNDME"]["FUNDING"]
        )(self.fundme_withdraw)
        self.fundme_app.command(
            "info", rich_help_panel=HELP_PANELS["FUNDME"]["INFORMATION"]
        )(self.fundme_info)

        # feed commands
        self.feed_app.command("price", rich_help_panel=HELP_PANELS["FEED"]["PRICE"])(
            self.feed_price
        )
        self.feed_app.command(
            "update", rich_help_panel=HELP_PANELS["FEED"]["PRICE"]
        )(self.feed_update)

        # accounts commands
        self.accounts_app.command("list")(self.accounts_list)

    def generate_command_tree(self) -> Tree:
        """
        Generates a rich.Tree of the commands, subcommands, and groups of this app
        """

        def build_rich_tree(data: dict, parent: Tree):
            for group, content in data.get("groups", {}).items():
                group_node = parent.add(f"[bold cyan]{group}[/]")
                for command in content.get("commands", []):
                    group_node.add(f"[green]{command}[/]")
                build_rich_tree(content, group_node)

        def traverse_group(group: typer.Typer) -> dict:
            tree = {}
            if commands := [
                cmd.name for cmd in group.registered_commands if not cmd.hidden
            ]:
                tree["commands"] = commands
            for group in group.registered_groups:
                if "groups" not in tree:
                    tree["groups"] = {}
                if not group.hidden:
                    if group_transversal := traverse_group(group.typer_instance):
                        tree["groups"][group.name] = group_transversal

            return tree

        groups_and_commands = traverse_group(self.app)
        root = Tree("[bold magenta]FundMe CLI Commands[/]")
        build_rich_tree(groups_and_commands, root)
        return root

    def initialize_chain(
        self,
        network: Optional[str] = None,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
    ) -> EthereumInterface:
        """
        Initializes the connection to the chain, depending on the supplied (or in config) values. Sets the
        `self.interface` object to this created connection.

        :param network: Network name (e.g. hardhat, sepolia) or an RPC url (e.g. http://127.0.0.1:8545)
        :param rpc_url: RPC url used for a named network
        :param private_key: key of the account deploying and sending transactions on live networks
        """
        if not self.interface:
            if not network and self.config["network"]:
                console.print(
                    f"Using the specified network [{COLORS.G.LINKS}]{self.config['network']}"
                    f"[/{COLORS.G.LINKS}] from config"
                )
            self.interface = EthereumInterface(
                get_effective_network(self.config, network),
                rpc_url=rpc_url or self.config.get("rpc_url"),
                private_key=private_key,
            )
        return self.interface

    def initialize_deployments(
        self, deployments_path: Optional[str] = None
    ) -> Deployments:
        if deployments_path:
            self._deployments_path = os.path.expanduser(deployments_path)
        if not self.deployments:
            self.deployments = Deployments(self.interface)
        return self.deployments

    @property
    def deployments_path(self) -> str:
        return self._deployments_path or os.path.expanduser(
            self.config.get("deployments_path") or defaults.deployments.path
        )

    async def _prepare_deployments(self, run_fixture: bool):
        """
        The in-process hardhat chain starts empty on every invocation, so it gets the default fixture. Persistent
        networks load what earlier invocations deployed.
        """
        if self.deployments is None:
            return
        if self.interface.network == "hardhat":
            if run_fixture:
                with console.status(
                    ":hammer: Deploying fixture to the in-process chain...",
                    spinner="aesthetic",
                ):
                    await self.deployments.fixture(defaults.deploy_tags)
        else:
            await self.deployments.load(self.deployments_path)

    def _run_command(self, cmd: Coroutine, run_fixture: bool = True):
        """
        Runs the supplied coroutine on the event loop, connecting the interface and preparing the deployments
        first.
        """

        async def _run():
            initiated = False
            exception_occurred = False
            try:
                if self.interface:
                    await self.interface.__aenter__()
                    await self._prepare_deployments(run_fixture)
                initiated = True
                result = await cmd
                return result
            except typer.Exit:
                raise
            except (ConnectionError, TimeoutError, OSError):
                err_console.print(f"Unable to connect to the node: {self.interface}")
                verbose_console.print(traceback.format_exc())
                exception_occurred = True
            except (FundMeError, Web3Exception) as e:
                err_console.print(format_error_message(e))
                verbose_console.print(traceback.format_exc())
                exception_occurred = True
            except KeyboardInterrupt:
                verbose_console.print(traceback.format_exc())
                exception_occurred = True
            except Exception as e:
                err_console.print(f"An unknown error has occurred: {e}")
                verbose_console.print(traceback.format_exc())
                exception_occurred = True
            finally:
                if initiated is False:
                    cmd.close()
                if self.interface:
                    await self.interface.__aexit__(None, None, None)
                if exception_occurred:
                    raise typer.Exit(code=1)

        return self.event_loop.run_until_complete(_run())

    def main_callback(
        self,
        version: Annotated[
            Optional[bool],
            typer.Option(
                "--version", callback=version_callback, help="Show FundMe CLI version"
            ),
        ] = None,
        commands: Annotated[
            Optional[bool],
            typer.Option(
                "--commands",
                callback=commands_callback,
                help="Show FundMe CLI commands",
            ),
        ] = None,
        debug_log: Annotated[
            Optional[bool],
            typer.Option(
                "--debug",
                callback=debug_callback,
                help="Saves the debug log from the last used command",
            ),
        ] = None,
    ):
        """
        Command line interface (CLI) for the FundMe contract. Uses the values in the configuration file. These
            values can be overridden by passing them explicitly in the command line.
        """
        # Load or create the config file
        if os.path.exists(self.config_path):
            with open(self.config_path, "r") as f:
                config = safe_load(f) or {}
        else:
            directory_path = Path(self.config_base_path)
            directory_path.mkdir(exist_ok=True, parents=True)
            config = defaults.config.dictionary.copy()
            with open(self.config_path, "w") as f:
                safe_dump(config, f)

        # Update missing values
        updated = False
        for key, value in defaults.config.dictionary.items():
            if key not in config:
                config[key] = value
                updated = True
            elif isinstance(value, bool) and config[key] is None:
                config[key] = value
                updated = True
        if updated:
            with open(self.config_path, "w") as f:
                safe_dump(config, f)

        for k, v in config.items():
            if k in self.config.keys():
                self.config[k] = v
        if self.config.get("use_cache", False):
            Path(self.debug_file_path).parent.mkdir(parents=True, exist_ok=True)
            with open(self.debug_file_path, "w+") as f:
                f.write(
                    f"FundMe CLI {__version__}\n"
                    f"Web3: {importlib.metadata.version('web3')}\n"
                    f"Eth-Tester: {importlib.metadata.version('eth-tester')}\n"
                    f"Vyper: {importlib.metadata.version('vyper')}\n"
                    f"Command: {' '.join(sys.argv)}\n"
                    f"Config: {self.config}\n"
                    f"Python: {sys.version}\n"
                    f"System: {sys.platform}\n\n"
                )
            web3_logger = logging.getLogger("web3")
            web3_logger.setLevel(logging.DEBUG)
            logger.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                "%(asctime)s - %(levelname)s - %(name)s - %(module)s:%(lineno)d - %(message)s"
            )
            handler = logging.FileHandler(self.debug_file_path)
            handler.setFormatter(formatter)
            web3_logger.addHandler(handler)
            logger.addHandler(handler)

    def verbosity_handler(
        self, quiet: bool, verbose: bool, json_output: bool = False
    ) -> None:
        if quiet and verbose:
            err_console.print("Cannot specify both `--quiet` and `--verbose`")
            raise typer.Exit()
        if json_output and verbose:
            verbosity_console_handler(3)
        elif json_output or quiet:
            verbosity_console_handler(0)
        elif verbose:
            verbosity_console_handler(2)
        else:
            verbosity_console_handler(1)

    def set_config(
        self,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        deployments_path: Optional[str] = Options.deployments_path,
        use_cache: Optional[bool] = typer.Option(
            None,
            "--cache/--no-cache",
            " /--no_cache",
            help="Enable or disable the debug log written for every command.",
        ),
    ):
        """
        Sets or updates configuration values in the FundMe CLI config file.

        USAGE
        Interactive mode:
            [green]$[/green] fundme config set

        Set specific values:
            [green]$[/green] fundme config set --network sepolia --rpc-url https://...

        [bold]NOTE[/bold]:
        - Network values can be network names (e.g., 'hardhat', 'sepolia') or http(s) URLs
        - Changes are saved to ~/.fundme/config.yml
        - Use '[green]$[/green] fundme config get' to view current settings
        """
        args = {
            "network": network,
            "rpc_url": rpc_url,
            "deployments_path": deployments_path,
            "use_cache": use_cache,
        }
        bools = ["use_cache"]
        if all(v is None for v in args.values()):
            # Print existing configs
            self.get_config()

            # Create numbering to choose from
            config_keys = list(args.keys())
            console.print("Which config setting would you like to update?\n")
            for idx, key in enumerate(config_keys, start=1):
                console.print(f"{idx}. {key}")

            choice = IntPrompt.ask(
                "\nEnter the [bold]number[/bold] of the config setting you want to update",
                choices=[str(i) for i in range(1, len(config_keys) + 1)],
                show_choices=False,
            )
            arg = config_keys[choice - 1]

            if arg in bools:
                nc = Confirm.ask(
                    f"What value would you like to assign to [red]{arg}[/red]?",
                    default=True,
                )
                self.config[arg] = nc
            else:
                val = Prompt.ask(
                    f"What value would you like to assign to [red]{arg}[/red]?"
                )
                args[arg] = val
                self.config[arg] = val

        if n := args.get("network"):
            if n not in Constants.networks:
                valid_endpoint, error = validate_rpc_url(n)
                if not valid_endpoint:
                    print_error(f"{error}")
                    raise typer.Exit()
        if u := args.get("rpc_url"):
            valid_endpoint, error = validate_rpc_url(u)
            if not valid_endpoint:
                print_error(f"{error}")
                raise typer.Exit()

        for arg, val in args.items():
            if val is not None:
                logger.debug(f"Config: setting {arg} to {val}")
                self.config[arg] = val
        with open(self.config_path, "w") as f:
            safe_dump(self.config, f)

        # Print latest configs after updating
        self.get_config()

    def del_config(
        self,
        network: bool = typer.Option(False, *Options.network.param_decls),
        rpc_url: bool = typer.Option(False, *Options.rpc_url.param_decls),
        deployments_path: bool = typer.Option(
            False, *Options.deployments_path.param_decls
        ),
        use_cache: bool = typer.Option(False, "--cache"),
        all_items: bool = typer.Option(False, "--all"),
    ):
        """
        Clears the fields in the config file and sets them to 'None'.

        # EXAMPLE

            - To clear the 'network' and 'rpc_url' fields:

                [green]$[/green] fundme config clear --network --rpc-url

            - To clear your config entirely:

                [green]$[/green] fundme config clear --all
        """
        if all_items:
            if not Confirm.ask("Do you want to clear all configurations?"):
                console.print("Operation cancelled.")
                return
            self.config = {key: None for key in self.config}
            console.print("All configurations have been cleared and set to 'None'.")
        else:
            flags = {
                "network": network,
                "rpc_url": rpc_url,
                "deployments_path": deployments_path,
                "use_cache": use_cache,
            }
            # without flags, offer every key holding a value
            selected = [key for key, flag in flags.items() if flag] or [
                key for key in flags if self.config.get(key) is not None
            ]
            for key in selected:
                current = self.config.get(key)
                if current is None:
                    console.print(
                        f"No config set for {arg__(key)}. Use {arg__('fundme config set')} to set it."
                    )
                elif Confirm.ask(
                    f"Do you want to clear the {arg__(key)} [bold cyan]({current})[/bold cyan] config?"
                ):
                    self.config[key] = None
                    logger.debug(f"Config: clearing {key}.")
                    console.print(f"Cleared {arg__(key)} config and set to 'None'.")
                else:
                    console.print(f"Skipped clearing {arg__(key)} config.")
        with open(self.config_path, "w") as f:
            safe_dump(self.config, f)

    def get_config(self):
        """
        Prints the current config file in a table.
        """
        table = Table(
            Column("[bold white]Name", style=f"{COLORS.G.ARG}"),
            Column("[bold white]Value", style="gold1"),
            box=box.SIMPLE_HEAD,
            title=f"[{COLORS.G.HEADER}]FundMe CLI Config[/{COLORS.G.HEADER}]: {arg__(self.config_path)}",
        )

        for key, value in self.config.items():
            if key == "network":
                if value is None:
                    value = f"None (default = {defaults.network.name})"
                elif value in Constants.networks:
                    value = value + f" ({Constants.network_map[value] or 'in-process'})"
            elif key == "deployments_path" and value is None:
                value = f"None (default = {defaults.deployments.path})"
            table.add_row(str(key), str(value))

        console.print(table)

    def fundme_deploy(
        self,
        tags: Optional[list[str]] = typer.Option(
            None,
            "--tags",
            "-t",
            help=f"Deploy script tags to run, e.g. `mocks`, `fundme`. Default: {', '.join(defaults.deploy_tags)}.",
            show_default=False,
        ),
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        private_key: Optional[str] = Options.private_key,
        deployments_path: Optional[str] = Options.deployments_path,
        prompt: bool = Options.prompt,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Deploy the price feed mock (development chains only) and the FundMe contract.

        On live networks FundMe reads the ETH/USD feed configured for the chain, and each deployment waits for the
        network's block confirmations. Deployments on persistent networks are recorded so the other commands can
        find them.

        EXAMPLE

        [green]$[/green] fundme fundme deploy --network localhost

        [green]$[/green] fundme fundme deploy --network sepolia --tags fundme
        """
        self.verbosity_handler(quiet, verbose, json_output)
        interface = self.initialize_chain(network, rpc_url, private_key)
        logger.debug(f"args:\ntags: {tags}\nprompt: {prompt}\n")
        return self._run_command(
            deploy_cmds.deploy_contracts(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                tags=tags or defaults.deploy_tags,
                deployments_path=self.deployments_path,
                prompt=prompt,
                json_output=json_output,
            ),
            run_fixture=False,
        )

    def fundme_fund(
        self,
        amount: Optional[float] = typer.Option(
            None,
            "--amount",
            "-a",
            help="Amount (in ETH) to fund.",
        ),
        account: Optional[str] = Options.account,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        private_key: Optional[str] = Options.private_key,
        deployments_path: Optional[str] = Options.deployments_path,
        prompt: bool = Options.prompt,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Fund the FundMe contract.

        The amount must be worth at least the contract's USD minimum at the current price feed answer; smaller amounts
        are refused before anything is sent.

        EXAMPLE

        [green]$[/green] fundme fundme fund --amount 0.1 --account user
        """
        self.verbosity_handler(quiet, verbose, json_output)
        if amount is None:
            amount = FloatPrompt.ask("Enter amount (in ETH) to fund")
        if amount <= 0:
            print_error("Amount must be greater than 0.")
            raise typer.Exit()
        interface = self.initialize_chain(network, rpc_url, private_key)
        logger.debug(f"args:\namount: {amount}\naccount: {account}\nprompt: {prompt}\n")
        return self._run_command(
            fund_cmds.fund(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                amount=Balance.from_ether(amount),
                signer=account,
                prompt=prompt,
                json_output=json_output,
            )
        )

    def fundme_withdraw(
        self,
        cheaper: bool = typer.Option(
            False,
            "--cheaper/--standard",
            help="Use `cheaperWithdraw`, which reads the funders from storage only once.",
        ),
        account: Optional[str] = Options.edit_help(
            "account", "Account withdrawing; must be the owner. Default: deployer."
        ),
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        private_key: Optional[str] = Options.private_key,
        deployments_path: Optional[str] = Options.deployments_path,
        prompt: bool = Options.prompt,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Withdraw all funds from the FundMe contract to its owner.

        EXAMPLE

        [green]$[/green] fundme fundme withdraw --cheaper
        """
        self.verbosity_handler(quiet, verbose, json_output)
        interface = self.initialize_chain(network, rpc_url, private_key)
        logger.debug(f"args:\ncheaper: {cheaper}\naccount: {account}\nprompt: {prompt}\n")
        return self._run_command(
            withdraw_cmds.withdraw(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                cheaper=cheaper,
                signer=account,
                prompt=prompt,
                json_output=json_output,
            )
        )

    def fundme_info(
        self,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        deployments_path: Optional[str] = Options.deployments_path,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Display the FundMe contract: owner, price feed, balance and funders.

        EXAMPLE

        [green]$[/green] fundme fundme info --network localhost
        """
        self.verbosity_handler(quiet, verbose, json_output)
        interface = self.initialize_chain(network, rpc_url)
        return self._run_command(
            view_cmds.show_fund_me(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                json_output=json_output,
            )
        )

    def feed_price(
        self,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        deployments_path: Optional[str] = Options.deployments_path,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Display the latest ETH/USD answer of the price feed FundMe reads.

        EXAMPLE

        [green]$[/green] fundme feed price
        """
        self.verbosity_handler(quiet, verbose, json_output)
        interface = self.initialize_chain(network, rpc_url)
        return self._run_command(
            price_cmds.show_price(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                json_output=json_output,
            )
        )

    def feed_update(
        self,
        price: Optional[float] = typer.Option(
            None,
            "--price",
            "-p",
            help="New ETH/USD price, in USD.",
        ),
        account: Optional[str] = Options.account,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        deployments_path: Optional[str] = Options.deployments_path,
        prompt: bool = Options.prompt,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        Set a new answer on the mock price feed of a development chain.

        EXAMPLE

        [green]$[/green] fundme feed update --price 1800 --network localhost
        """
        self.verbosity_handler(quiet, verbose, json_output)
        if price is None:
            price = FloatPrompt.ask("Enter the new ETH/USD price")
        interface = self.initialize_chain(network, rpc_url)
        return self._run_command(
            price_cmds.update_answer(
                interface=interface,
                deployments=self.initialize_deployments(deployments_path),
                price=price,
                signer=account,
                prompt=prompt,
                json_output=json_output,
            )
        )

    def accounts_list(
        self,
        network: Optional[str] = Options.network,
        rpc_url: Optional[str] = Options.rpc_url,
        private_key: Optional[str] = Options.private_key,
        quiet: bool = Options.quiet,
        verbose: bool = Options.verbose,
        json_output: bool = Options.json_output,
    ):
        """
        List the accounts able to send transactions, their named roles and balances.

        EXAMPLE

        [green]$[/green] fundme accounts list --network localhost
        """
        self.verbosity_handler(quiet, verbose, json_output)
        interface = self.initialize_chain(network, rpc_url, private_key)
        return self._run_command(
            accounts_cmds.list_accounts(interface=interface, json_output=json_output),
            run_fixture=False,
        )

    def run(self):
        self.app()


def main():
    manager = CLIManager()
    manager.run()


if __name__ == "__main__":
    main()
