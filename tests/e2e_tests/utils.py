import importlib.metadata
import inspect
import json
import os
from typing import Optional, Protocol

from click.testing import Result
from packaging.version import Version, parse as parse_version
from typer.testing import CliRunner

from fundme_cli.cli import CLIManager

# hardhat runs in-process; point this at e.g. localhost to run against a node
TEST_NETWORK = os.getenv("FUNDME_TEST_NETWORK", "hardhat")


class ExecCommand(Protocol):
    """Type Protocol for make_exec_command's exec_command fn"""

    def __call__(
        self,
        command: str,
        sub_command: str,
        extra_args: Optional[list[str]] = None,
        inputs: Optional[list[str]] = None,
    ) -> Result: ...


def make_exec_command(network: str, deployments_path: str) -> ExecCommand:
    def exec_command(
        command: str,
        sub_command: str,
        extra_args: Optional[list[str]] = None,
        inputs: Optional[list[str]] = None,
    ):
        extra_args = extra_args or []
        cli_manager = CLIManager()
        for group in cli_manager.app.registered_groups:
            if group.name == command:
                for command_ in group.typer_instance.registered_commands:
                    if command_.name == sub_command:
                        params = inspect.signature(command_.callback).parameters
                        if "network" in params and "--network" not in extra_args:
                            # Ensure if we forget to add `--network` that it will run on the test network
                            extra_args.extend(["--network", network])
                        if (
                            "deployments_path" in params
                            and "--deployments-path" not in extra_args
                        ):
                            extra_args.extend(["--deployments-path", deployments_path])

        # Capture stderr separately from stdout
        if parse_version(importlib.metadata.version("click")) < Version("8.2.0"):
            runner = CliRunner(mix_stderr=False)
        else:
            runner = CliRunner()
        args = [command, sub_command] + extra_args

        command_for_printing = ["fundme"] + [
            str(arg) if arg is not None else "None" for arg in args
        ]
        print("Executing command:", " ".join(command_for_printing))

        input_text = "\n".join(inputs) + "\n" if inputs else None
        result = runner.invoke(
            cli_manager.app,
            args,
            input=input_text,
            env={"COLUMNS": "700"},
            catch_exceptions=False,
        )
        return result

    return exec_command


def parse_json_output(result: Result) -> dict:
    assert result.stdout, f"No output. stderr: {result.stderr}"
    return json.loads(result.stdout)
