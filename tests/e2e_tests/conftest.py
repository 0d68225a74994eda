import os

import pytest
import pytest_asyncio

from fundme_cli.src.fundme.deployments import Deployments
from fundme_cli.src.fundme.network_interface import EthereumInterface

from .utils import TEST_NETWORK, make_exec_command


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("FUNDME_CONFIG_PATH", str(tmp_path / "config.yml"))
    monkeypatch.setenv("FUNDME_DEBUG_FILE", str(tmp_path / "debug.txt"))
    monkeypatch.delenv("PRIVATE_KEY", raising=False)
    return tmp_path


@pytest_asyncio.fixture
async def local_chain():
    """A connected interface; on hardhat every test gets a fresh in-process chain."""
    async with EthereumInterface(TEST_NETWORK) as interface:
        yield interface


@pytest_asyncio.fixture
async def deployments(local_chain):
    deployments = Deployments(local_chain)
    await deployments.fixture(["all"])
    return deployments


@pytest.fixture(scope="session")
def deployments_path(tmp_path_factory) -> str:
    """Shared by every command of the session, so records written by deploy are read by the others."""
    return str(tmp_path_factory.mktemp("deployments"))


@pytest.fixture
def exec_command(isolated_config, deployments_path):
    exec_command = make_exec_command(TEST_NETWORK, deployments_path=deployments_path)
    if TEST_NETWORK != "hardhat" and not os.listdir(deployments_path):
        # persistent networks need the contracts deployed before the other commands run
        result = exec_command("fundme", "deploy", extra_args=["--no-prompt"])
        assert os.listdir(deployments_path), result.stdout
    return exec_command
