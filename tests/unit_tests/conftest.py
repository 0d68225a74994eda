import pytest

from fundme_cli.cli import verbosity_console_handler


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps the CLI config and debug log of every test in its own directory."""
    monkeypatch.setenv("FUNDME_CONFIG_PATH", str(tmp_path / "config.yml"))
    monkeypatch.setenv("FUNDME_DEBUG_FILE", str(tmp_path / "debug.txt"))
    monkeypatch.delenv("PRIVATE_KEY", raising=False)
    yield tmp_path
    # commands switch the shared consoles to quiet/json mode
    verbosity_console_handler(1)
