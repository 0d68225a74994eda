import logging
from functools import lru_cache
from pathlib import Path

import vyper
from vyper.exceptions import VyperException

from fundme_cli.src.fundme.errors import CompilationError

logger = logging.getLogger("fundme")

CONTRACTS_PATH = Path(__file__).resolve().parents[2] / "contracts"


def contract_source_path(name: str) -> Path:
    return CONTRACTS_PATH / f"{name}.vy"


def available_contracts() -> list[str]:
    return sorted(path.stem for path in CONTRACTS_PATH.glob("*.vy"))


@lru_cache(maxsize=None)
def compile_contract(name: str) -> tuple[list[dict], str]:
    """
    Compiles one of the bundled contract sources.

    :param name: contract name, e.g. ``FundMe``; resolved to ``contracts/<name>.vy``
    :return: (abi, 0x-prefixed deployment bytecode)
    """
    path = contract_source_path(name)
    if not path.exists():
        raise CompilationError(
            name, f"no source at {path}. Available: {', '.join(available_contracts())}"
        )
    logger.debug(f"Compiling {name} from {path} with vyper {vyper.__version__}")
    try:
        output = vyper.compile_code(
            path.read_text(),
            contract_path=str(path),
            output_formats=["abi", "bytecode"],
        )
    except VyperException as e:
        raise CompilationError(name, str(e)) from e
    bytecode = output["bytecode"]
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    return output["abi"], bytecode
