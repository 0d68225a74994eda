from typing import Optional


class FundMeError(Exception):
    """Base class for errors raised by the fundme library."""


class ContractRevertError(FundMeError):
    """A call or transaction was reverted by the EVM."""

    def __init__(self, reason: str = "", data: Optional[str] = None):
        self.reason = reason or ""
        self.data = data
        message = (
            f"execution reverted: {self.reason}"
            if self.reason
            else "execution reverted"
        )
        super().__init__(message)


class ContractNotDeployedError(FundMeError):
    def __init__(self, name: str, network: str):
        self.name = name
        self.network = network
        super().__init__(
            f"No deployment found for '{name}' on network '{network}'. "
            f"Run `fundme fundme deploy` first."
        )


class UnknownAccountError(FundMeError):
    def __init__(self, account: str):
        self.account = account
        super().__init__(f"Unknown named account: {account}")


class CompilationError(FundMeError):
    def __init__(self, contract_name: str, message: str):
        self.contract_name = contract_name
        super().__init__(f"Failed to compile {contract_name}: {message}")
