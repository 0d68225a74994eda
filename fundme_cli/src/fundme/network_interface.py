import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import typer
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_tester.exceptions import TransactionFailed
from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract import AsyncContract
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.providers.eth_tester import AsyncEthereumTesterProvider

from fundme_cli.src import Constants, NETWORK_CONFIG, NetworkConfig, defaults
from fundme_cli.src.fundme.balances import Balance
from fundme_cli.src.fundme.chain_data import TransactionReceipt
from fundme_cli.src.fundme.errors import (
    ContractRevertError,
    FundMeError,
    UnknownAccountError,
)
from fundme_cli.src.fundme.utils import (
    console,
    err_console,
    format_error_message,
    is_development_network,
    rpc_url_for_network,
    to_revert_error,
    validate_rpc_url,
)

logger = logging.getLogger("fundme")


@dataclass
class Signer:
    """
    An account able to send transactions. Accounts unlocked on the node (eth-tester, a local hardhat or anvil
    node) carry no local key; accounts loaded from a private key sign locally.
    """

    address: str
    account: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.account is not None

    def __str__(self):
        return self.address


class TransactionResponse:
    """A sent, not yet mined, transaction."""

    def __init__(self, interface: "EthereumInterface", transaction_hash: bytes):
        self.interface = interface
        self.hash = HexBytes(transaction_hash)

    def __repr__(self):
        return f"TransactionResponse({self.hash.to_0x_hex()})"

    async def wait(
        self, confirmations: int = 1, timeout: Optional[float] = None
    ) -> TransactionReceipt:
        """
        Waits for the transaction to be mined and for ``confirmations`` blocks (the inclusion block counts as the
        first) to be built on top of it.

        :raises ContractRevertError: the transaction was mined but failed.
        :raises web3.exceptions.TimeExhausted: the transaction was not mined in time.
        """
        timeout = timeout or defaults.transactions.wait_timeout
        web3 = self.interface.web3
        raw_receipt = await web3.eth.wait_for_transaction_receipt(
            self.hash,
            timeout=timeout,
            poll_latency=defaults.transactions.poll_interval,
        )
        receipt = TransactionReceipt.from_any(raw_receipt)
        if confirmations > 1:
            target = receipt.block_number + confirmations - 1
            loop = asyncio.get_running_loop()
            deadline = loop.time() + timeout
            while await web3.eth.block_number < target:
                if loop.time() > deadline:
                    raise TimeExhausted(
                        f"Transaction {self.hash.to_0x_hex()} did not reach "
                        f"{confirmations} confirmations in {timeout} seconds"
                    )
                await asyncio.sleep(defaults.transactions.poll_interval)
        if not receipt.success:
            raise ContractRevertError()
        logger.debug(
            f"Transaction {receipt.transaction_hash} mined in block {receipt.block_number}, "
            f"gas used {receipt.gas_used}"
        )
        return receipt


class EthereumInterface:
    """
    Thin layer for interacting with an Ethereum node through web3. Mostly a collection of frequently-used calls.
    """

    def __init__(
        self,
        network: str,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
    ):
        if network in Constants.network_map:
            self.network = network
            self.rpc_url = rpc_url or rpc_url_for_network(network)
            if network == "localhost":
                console.log(
                    "[yellow]Warning[/yellow]: Verify your local node is running on port 8545."
                )
        else:
            is_valid, _ = validate_rpc_url(network)
            if is_valid:
                self.rpc_url = network
                self.network = "custom"
            else:
                console.log(
                    f"Network not specified or not valid. Using default network: "
                    f"{defaults.network.name}.\n"
                    f"You can set this for commands with the `--network` flag, or by setting this"
                    f" in the config. If you're sure you're using the correct URL, ensure it begins"
                    f" with 'http://' or 'https://'"
                )
                self.network = defaults.network.name
                self.rpc_url = rpc_url or rpc_url_for_network(self.network)
        if self.network == "hardhat":
            provider = AsyncEthereumTesterProvider()
        else:
            provider = AsyncHTTPProvider(
                self.rpc_url,
                request_kwargs={"timeout": defaults.network.request_timeout},
            )
        self.web3 = AsyncWeb3(provider)
        self.local_account: Optional[LocalAccount] = (
            Account.from_key(private_key) if private_key else None
        )
        self._chain_id: Optional[int] = None

    def __str__(self):
        return f"Network: {self.network}, RPC: {self.rpc_url or 'in-process'}"

    async def __aenter__(self):
        with console.status(
            f"[yellow]Connecting to node:[/yellow][bold white] {self}..."
        ):
            try:
                connected = await self.web3.is_connected()
            except (TimeoutError, OSError) as e:
                logger.debug(f"Connection to {self} failed: {e}")
                connected = False
            if not connected:
                err_console.print(
                    "\n[red]Error[/red]: Could not connect to the node. "
                    f"Verify your network settings: {self}"
                )
                raise typer.Exit(code=1)
            await self.chain_id()
            return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        disconnect = getattr(self.web3.provider, "disconnect", None)
        if disconnect is not None:
            try:
                await disconnect()
            except NotImplementedError:
                pass

    @property
    def is_development_chain(self) -> bool:
        return is_development_network(self.network)

    async def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.web3.eth.chain_id
        return self._chain_id

    async def block_number(self) -> int:
        return await self.web3.eth.block_number

    async def network_config(self) -> NetworkConfig:
        """
        Per-network deployment parameters. eth-tester does not use the hardhat chain id, so the in-process chain
        is looked up by name.
        """
        chain_id = await self.chain_id()
        if chain_id in NETWORK_CONFIG:
            return NETWORK_CONFIG[chain_id]
        by_name = Constants.chain_id_map.get(self.network)
        if by_name in NETWORK_CONFIG:
            return NETWORK_CONFIG[by_name]
        return NetworkConfig(name=self.network)

    async def get_accounts(self) -> list[str]:
        """Accounts able to send: the local key account (if any) first, then the node's unlocked accounts."""
        accounts = list(await self.web3.eth.accounts)
        if self.local_account is not None:
            accounts = [self.local_account.address] + [
                a for a in accounts if a != self.local_account.address
            ]
        return accounts

    async def get_signers(self) -> list[Signer]:
        return [self._signer_for(address) for address in await self.get_accounts()]

    def _signer_for(self, address: str) -> Signer:
        if (
            self.local_account is not None
            and address.lower() == self.local_account.address.lower()
        ):
            return Signer(self.local_account.address, self.local_account)
        return Signer(to_checksum_address(address))

    async def get_named_accounts(self) -> dict[str, str]:
        """
        Resolves the named accounts (``deployer``, ``user``) to addresses. Names whose index is beyond the
        available accounts are left out.
        """
        accounts = await self.get_accounts()
        named = {}
        for name in ("deployer", "user"):
            index = getattr(defaults.named_accounts, name)
            if index < len(accounts):
                named[name] = accounts[index]
        return named

    async def get_signer(self, account: Union[Signer, str, None] = None) -> Signer:
        """
        Resolves a signer from a ``Signer``, a named account, an address, or None (the deployer).
        """
        if isinstance(account, Signer):
            return account
        account = account or "deployer"
        if account.startswith("0x"):
            return self._signer_for(account)
        named = await self.get_named_accounts()
        if account not in named:
            raise UnknownAccountError(account)
        return self._signer_for(named[account])

    async def get_balance(
        self, address: str, block_identifier: Union[int, str] = "latest"
    ) -> Balance:
        return Balance.from_wei(
            await self.web3.eth.get_balance(address, block_identifier)
        )

    async def get_balances(self, *addresses: str) -> dict[str, Balance]:
        balances = await asyncio.gather(
            *[self.get_balance(address) for address in addresses]
        )
        return dict(zip(addresses, balances))

    def contract_at(self, address: str, abi: list[dict]) -> AsyncContract:
        return self.web3.eth.contract(address=address, abi=abi)

    async def call(
        self,
        contract: AsyncContract,
        fn_name: str,
        *args,
        block_identifier: Union[int, str] = "latest",
    ) -> Any:
        """
        Calls a view function.

        :raises ContractRevertError: the call reverted.
        """
        try:
            return await getattr(contract.functions, fn_name)(*args).call(
                block_identifier=block_identifier
            )
        except (ContractLogicError, TransactionFailed) as e:
            raise to_revert_error(e) from e

    async def _send(self, transaction, tx_params: dict, signer: Signer) -> bytes:
        """
        Sends a contract function or constructor call. Gas is estimated before sending, so a reverting call is
        rejected here and never mined.
        """
        try:
            if not signer.is_local:
                return await transaction.transact(tx_params)
            tx_params = {
                **tx_params,
                "nonce": await self.web3.eth.get_transaction_count(
                    signer.address, "pending"
                ),
                "chainId": await self.chain_id(),
            }
            built = await transaction.build_transaction(tx_params)
            signed = signer.account.sign_transaction(built)
            return await self.web3.eth.send_raw_transaction(signed.raw_transaction)
        except (ContractLogicError, TransactionFailed) as e:
            raise to_revert_error(e) from e

    async def transact(
        self,
        contract: AsyncContract,
        fn_name: str,
        *args,
        signer: Union[Signer, str, None] = None,
        value: Union[Balance, int] = 0,
    ) -> TransactionResponse:
        """
        Sends a transaction calling ``fn_name`` on ``contract``.

        :raises ContractRevertError: the node rejected the transaction because it would revert.
        """
        signer = await self.get_signer(signer)
        tx_params = {"from": signer.address, "value": int(value)}
        logger.debug(
            f"Sending {fn_name}{args} to {contract.address} from {signer.address} "
            f"with value {int(value)}"
        )
        tx_hash = await self._send(
            getattr(contract.functions, fn_name)(*args), tx_params, signer
        )
        return TransactionResponse(self, tx_hash)

    async def send_value(
        self,
        to: str,
        value: Union[Balance, int],
        signer: Union[Signer, str, None] = None,
    ) -> TransactionResponse:
        """Plain value transfer; for contracts this triggers their receive or fallback function."""
        signer = await self.get_signer(signer)
        tx = {"from": signer.address, "to": to, "value": int(value)}
        logger.debug(f"Sending {int(value)} wei from {signer.address} to {to}")
        try:
            if not signer.is_local:
                tx_hash = await self.web3.eth.send_transaction(tx)
            else:
                tx["gas"] = await self.web3.eth.estimate_gas(tx)
                tx["gasPrice"] = await self.web3.eth.gas_price
                tx["nonce"] = await self.web3.eth.get_transaction_count(
                    signer.address, "pending"
                )
                tx["chainId"] = await self.chain_id()
                signed = signer.account.sign_transaction(tx)
                tx_hash = await self.web3.eth.send_raw_transaction(
                    signed.raw_transaction
                )
        except (ContractLogicError, TransactionFailed) as e:
            raise to_revert_error(e) from e
        return TransactionResponse(self, tx_hash)

    async def deploy_contract(
        self,
        abi: list[dict],
        bytecode: str,
        *args,
        signer: Union[Signer, str, None] = None,
    ) -> TransactionResponse:
        signer = await self.get_signer(signer)
        factory = self.web3.eth.contract(abi=abi, bytecode=bytecode)
        logger.debug(f"Deploying contract from {signer.address} with args {args}")
        tx_hash = await self._send(
            factory.constructor(*args), {"from": signer.address}, signer
        )
        return TransactionResponse(self, tx_hash)

    async def sign_and_send_transaction(
        self,
        contract: AsyncContract,
        fn_name: str,
        *args,
        signer: Union[Signer, str, None] = None,
        value: Union[Balance, int] = 0,
        wait_for_confirmations: int = 1,
    ) -> tuple[bool, str, Optional[TransactionReceipt]]:
        """
        Helper method to send a transaction and wait for it to be mined.

        :return: (success, formatted error message, receipt)
        """
        try:
            response = await self.transact(
                contract, fn_name, *args, signer=signer, value=value
            )
            receipt = await response.wait(wait_for_confirmations)
            return True, "", receipt
        except (FundMeError, Web3Exception) as e:
            return False, format_error_message(e), None

    async def _rpc(self, method: str, params: list) -> Any:
        response = await self.web3.provider.make_request(method, params)
        if response.get("error"):
            raise FundMeError(format_error_message(response["error"]))
        return response.get("result")

    async def snapshot(self) -> Any:
        """Takes an EVM snapshot. Only development chains support this."""
        snapshot_id = await self._rpc("evm_snapshot", [])
        logger.debug(f"Took snapshot {snapshot_id}")
        return snapshot_id

    async def revert(self, snapshot_id: Any) -> bool:
        """
        Reverts the chain to ``snapshot_id``. Some nodes consume the snapshot on revert, so take a new one to
        return to the same state again.
        """
        logger.debug(f"Reverting to snapshot {snapshot_id}")
        result = await self._rpc("evm_revert", [snapshot_id])
        return result is not False

    async def mine(self, blocks: int = 1):
        for _ in range(blocks):
            await self._rpc("evm_mine", [])
