from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, List, NamedTuple, Optional, Sequence, Union

from ape import Contract, accounts, networks
from ape.api import AccountAPI, ReceiptAPI
from ape.contracts.base import ContractInstance, ContractTransactionHandler
from ape.exceptions import ApeException
from eth_abi import is_encodable
from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address, to_hex
from ethpm_types import MethodABI
from hexbytes import HexBytes
from eth_typing import ABI

from protocol_deployment.confirm import _confirm_transaction, _print_transaction
from protocol_deployment.errors import ChainCallFailed
from protocol_deployment.utils import get_contract_container

Sender = Union[AccountAPI, str]


class DeployedContract(NamedTuple):
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None


class ChainClient(ABC):
    """
    The capabilities the orchestration layer needs from a blockchain client.
    Every component receives one explicitly instead of reaching for ambient state.
    """

    @abstractmethod
    def get_signer(self, address: str) -> Any:
        """Returns the signing account for an address (or account alias)."""
        raise NotImplementedError

    @abstractmethod
    def get_contract(self, address: str, abi: ABI) -> Any:
        """Returns a contract handle at an address for the given ABI."""
        raise NotImplementedError

    @abstractmethod
    def call(self, contract: Any, method: str, *args) -> Any:
        raise NotImplementedError

    @abstractmethod
    def encode_call(self, contract: Any, method: str, *args) -> HexBytes:
        raise NotImplementedError

    @abstractmethod
    def estimate_gas(self, contract: Any, method: str, *args, sender: Any) -> int:
        raise NotImplementedError

    @abstractmethod
    def transact(
        self, contract: Any, method: str, *args, sender: Any, gas_limit: Optional[int] = None
    ) -> Any:
        """Submits a transaction and blocks until its receipt is available."""
        raise NotImplementedError

    @abstractmethod
    def get_logs(
        self,
        address: str,
        topics: Sequence[Any],
        start_block: int = 0,
        stop_block: Optional[int] = None,
    ) -> List[dict]:
        """Returns raw historical logs emitted by an address and matching the topics."""
        raise NotImplementedError

    @abstractmethod
    def deploy(self, contract_name: str, *args, sender: Any) -> DeployedContract:
        """Deploys a contract and returns its address along with its registry artifacts."""
        raise NotImplementedError

    def resolve_sender(self, sender: Sender) -> Any:
        if isinstance(sender, str):
            return self.get_signer(sender)
        return sender


def _named_arguments(method_abis: List[MethodABI], args: Sequence[Any]) -> OrderedDict:
    """Matches the transaction arguments against the method ABIs for display."""
    for abi in method_abis:
        if len(abi.inputs) != len(args):
            continue
        named_args = OrderedDict()
        for position, (arg, abi_input) in enumerate(zip(args, abi.inputs)):
            if not is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name or f"arg{position}"] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json"))
    return contract_abi


def _contract_label(contract: ContractInstance) -> str:
    name = getattr(contract.contract_type, "name", None) or "Contract"
    return f"{name}[{contract.address[:10]}]"


class ApeChainClient(ChainClient):
    """
    Chain client backed by the connected ape provider.
    Transactions are printed and confirmed interactively unless autosign is enabled.
    """

    def __init__(self, autosign: bool = False, publish: bool = False):
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._publish = publish

    def get_signer(self, address: str) -> AccountAPI:
        if is_address(address):
            return accounts[to_checksum_address(address)]
        account = accounts.load(address)  # account alias
        account.set_autosign(self._autosign)
        return account

    def get_contract(self, address: str, abi: ABI) -> ContractInstance:
        return Contract(to_checksum_address(address), abi=abi)

    def call(self, contract: ContractInstance, method: str, *args) -> Any:
        return getattr(contract, method)(*args)

    def encode_call(self, contract: ContractInstance, method: str, *args) -> HexBytes:
        return HexBytes(getattr(contract, method).encode_input(*args))

    def estimate_gas(
        self, contract: ContractInstance, method: str, *args, sender: AccountAPI
    ) -> int:
        handler = getattr(contract, method)
        try:
            return handler.estimate_gas_cost(*args, sender=sender)
        except ApeException as e:
            raise ChainCallFailed(
                contract=_contract_label(contract),
                method=f"{method} (gas estimation)",
                args=args,
                reason=str(e),
            ) from e

    def transact(
        self,
        contract: ContractInstance,
        method: str,
        *args,
        sender: AccountAPI,
        gas_limit: Optional[int] = None,
    ) -> ReceiptAPI:
        handler: ContractTransactionHandler = getattr(contract, method)
        named_args = _named_arguments(method_abis=handler.abis, args=args)
        _print_transaction(f"\nTransacting {_contract_label(contract)}.{method}", named_args)
        if not self._autosign:
            _confirm_transaction(named_args)

        kwargs = {"sender": sender}
        if gas_limit is not None:
            kwargs["gas_limit"] = gas_limit
        try:
            return handler(*args, **kwargs)
        except ApeException as e:
            raise ChainCallFailed(
                contract=_contract_label(contract), method=method, args=args, reason=str(e)
            ) from e

    def get_logs(
        self,
        address: str,
        topics: Sequence[Any],
        start_block: int = 0,
        stop_block: Optional[int] = None,
    ) -> List[dict]:
        filter_params = {
            "address": to_checksum_address(address),
            "topics": [to_hex(HexBytes(topic)) for topic in topics],
            "fromBlock": start_block,
            "toBlock": "latest" if stop_block is None else stop_block,
        }
        return [dict(log) for log in networks.provider.web3.eth.get_logs(filter_params)]

    def deploy(self, contract_name: str, *args, sender: AccountAPI) -> DeployedContract:
        container = get_contract_container(contract_name)
        print(f"\nDeploying {contract_name}...")
        if not self._autosign:
            _confirm_transaction(OrderedDict((f"arg{i}", a) for i, a in enumerate(args)))
        try:
            instance = sender.deploy(container, *args, publish=self._publish)
        except ApeException as e:
            raise ChainCallFailed(
                contract=contract_name, method="deploy", args=args, reason=str(e)
            ) from e
        receipt = instance.receipt
        return DeployedContract(
            address=to_checksum_address(instance.address),
            abi=_get_abi(instance),
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
        )
