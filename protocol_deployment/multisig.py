from typing import Any, List, NamedTuple

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex
from hexbytes import HexBytes

from protocol_deployment.chain import ChainClient, Sender
from protocol_deployment.constants import GAS_ESTIMATE_MARGIN
from protocol_deployment.errors import MultisigExecutionFailed
from protocol_deployment.events import parse_event_from_receipt, parse_events_from_receipt
from protocol_deployment.interfaces import (
    EXECUTION_FAILURE_EVENT,
    MULTISIG_WALLET_ABI,
    SUBMISSION_EVENT,
)


class MultisigTransaction(NamedTuple):
    """A transaction stored in the multisig wallet, as last read from chain."""

    tx_id: int
    destination: ChecksumAddress
    value: int
    data: HexBytes
    confirmation_count: int
    executed: bool
    confirmations: List[ChecksumAddress]

    def __str__(self) -> str:
        return (
            f"TX {{ ID: {self.tx_id}, Data: {to_hex(self.data)}, Value: {self.value}, "
            f"Destination: {self.destination}, Confirmations: {self.confirmation_count}, "
            f"Executed: {self.executed}, Confirmed by: {self.confirmations} }}"
        )


def with_gas_margin(gas_estimate: int) -> int:
    """Applies the safety margin to a gas estimate, rounding half up."""
    return int(gas_estimate * GAS_ESTIMATE_MARGIN + 0.5)


class MultisigOrchestrator:
    """
    Drives the submit -> confirm -> execute lifecycle of transactions
    held by a multisig wallet. Every mutating operation submits exactly
    one transaction and reports the resulting transaction status.
    """

    def __init__(self, client: ChainClient, multisig_address: str):
        self.client = client
        self.address = to_checksum_address(multisig_address)
        self.contract = client.get_contract(self.address, MULTISIG_WALLET_ABI)

    def _transact_with_margin(self, method: str, *args, sender: Any) -> Any:
        gas_estimate = self.client.estimate_gas(self.contract, method, *args, sender=sender)
        return self.client.transact(
            self.contract, method, *args, sender=sender, gas_limit=with_gas_margin(gas_estimate)
        )

    def submit(self, destination: str, value: int, data: bytes, sender: Sender) -> int:
        """Submits a new transaction to the multisig and returns its transaction id."""
        sender = self.client.resolve_sender(sender)
        destination = to_checksum_address(destination)
        receipt = self._transact_with_margin(
            "submitTransaction", destination, value, HexBytes(data), sender=sender
        )
        submission = parse_event_from_receipt(receipt, SUBMISSION_EVENT, address=self.address)
        tx_id = int(submission["transactionId"].value)
        print(f"(i) Multisig {self.address} transaction submitted with txId {tx_id}")
        self.report(tx_id)
        return tx_id

    def confirm(self, tx_id: int, sender: Sender) -> MultisigTransaction:
        sender = self.client.resolve_sender(sender)
        print(f"Signing multisig txId: {tx_id}")
        self._transact_with_margin("confirmTransaction", tx_id, sender=sender)
        print("Signed. Details:")
        return self.report(tx_id)

    def revoke(self, tx_id: int, sender: Sender) -> MultisigTransaction:
        sender = self.client.resolve_sender(sender)
        print(f"Revoking confirmation of txId {tx_id}...")
        self.client.transact(self.contract, "revokeConfirmation", tx_id, sender=sender)
        print(f"Confirmation of txId {tx_id} revoked. Details:")
        return self.report(tx_id)

    def execute(self, tx_id: int, sender: Sender) -> MultisigTransaction:
        """
        Executes a confirmed transaction. The wallet does not revert when the
        inner call fails; it emits ExecutionFailure instead, which is raised here.
        Failures emitted by other contracts (e.g. a nested wallet) are ignored.
        """
        sender = self.client.resolve_sender(sender)
        print(f"Executing multisig txId {tx_id}...")
        receipt = self._transact_with_margin("executeTransaction", tx_id, sender=sender)
        failures = parse_events_from_receipt(
            receipt, EXECUTION_FAILURE_EVENT, address=self.address
        )
        if any(int(failure["transactionId"].value) == tx_id for failure in failures):
            self.report(tx_id)
            raise MultisigExecutionFailed(multisig=self.address, tx_id=tx_id)
        print("DONE. Details:")
        return self.report(tx_id)

    def status(self, tx_id: int) -> MultisigTransaction:
        destination, value, data, executed = self.client.call(
            self.contract, "transactions", tx_id
        )
        count = self.client.call(self.contract, "getConfirmationCount", tx_id)
        confirmations = self.client.call(self.contract, "getConfirmations", tx_id)
        return MultisigTransaction(
            tx_id=tx_id,
            destination=to_checksum_address(destination),
            value=int(value),
            data=HexBytes(data),
            confirmation_count=int(count),
            executed=bool(executed),
            confirmations=[to_checksum_address(address) for address in confirmations],
        )

    def report(self, tx_id: int) -> MultisigTransaction:
        transaction = self.status(tx_id)
        print(transaction)
        return transaction

    #
    # Owners
    #

    def is_owner(self, address: str) -> bool:
        return bool(self.client.call(self.contract, "isOwner", to_checksum_address(address)))

    def add_owner(self, owner: str, sender: Sender) -> int:
        """Creates a multisig transaction adding a new wallet owner."""
        owner = to_checksum_address(owner)
        data = self.client.encode_call(self.contract, "addOwner", owner)
        print(f"Creating multisig tx to add new owner {owner}...")
        tx_id = self.submit(self.address, 0, data, sender)
        print(f">>> DONE. Requires Multisig ({self.address}) signing to execute tx <<<")
        return tx_id

    def remove_owner(self, owner: str, sender: Sender) -> int:
        """Creates a multisig transaction removing a wallet owner."""
        owner = to_checksum_address(owner)
        data = self.client.encode_call(self.contract, "removeOwner", owner)
        print(f"Creating multisig tx to remove owner {owner}...")
        tx_id = self.submit(self.address, 0, data, sender)
        print(f">>> DONE. Requires Multisig ({self.address}) signing to execute tx <<<")
        return tx_id
