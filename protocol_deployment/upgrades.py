from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple, Optional, Sequence, Tuple

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from hexbytes import HexBytes
from eth_typing import ABI

from protocol_deployment.abi import abi_signature, get_abi_entry
from protocol_deployment.chain import ChainClient, DeployedContract, Sender
from protocol_deployment.constants import IMPLEMENTATION_SUFFIX
from protocol_deployment.errors import DeploymentConfigError, ImplementationMismatch
from protocol_deployment.governance import GovernanceProposal
from protocol_deployment.interfaces import MODULES_PROXY_ABI, UPGRADABLE_PROXY_ABI
from protocol_deployment.modules import get_clash_report, resolve_module_replacement
from protocol_deployment.multisig import MultisigOrchestrator
from protocol_deployment.networks import NetworkTier
from protocol_deployment.registry import RegistryEntry, get_entry, update_registry


class UpgradeStatus(Enum):
    APPLIED = "applied"
    PENDING_MULTISIG_SIGNATURES = "pending-multisig-signatures"
    REQUIRES_GOVERNANCE_PROPOSAL = "requires-governance-proposal"
    UNCHANGED = "unchanged"


class PreparedCall(NamedTuple):
    """A contract call ready to be sent directly, via the multisig or via governance."""

    target: ChecksumAddress
    signature: str
    args: Tuple[Any, ...]
    data: HexBytes

    @property
    def encoded_arguments(self) -> HexBytes:
        """The call data without its 4-byte selector, as governance proposals expect it."""
        return HexBytes(self.data[4:])


class UpgradeOutcome(NamedTuple):
    status: UpgradeStatus
    target: ChecksumAddress
    implementation: ChecksumAddress
    call: Optional[PreparedCall] = None
    multisig: Optional[ChecksumAddress] = None
    tx_id: Optional[int] = None


class UpgradeRouter:
    """
    Applies proxy upgrades and module registrations along the path allowed
    by the network tier: directly on local networks, through the multisig on
    testnets (or when forced), and only signalled for governance on mainnet.
    """

    def __init__(
        self,
        client: ChainClient,
        multisig: Optional[MultisigOrchestrator] = None,
        multisig_override: bool = False,
    ):
        self.client = client
        self.multisig = multisig
        self.multisig_override = multisig_override

    def upgrade_path(self, tier: NetworkTier) -> UpgradeStatus:
        if tier is NetworkTier.TESTNET or self.multisig_override:
            return UpgradeStatus.PENDING_MULTISIG_SIGNATURES
        if tier is NetworkTier.MAINNET:
            return UpgradeStatus.REQUIRES_GOVERNANCE_PROPOSAL
        return UpgradeStatus.APPLIED

    def _check_path(self, path: UpgradeStatus) -> None:
        if path is UpgradeStatus.PENDING_MULTISIG_SIGNATURES and self.multisig is None:
            raise DeploymentConfigError("A multisig is required to route this upgrade.")

    def _prepare(self, contract: Any, abi: ABI, method: str, *args) -> PreparedCall:
        return PreparedCall(
            target=to_checksum_address(contract.address),
            signature=abi_signature(get_abi_entry(abi, method)),
            args=tuple(args),
            data=self.client.encode_call(contract, method, *args),
        )

    def _route(
        self,
        path: UpgradeStatus,
        contract: Any,
        call: PreparedCall,
        implementation: ChecksumAddress,
        deployer: Sender,
    ) -> UpgradeOutcome:
        outcome = UpgradeOutcome(
            status=path, target=call.target, implementation=implementation, call=call
        )

        if path is UpgradeStatus.PENDING_MULTISIG_SIGNATURES:
            print(f"Creating multisig tx to call {call.signature} on {call.target}...")
            tx_id = self.multisig.submit(call.target, 0, call.data, deployer)
            print(
                f">>> DONE. Requires Multisig ({self.multisig.address}) signing to execute tx <<<\n"
                ">>> DON'T PUSH DEPLOYMENTS TO THE REPO UNTIL THE MULTISIG TX "
                "IS SUCCESSFULLY SIGNED & EXECUTED <<<"
            )
            return outcome._replace(multisig=self.multisig.address, tx_id=tx_id)

        if path is UpgradeStatus.REQUIRES_GOVERNANCE_PROPOSAL:
            print(
                f">>> {call.signature} on {call.target} requires a governance proposal <<<\n"
                ">>> DON'T PUSH DEPLOYMENTS TO THE REPO UNTIL THE PROPOSAL IS EXECUTED <<<"
            )
            return outcome

        method = call.signature.split("(")[0]
        deployer = self.client.resolve_sender(deployer)
        self.client.transact(contract, method, *call.args, sender=deployer)
        return outcome

    def apply(
        self, proxy: str, new_logic: str, tier: NetworkTier, deployer: Sender
    ) -> UpgradeOutcome:
        """Points a proxy at a new logic contract along the path allowed by the tier."""
        proxy, new_logic = to_checksum_address(proxy), to_checksum_address(new_logic)
        contract = self.client.get_contract(proxy, UPGRADABLE_PROXY_ABI)
        current = to_checksum_address(self.client.call(contract, "getImplementation"))
        print(f"Current {proxy} implementation: {current}")
        if current == new_logic:
            print(f"Skipping upgrade - {new_logic} is already the implementation of {proxy}")
            return UpgradeOutcome(
                status=UpgradeStatus.UNCHANGED, target=proxy, implementation=new_logic
            )

        path = self.upgrade_path(tier)
        self._check_path(path)

        print(f"New implementation: {new_logic}")
        call = self._prepare(contract, UPGRADABLE_PROXY_ABI, "setImplementation", new_logic)
        outcome = self._route(path, contract, call, new_logic, deployer)

        if outcome.status is UpgradeStatus.APPLIED:
            actual = to_checksum_address(self.client.call(contract, "getImplementation"))
            if actual != new_logic:
                raise ImplementationMismatch(proxy=proxy, expected=new_logic, actual=actual)
            print(f">>> New implementation {actual} is set to the proxy <<<")
        return outcome

    def register_module(
        self, modules_proxy: str, candidate: str, tier: NetworkTier, deployer: Sender
    ) -> UpgradeOutcome:
        """
        Registers a module behind the modules proxy, replacing the registered
        module it clashes with. Clash errors abort before anything is sent.
        """
        modules_proxy = to_checksum_address(modules_proxy)
        candidate = to_checksum_address(candidate)
        contract = self.client.get_contract(modules_proxy, MODULES_PROXY_ABI)
        resolution = resolve_module_replacement(self.client, contract, candidate)
        if resolution.reused:
            return UpgradeOutcome(
                status=UpgradeStatus.UNCHANGED, target=modules_proxy, implementation=candidate
            )

        path = self.upgrade_path(tier)
        self._check_path(path)

        if resolution.needs_replacement:
            print(f"Replacing module {resolution.replaced} with {candidate}")
            call = self._prepare(
                contract, MODULES_PROXY_ABI, "replaceModule", resolution.replaced, candidate
            )
        else:
            print(f"Adding module {candidate}")
            call = self._prepare(contract, MODULES_PROXY_ABI, "addModule", candidate)
        outcome = self._route(path, contract, call, candidate, deployer)

        if outcome.status is UpgradeStatus.APPLIED:
            registered = get_clash_report(self.client, contract, candidate).distinct_modules
            if registered != [candidate]:
                raise ImplementationMismatch(
                    proxy=modules_proxy, expected=candidate, actual=", ".join(registered)
                )
            print(f">>> Module {candidate} is registered <<<")
        return outcome


def build_upgrade_proposal(
    outcomes: Sequence[UpgradeOutcome], description: str
) -> GovernanceProposal:
    """Bundles the calls that require governance into a single proposal."""
    calls = [
        outcome.call
        for outcome in outcomes
        if outcome.status is UpgradeStatus.REQUIRES_GOVERNANCE_PROPOSAL
    ]
    if not calls:
        raise ValueError("None of the upgrade outcomes requires a governance proposal.")
    return GovernanceProposal(
        targets=[call.target for call in calls],
        values=[0] * len(calls),
        signatures=[call.signature for call in calls],
        calldatas=[call.encoded_arguments for call in calls],
        description=description,
    )


def _get_entry(
    deployed: DeployedContract, chain_id: int, name: str, deployer: str
) -> RegistryEntry:
    return RegistryEntry(
        chain_id=chain_id,
        name=name,
        address=deployed.address,
        abi=deployed.abi,
        tx_hash=deployed.tx_hash,
        block_number=deployed.block_number,
        deployer=deployer,
    )


def deploy_with_custom_proxy(
    router: UpgradeRouter,
    deployer: Sender,
    tier: NetworkTier,
    registry_filepath: Path,
    chain_id: int,
    logic_contract: str,
    proxy_contract: str,
    logic_name: Optional[str] = None,
    proxy_name: Optional[str] = None,
    args: Sequence[Any] = (),
    proxy_args: Sequence[Any] = (),
) -> UpgradeOutcome:
    """
    Deploys a logic contract behind a proxy exposing get/setImplementation.
    The proxy is only deployed when the registry has none under its name.
    """
    client = router.client
    deployer = client.resolve_sender(deployer)
    logic_name = logic_name or logic_contract
    proxy_name = proxy_name or proxy_contract

    proxy_entry = get_entry(filepath=registry_filepath, chain_id=chain_id, name=proxy_name)
    if proxy_entry is None:
        deployed_proxy = client.deploy(proxy_contract, *proxy_args, sender=deployer)
        proxy_entry = _get_entry(deployed_proxy, chain_id, proxy_name, deployer.address)
        print(f"(i) Deployed {proxy_name} at {proxy_entry.address}")

    logic = client.deploy(logic_contract, *args, sender=deployer)
    outcome = router.apply(
        proxy=proxy_entry.address, new_logic=logic.address, tier=tier, deployer=deployer
    )

    implementation_entry = _get_entry(
        logic, chain_id, logic_name + IMPLEMENTATION_SUFFIX, deployer.address
    )
    # the logic is used through the proxy
    proxied_entry = implementation_entry._replace(
        name=logic_name, address=proxy_entry.address, implementation=logic.address
    )
    update_registry(
        filepath=registry_filepath, entries=[proxy_entry, implementation_entry, proxied_entry]
    )
    return outcome
