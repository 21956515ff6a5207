from pathlib import Path
from typing import Optional

import click
from ape import networks
from eth_utils import to_hex

from protocol_deployment.chain import ApeChainClient
from protocol_deployment.constants import MULTISIG_CONTRACT_NAME
from protocol_deployment.multisig import MultisigOrchestrator
from protocol_deployment.networks import (
    NetworkTier,
    current_network_tier,
    multisig_override_from_env,
)
from protocol_deployment.registry import get_address
from protocol_deployment.upgrades import UpgradeOutcome, UpgradeRouter, UpgradeStatus


def get_router(
    client: ApeChainClient,
    registry_filepath: Path,
    multisig: Optional[str] = None,
    force_multisig: bool = False,
) -> UpgradeRouter:
    """Builds an upgrade router for the connected network."""
    tier = current_network_tier()
    force_multisig = force_multisig or multisig_override_from_env()
    click.echo(f"Network tier: {tier.value}")

    orchestrator = None
    if multisig or force_multisig or tier is NetworkTier.TESTNET:
        chain_id = networks.provider.network.chain_id
        multisig = multisig or get_address(registry_filepath, chain_id, MULTISIG_CONTRACT_NAME)
        orchestrator = MultisigOrchestrator(client, multisig)

    return UpgradeRouter(client, multisig=orchestrator, multisig_override=force_multisig)


def echo_outcome(outcome: UpgradeOutcome) -> None:
    click.echo(f"Outcome: {outcome.status.value} ({outcome.target} -> {outcome.implementation})")
    if outcome.status is UpgradeStatus.PENDING_MULTISIG_SIGNATURES:
        click.echo(f"Multisig {outcome.multisig} txId: {outcome.tx_id}")
    elif outcome.status is UpgradeStatus.REQUIRES_GOVERNANCE_PROPOSAL:
        call = outcome.call
        click.echo(
            f"Proposal action: --target {call.target} --value 0 "
            f"--signature '{call.signature}' --calldata {to_hex(call.encoded_arguments)}"
        )
