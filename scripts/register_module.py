#!/usr/bin/python3

from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from protocol_deployment.chain import ApeChainClient
from protocol_deployment.constants import STAKING_MODULES
from protocol_deployment.networks import current_network_tier
from protocol_deployment.options import (
    auto_option,
    force_multisig_option,
    multisig_address_option,
    registry_option,
)
from protocol_deployment.registry import get_address
from protocol_deployment.types import ChecksumAddress
from scripts.utils import echo_outcome, get_router


@click.command(cls=ConnectedProviderCommand, name="register-module")
@account_option()
@network_option(required=True)
@auto_option
@force_multisig_option
@registry_option
@multisig_address_option
@click.option(
    "--modules-proxy",
    "-p",
    help="Address of the modules proxy.",
    type=ChecksumAddress(),
    required=True,
)
@click.option(
    "--module",
    "-mod",
    help="Address of a deployed module to register; defaults to all staking modules.",
    type=ChecksumAddress(),
    multiple=True,
)
def cli(account, network, auto, force_multisig, registry, multisig, modules_proxy, module):
    """Register modules behind the modules proxy, replacing the modules they clash with."""
    click.echo(f"Connected to {network.name} network.")
    registry_filepath = Path(registry)
    if not module:
        chain_id = networks.provider.network.chain_id
        module = [get_address(registry_filepath, chain_id, name) for name in STAKING_MODULES]

    client = ApeChainClient(autosign=auto)
    router = get_router(
        client, registry_filepath, multisig=multisig, force_multisig=force_multisig
    )
    tier = current_network_tier()
    for candidate in module:
        outcome = router.register_module(
            modules_proxy=modules_proxy, candidate=candidate, tier=tier, deployer=account
        )
        echo_outcome(outcome)


if __name__ == "__main__":
    cli()
