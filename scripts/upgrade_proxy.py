#!/usr/bin/python3

from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from protocol_deployment.chain import ApeChainClient
from protocol_deployment.networks import current_network_tier
from protocol_deployment.options import (
    auto_option,
    force_multisig_option,
    multisig_address_option,
    registry_option,
)
from protocol_deployment.upgrades import deploy_with_custom_proxy
from protocol_deployment.utils import check_plugins
from scripts.utils import echo_outcome, get_router


@click.command(cls=ConnectedProviderCommand, name="upgrade-proxy")
@account_option()
@network_option(required=True)
@auto_option
@force_multisig_option
@registry_option
@multisig_address_option
@click.option("--proxy", "-p", help="Proxy contract name.", required=True)
@click.option("--logic", "-l", help="Logic contract name to deploy.", required=True)
@click.option("--logic-name", help="Registry name of the logic contract.", default=None)
@click.option("--verify", help="Publish the source to the block explorer.", is_flag=True)
def cli(
    account, network, auto, force_multisig, registry, multisig, proxy, logic, logic_name, verify
):
    """Deploy a logic contract and point its custom proxy at it."""
    check_plugins(verify=verify)
    click.echo(f"Connected to {network.name} network.")

    registry_filepath = Path(registry)
    client = ApeChainClient(autosign=auto, publish=verify)
    router = get_router(
        client, registry_filepath, multisig=multisig, force_multisig=force_multisig
    )
    outcome = deploy_with_custom_proxy(
        router=router,
        deployer=account,
        tier=current_network_tier(),
        registry_filepath=registry_filepath,
        chain_id=networks.provider.network.chain_id,
        logic_contract=logic,
        proxy_contract=proxy,
        logic_name=logic_name,
    )
    echo_outcome(outcome)


if __name__ == "__main__":
    cli()
