#!/usr/bin/python3

from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from protocol_deployment.chain import ApeChainClient
from protocol_deployment.constants import GOVERNOR_CONTRACT_NAME
from protocol_deployment.governance import propose
from protocol_deployment.options import auto_option, registry_option
from protocol_deployment.registry import get_address
from protocol_deployment.types import ChecksumAddress, HexData, MinInt


@click.command(cls=ConnectedProviderCommand, name="propose")
@account_option()
@network_option(required=True)
@auto_option
@registry_option
@click.option(
    "--governor",
    "-g",
    type=ChecksumAddress(),
    default=None,
    help=f"Governor address; defaults to the registry's {GOVERNOR_CONTRACT_NAME} entry.",
)
@click.option("--target", "-t", type=ChecksumAddress(), multiple=True, required=True)
@click.option("--value", "-v", type=MinInt(0), multiple=True, required=True)
@click.option(
    "--signature", "-s", multiple=True, required=True, help="e.g. setImplementation(address)"
)
@click.option("--calldata", "-c", type=HexData(), multiple=True, required=True)
@click.option("--description", "-d", required=True)
def cli(
    account, network, auto, registry, governor, target, value, signature, calldata, description
):
    """Create a governance proposal."""
    click.echo(f"Connected to {network.name} network.")
    if governor is None:
        chain_id = networks.provider.network.chain_id
        governor = get_address(Path(registry), chain_id, GOVERNOR_CONTRACT_NAME)

    created = propose(
        client=ApeChainClient(autosign=auto),
        governor=governor,
        targets=target,
        values=value,
        signatures=signature,
        calldatas=calldata,
        description=description,
        proposer=account,
    )
    click.echo(f"Proposal {created.proposal_id} created.")


if __name__ == "__main__":
    cli()
