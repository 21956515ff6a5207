#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from protocol_deployment.chain import ApeChainClient
from protocol_deployment.multisig import MultisigOrchestrator
from protocol_deployment.options import auto_option, multisig_option, tx_id_option
from protocol_deployment.types import ChecksumAddress, HexData, MinInt


@click.group()
def cli():
    """Multisig wallet transaction management."""


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@auto_option
@click.option("--destination", "-d", type=ChecksumAddress(), required=True)
@click.option("--value", "-v", type=MinInt(0), default=0, help="Value in wei.")
@click.option("--data", type=HexData(), default="0x", help="Hex encoded call data.")
def submit(account, network, multisig, auto, destination, value, data):
    """Submit a new multisig transaction."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    tx_id = orchestrator.submit(destination, value, data, sender=account)
    click.echo(f"Submitted multisig txId {tx_id}.")


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@tx_id_option
@auto_option
def confirm(account, network, multisig, tx_id, auto):
    """Confirm (sign) a multisig transaction."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    orchestrator.confirm(tx_id, sender=account)


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@tx_id_option
@auto_option
def revoke(account, network, multisig, tx_id, auto):
    """Revoke a confirmation of a multisig transaction."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    orchestrator.revoke(tx_id, sender=account)


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@tx_id_option
@auto_option
def execute(account, network, multisig, tx_id, auto):
    """Execute a confirmed multisig transaction."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    orchestrator.execute(tx_id, sender=account)


@cli.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@multisig_option
@tx_id_option
def check(network, multisig, tx_id):
    """Print the status of a multisig transaction."""
    click.echo(f"Connected to {network.name} network.")
    MultisigOrchestrator(ApeChainClient(), multisig).report(tx_id)


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@auto_option
@click.option("--owner", "-o", type=ChecksumAddress(), required=True)
def add_owner(account, network, multisig, auto, owner):
    """Create a multisig transaction adding a wallet owner."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    if orchestrator.is_owner(owner):
        raise click.BadParameter(f"{owner} is already an owner of {multisig}")
    orchestrator.add_owner(owner, sender=account)


@cli.command(cls=ConnectedProviderCommand)
@account_option()
@network_option(required=True)
@multisig_option
@auto_option
@click.option("--owner", "-o", type=ChecksumAddress(), required=True)
def remove_owner(account, network, multisig, auto, owner):
    """Create a multisig transaction removing a wallet owner."""
    click.echo(f"Connected to {network.name} network.")
    orchestrator = MultisigOrchestrator(ApeChainClient(autosign=auto), multisig)
    if not orchestrator.is_owner(owner):
        raise click.BadParameter(f"{owner} is not an owner of {multisig}")
    orchestrator.remove_owner(owner, sender=account)


if __name__ == "__main__":
    cli()
