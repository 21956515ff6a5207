import click

from protocol_deployment.constants import ARTIFACTS_DIR
from protocol_deployment.types import ChecksumAddress, MinInt

multisig_option = click.option(
    "--multisig",
    "-m",
    help="Address of the multisig wallet.",
    type=ChecksumAddress(),
    required=True,
)

tx_id_option = click.option(
    "--tx-id",
    "-t",
    help="ID of the multisig transaction.",
    type=MinInt(0),
    required=True,
)

auto_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)

force_multisig_option = click.option(
    "--force-multisig",
    help="Route through the multisig regardless of the network tier.",
    is_flag=True,
)

multisig_address_option = click.option(
    "--multisig",
    "-m",
    help="Multisig wallet address; defaults to the registry entry.",
    type=ChecksumAddress(),
    default=None,
)

registry_option = click.option(
    "--registry",
    "-r",
    help="Deployment registry file.",
    type=click.Path(dir_okay=False),
    default=str(ARTIFACTS_DIR / "deployments.json"),
)
