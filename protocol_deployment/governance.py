from typing import Any, List, NamedTuple, Sequence

from eth_utils import to_checksum_address, to_hex
from hexbytes import HexBytes

from protocol_deployment.chain import ChainClient, Sender
from protocol_deployment.errors import EventNotFound, ProposalSubmissionFailed
from protocol_deployment.events import ParsedEvent, parse_event_from_receipt
from protocol_deployment.interfaces import GOVERNOR_ABI, PROPOSAL_CREATED_EVENT

BANNER = "=" * 61


class GovernanceProposal(NamedTuple):
    """
    A batch of calls to be executed by the governor once voted.
    The four sequences must have equal lengths; the governor reverts otherwise.
    """

    targets: List[str]
    values: List[int]
    signatures: List[str]
    calldatas: List[bytes]
    description: str


class CreatedProposal(NamedTuple):
    proposal_id: int
    event: ParsedEvent
    receipt: Any


def _format_calldatas(calldatas: Sequence[bytes]) -> List[str]:
    return [to_hex(HexBytes(data)) for data in calldatas]


def _print_proposal(proposer: str, governor: str, proposal: GovernanceProposal) -> None:
    print("CREATING PROPOSAL:")
    print(
        BANNER,
        f"Proposal creator:    {proposer}",
        f"Governor Address:    {governor}",
        f"Targets:             {proposal.targets}",
        f"Values:              {proposal.values}",
        f"Signatures:          {proposal.signatures}",
        f"Data:                {_format_calldatas(proposal.calldatas)}",
        f"Description:         {proposal.description}",
        BANNER,
        sep="\n",
    )


def _print_created(governor: str, event: ParsedEvent) -> None:
    print("PROPOSAL CREATED:")
    print(
        BANNER,
        f"Governor:            {governor}",
        f"Proposal Id:         {event['id'].value}",
        f"Proposer:            {event['proposer'].value}",
        f"Targets:             {event['targets'].value}",
        f"Values:              {event['values'].value}",
        f"Signatures:          {event['signatures'].value}",
        f"Data:                {_format_calldatas(event['calldatas'].value)}",
        f"StartBlock:          {event['startBlock'].value}",
        f"EndBlock:            {event['endBlock'].value}",
        f"Description:         {event['description'].value}",
        BANNER,
        sep="\n",
    )


class ProposalSubmitter:
    def __init__(self, client: ChainClient):
        self.client = client

    def propose(
        self, governor: str, proposal: GovernanceProposal, proposer: Sender
    ) -> CreatedProposal:
        """Submits a proposal and returns its id together with the decoded creation event."""
        governor = to_checksum_address(governor)
        proposer = self.client.resolve_sender(proposer)
        contract = self.client.get_contract(governor, GOVERNOR_ABI)

        _print_proposal(proposer=proposer.address, governor=governor, proposal=proposal)
        receipt = self.client.transact(
            contract,
            "propose",
            [to_checksum_address(target) for target in proposal.targets],
            list(proposal.values),
            list(proposal.signatures),
            [HexBytes(data) for data in proposal.calldatas],
            proposal.description,
            sender=proposer,
        )

        try:
            event = parse_event_from_receipt(receipt, PROPOSAL_CREATED_EVENT)
        except EventNotFound as e:
            tx_hash = getattr(receipt, "txn_hash", None)
            raise ProposalSubmissionFailed(
                governor=governor, tx_hash=tx_hash, reason=str(e)
            ) from e

        _print_created(governor=governor, event=event)
        return CreatedProposal(proposal_id=int(event["id"].value), event=event, receipt=receipt)


def propose(
    client: ChainClient,
    governor: str,
    targets: Sequence[str],
    values: Sequence[int],
    signatures: Sequence[str],
    calldatas: Sequence[bytes],
    description: str,
    proposer: Sender,
) -> CreatedProposal:
    proposal = GovernanceProposal(
        targets=list(targets),
        values=list(values),
        signatures=list(signatures),
        calldatas=list(calldatas),
        description=description,
    )
    submitter = ProposalSubmitter(client)
    return submitter.propose(governor=governor, proposal=proposal, proposer=proposer)
