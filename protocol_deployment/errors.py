from typing import Any, Optional, Sequence


class DeploymentError(Exception):
    """Base class for all deployment and governance tooling failures."""


class DeploymentConfigError(DeploymentError, ValueError):
    pass


class ChainCallFailed(DeploymentError):
    """Raised when gas estimation or a transaction submission fails on chain."""

    def __init__(self, contract: str, method: str, args: Sequence[Any], reason: str):
        self.contract = contract
        self.method = method
        self.call_args = tuple(args)
        self.reason = reason
        pretty_args = ", ".join(str(arg) for arg in self.call_args)
        super().__init__(f"{contract}.{method}({pretty_args}) failed: {reason}")


class EventNotFound(DeploymentError):
    def __init__(self, event_name: str, topic: str):
        self.event_name = event_name
        self.topic = topic
        super().__init__(f"No '{event_name}' event (topic {topic}) found in receipt.")


class DecodeError(DeploymentError):
    def __init__(self, event_name: str, reason: str):
        self.event_name = event_name
        self.reason = reason
        super().__init__(f"Could not decode '{event_name}' event: {reason}")


class ReservedSelectorClash(DeploymentError):
    """The candidate module redefines a function reserved by the modules proxy itself."""

    def __init__(self, candidate: str, selectors: Sequence[str]):
        self.candidate = candidate
        self.selectors = list(selectors)
        super().__init__(
            f"Clashing function selectors of {candidate} with the modules proxy functions: "
            f"{', '.join(self.selectors)}"
        )


class MultiModuleClash(DeploymentError):
    """The candidate module clashes with more than one registered module."""

    def __init__(self, candidate: str, modules: Sequence[str]):
        self.candidate = candidate
        self.modules = list(modules)
        super().__init__(
            f"New module {candidate} can't replace multiple modules at once: "
            f"{', '.join(self.modules)}"
        )


class ProposalSubmissionFailed(DeploymentError):
    def __init__(self, governor: str, tx_hash: Optional[str], reason: str):
        self.governor = governor
        self.tx_hash = tx_hash
        super().__init__(f"Proposal submission to {governor} (tx {tx_hash}) failed: {reason}")


class MultisigExecutionFailed(DeploymentError):
    def __init__(self, multisig: str, tx_id: int):
        self.multisig = multisig
        self.tx_id = tx_id
        super().__init__(f"Execution of multisig {multisig} txId {tx_id} failed.")


class ImplementationMismatch(DeploymentError):
    def __init__(self, proxy: str, expected: str, actual: str):
        self.proxy = proxy
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Proxy {proxy} reports implementation {actual} after upgrade, expected {expected}."
        )
