from enum import Enum
from typing import Any, List, NamedTuple, Optional

from ape.utils import ZERO_ADDRESS
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex
from hexbytes import HexBytes

from protocol_deployment.chain import ChainClient
from protocol_deployment.constants import EMPTY_SELECTOR
from protocol_deployment.errors import MultiModuleClash, ReservedSelectorClash


class ClashReport(NamedTuple):
    clashing_modules: List[ChecksumAddress]
    clashing_module_selectors: List[str]
    clashing_reserved_selectors: List[str]

    @classmethod
    def from_call_result(cls, result: Any) -> "ClashReport":
        """
        Builds a report from checkClashingFuncSelectors output, dropping the
        zero-address and zero-selector padding the registry returns.
        """
        modules, module_selectors, reserved_selectors = result

        def _selectors(values) -> List[str]:
            hex_values = [to_hex(HexBytes(value)) for value in values]
            return [value for value in hex_values if value != EMPTY_SELECTOR]

        return cls(
            clashing_modules=[
                to_checksum_address(module) for module in modules if module != ZERO_ADDRESS
            ],
            clashing_module_selectors=_selectors(module_selectors),
            clashing_reserved_selectors=_selectors(reserved_selectors),
        )

    @property
    def distinct_modules(self) -> List[ChecksumAddress]:
        return list(dict.fromkeys(self.clashing_modules))


class Resolution(Enum):
    NO_REPLACEMENT = "no-replacement"
    REPLACE = "replace"


class ModuleResolution(NamedTuple):
    kind: Resolution
    candidate: ChecksumAddress
    replaced: Optional[ChecksumAddress] = None
    reused: bool = False

    @property
    def needs_replacement(self) -> bool:
        return self.kind is Resolution.REPLACE


def get_clash_report(client: ChainClient, modules_proxy: Any, candidate: str) -> ClashReport:
    result = client.call(
        modules_proxy, "checkClashingFuncSelectors", to_checksum_address(candidate)
    )
    return ClashReport.from_call_result(result)


def resolve_module_replacement(
    client: ChainClient, modules_proxy: Any, candidate: str
) -> ModuleResolution:
    """Determines which registered module, if any, the candidate module replaces."""
    candidate = to_checksum_address(candidate)
    report = get_clash_report(client, modules_proxy, candidate)

    if report.clashing_reserved_selectors:
        raise ReservedSelectorClash(
            candidate=candidate, selectors=report.clashing_reserved_selectors
        )

    clashing = report.distinct_modules
    if not clashing:
        return ModuleResolution(kind=Resolution.NO_REPLACEMENT, candidate=candidate)

    if len(clashing) > 1:
        print(f"New module {candidate} can't replace multiple modules at once:")
        for module in clashing:
            print(f"\t{module}")
        raise MultiModuleClash(candidate=candidate, modules=clashing)

    (replaced,) = clashing
    if replaced == candidate:
        print(f"Skipping module {candidate} replacement - the module is reused")
        return ModuleResolution(kind=Resolution.NO_REPLACEMENT, candidate=candidate, reused=True)

    return ModuleResolution(kind=Resolution.REPLACE, candidate=candidate, replaced=replaced)
