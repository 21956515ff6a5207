import pytest

from protocol_deployment.modules import ClashReport
from protocol_deployment.multisig import MultisigOrchestrator
from protocol_deployment.upgrades import UpgradeRouter
from tests.fake_chain import (
    FakeChain,
    FakeGovernor,
    FakeModule,
    FakeModulesProxy,
    FakeMultiSigWallet,
    FakeProxy,
)

REQUIRED_CONFIRMATIONS = 2

STAKING_MODULE_FRAGMENTS = [
    "function stake(uint96 amount, uint256 until)",
    "function withdraw(uint96 amount, address receiver)",
]

VESTING_MODULE_FRAGMENTS = [
    "function createVesting(address owner, uint256 amount)",
    "function getVesting(address owner) view returns (address)",
]


# Utility functions
def clash_result(modules=(), module_selectors=(), reserved_selectors=(), padding=0):
    """Builds a raw checkClashingFuncSelectors result, zero-padded like the registry does."""
    zero_address = "0x" + "00" * 20
    zero_selector = b"\x00" * 4
    return (
        list(modules) + [zero_address] * padding,
        list(module_selectors) + [zero_selector] * padding,
        list(reserved_selectors) + [zero_selector] * padding,
    )


class StaticClashClient:
    """Answers checkClashingFuncSelectors with a canned result."""

    def __init__(self, result):
        self.result = result
        self.calls = list()

    def call(self, contract, method, *args):
        self.calls.append((contract, method, args))
        return self.result


def report_of(*args, **kwargs) -> ClashReport:
    return ClashReport.from_call_result(clash_result(*args, **kwargs))


# Fixtures
@pytest.fixture
def deployer(accounts):
    return accounts[0]


@pytest.fixture
def owners(accounts):
    return accounts[1:4]


@pytest.fixture
def outsider(accounts):
    return accounts[5]


@pytest.fixture
def fake_chain(accounts):
    return FakeChain(accounts[:10])


@pytest.fixture
def multisig(fake_chain, owners):
    return fake_chain.add(
        FakeMultiSigWallet,
        owners=[owner.address for owner in owners],
        required=REQUIRED_CONFIRMATIONS,
    )


@pytest.fixture
def orchestrator(fake_chain, multisig):
    return MultisigOrchestrator(client=fake_chain, multisig_address=multisig.address)


@pytest.fixture
def proxy(fake_chain, deployer):
    return fake_chain.add(FakeProxy, owner=deployer.address)


@pytest.fixture
def multisig_proxy(fake_chain, multisig):
    return fake_chain.add(FakeProxy, owner=multisig.address)


@pytest.fixture
def logic(fake_chain):
    return fake_chain.add(FakeModule, fragments=["function version() view returns (uint256)"])


@pytest.fixture
def modules_proxy(fake_chain, deployer):
    return fake_chain.add(FakeModulesProxy, owner=deployer.address)


@pytest.fixture
def staking_module(fake_chain):
    return fake_chain.add(FakeModule, fragments=STAKING_MODULE_FRAGMENTS)


@pytest.fixture
def vesting_module(fake_chain):
    return fake_chain.add(FakeModule, fragments=VESTING_MODULE_FRAGMENTS)


@pytest.fixture
def governor(fake_chain):
    return fake_chain.add(FakeGovernor)


@pytest.fixture
def router(fake_chain):
    return UpgradeRouter(client=fake_chain)


@pytest.fixture
def multisig_router(fake_chain, orchestrator):
    return UpgradeRouter(client=fake_chain, multisig=orchestrator)
