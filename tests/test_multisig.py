import pytest
from hexbytes import HexBytes

from protocol_deployment.abi import event_topic
from protocol_deployment.errors import ChainCallFailed, MultisigExecutionFailed
from protocol_deployment.interfaces import EXECUTION_FAILURE_EVENT
from protocol_deployment.multisig import MultisigTransaction, with_gas_margin
from tests.fake_chain import FakeMultiSigWallet

NEW_IMPLEMENTATION = "0x" + "11" * 20


@pytest.fixture
def upgrade_data(fake_chain, multisig_proxy, logic):
    return fake_chain.encode_call(multisig_proxy, "setImplementation", logic.address)


@pytest.mark.parametrize(
    "estimate,limit",
    [(100_000, 130_000), (100_001, 130_001), (5, 7), (0, 0)],
)
def test_gas_margin(estimate, limit):
    assert with_gas_margin(estimate) == limit


def test_submit(fake_chain, orchestrator, multisig_proxy, upgrade_data, owners):
    fake_chain.gas_estimates["submitTransaction"] = 100_000

    tx_id = orchestrator.submit(multisig_proxy.address, 0, upgrade_data, owners[0])
    assert tx_id == 0

    (transaction,) = fake_chain.sent
    assert transaction.method == "submitTransaction"
    assert transaction.gas_limit == 130_000
    assert transaction.sender == owners[0].address

    status = orchestrator.status(tx_id)
    assert status == MultisigTransaction(
        tx_id=0,
        destination=multisig_proxy.address,
        value=0,
        data=HexBytes(upgrade_data),
        confirmation_count=1,
        executed=False,
        confirmations=[owners[0].address],
    )
    assert str(status).startswith("TX { ID: 0, Data: 0x")


def test_submit_by_address(orchestrator, multisig_proxy, upgrade_data, owners):
    assert orchestrator.submit(multisig_proxy.address, 0, upgrade_data, owners[1].address) == 0
    assert orchestrator.status(0).confirmations == [owners[1].address]


def test_confirm_reaching_threshold_executes(
    fake_chain, orchestrator, multisig_proxy, logic, upgrade_data, owners
):
    tx_id = orchestrator.submit(multisig_proxy.address, 0, upgrade_data, owners[0])
    assert multisig_proxy.getImplementation() != logic.address

    fake_chain.gas_estimates["confirmTransaction"] = 200_000
    transaction = orchestrator.confirm(tx_id, owners[1])

    assert fake_chain.sent[-1].gas_limit == 260_000
    assert transaction.executed
    assert transaction.confirmation_count == 2
    assert multisig_proxy.getImplementation() == logic.address


def test_execute_below_threshold_is_a_noop(
    fake_chain, orchestrator, multisig_proxy, logic, upgrade_data, owners
):
    tx_id = orchestrator.submit(multisig_proxy.address, 0, upgrade_data, owners[0])
    transaction = orchestrator.execute(tx_id, owners[0])

    assert fake_chain.sent_methods() == ["submitTransaction", "executeTransaction"]
    assert not transaction.executed
    assert multisig_proxy.getImplementation() != logic.address


def test_revoke_has_no_gas_margin(fake_chain, orchestrator, multisig_proxy, upgrade_data, owners):
    tx_id = orchestrator.submit(multisig_proxy.address, 0, upgrade_data, owners[0])
    transaction = orchestrator.revoke(tx_id, owners[0])

    assert fake_chain.sent[-1].method == "revokeConfirmation"
    assert fake_chain.sent[-1].gas_limit is None
    assert transaction.confirmation_count == 0
    assert transaction.confirmations == []


def test_failed_inner_call_raises(fake_chain, orchestrator, proxy, logic, owners):
    # the proxy is owned by the deployer, so the multisig call reverts
    data = fake_chain.encode_call(proxy, "setImplementation", logic.address)
    tx_id = orchestrator.submit(proxy.address, 0, data, owners[0])

    transaction = orchestrator.confirm(tx_id, owners[1])
    assert not transaction.executed

    with pytest.raises(MultisigExecutionFailed) as exc_info:
        orchestrator.execute(tx_id, owners[0])
    assert exc_info.value.tx_id == tx_id
    assert exc_info.value.multisig == orchestrator.address
    assert proxy.getImplementation() != logic.address


def test_nested_wallet_failure_is_not_raised(
    fake_chain, orchestrator, multisig, proxy, logic, owners
):
    inner = fake_chain.add(FakeMultiSigWallet, owners=[owners[0].address], required=1)
    # the proxy is owned by the deployer, so the inner wallet's call reverts
    upgrade = fake_chain.encode_call(proxy, "setImplementation", logic.address)
    data = fake_chain.encode_call(inner, "submitTransaction", proxy.address, 0, upgrade)
    tx_id = orchestrator.submit(inner.address, 0, data, owners[0])

    # the outer wallet is not an inner owner yet, so the auto-execution fails
    assert not orchestrator.confirm(tx_id, owners[1]).executed
    inner.owners.append(multisig.address)

    transaction = orchestrator.execute(tx_id, owners[0])
    assert transaction.executed
    assert inner.transactions(0)[3] is False
    assert proxy.getImplementation() != logic.address

    failures = [
        log
        for log in fake_chain.log_history
        if log["topics"][0] == event_topic(EXECUTION_FAILURE_EVENT)
        and log["address"] == inner.address
    ]
    assert len(failures) == 1


def test_non_owner_cannot_submit(orchestrator, multisig_proxy, upgrade_data, outsider):
    with pytest.raises(ChainCallFailed, match="is not an owner") as exc_info:
        orchestrator.submit(multisig_proxy.address, 0, upgrade_data, outsider)
    assert exc_info.value.method == "submitTransaction"


def test_failed_estimate_sends_nothing(fake_chain, orchestrator, owners):
    fake_chain.failing_estimates.add("confirmTransaction")
    with pytest.raises(ChainCallFailed, match="execution reverted"):
        orchestrator.confirm(0, owners[0])
    assert fake_chain.sent == []


def test_confirm_unknown_transaction(orchestrator, owners):
    with pytest.raises(ChainCallFailed, match="does not exist"):
        orchestrator.confirm(42, owners[0])


def test_add_owner(orchestrator, multisig, owners, outsider):
    assert not orchestrator.is_owner(outsider.address)

    tx_id = orchestrator.add_owner(outsider.address, owners[0])
    pending = orchestrator.status(tx_id)
    assert pending.destination == multisig.address
    assert not pending.executed
    assert not orchestrator.is_owner(outsider.address)

    orchestrator.confirm(tx_id, owners[2])
    assert orchestrator.is_owner(outsider.address)


def test_remove_owner(orchestrator, owners):
    tx_id = orchestrator.remove_owner(owners[2].address, owners[0])
    orchestrator.confirm(tx_id, owners[1])

    assert orchestrator.status(tx_id).executed
    assert not orchestrator.is_owner(owners[2].address)
    assert orchestrator.is_owner(owners[1].address)
