import pytest

from core.constants import MINT_BURN_KEY, STATE_APPROVED, STATE_ORDERED, STATE_REJECTED
from core.exceptions import InvalidArgument, NotFound, FailedPrecondition, PermissionDenied
from core.records import OrderTable
from host_stub.models import WorldState

pytestmark = pytest.mark.django_db


def _table():
    row = WorldState.objects.get(key=MINT_BURN_KEY)
    return OrderTable.from_bytes(bytes(row.value))


def test_mint_order_full_cycle(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 100)
    assert call(approver, "GetMintOrders")[alice.id].state == STATE_ORDERED

    call(approver, "ApproveMint", alice.id)
    assert call(alice, "GetMintOrder").state == STATE_APPROVED
    # approved orders are no longer pending
    assert alice.id not in call(approver, "GetMintOrders")

    assert call(alice, "ExecuteMint", 100) == 100
    assert call(alice, "ClientAccountBalance") == 100
    assert call(alice, "TotalSupply") == 100
    assert alice.id not in _table().orders
    with pytest.raises(NotFound):
        call(alice, "GetMintOrder")


def test_order_requires_account(call, alice):
    with pytest.raises(NotFound):
        call(alice, "OrderMint", 10)


def test_order_rejects_non_positive_amount(call, alice):
    call(alice, "CreateAccount")
    with pytest.raises(InvalidArgument):
        call(alice, "OrderBurn", 0)


def test_execute_needs_exact_approved_amount(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 100)
    call(approver, "ApproveMint", alice.id)

    with pytest.raises(FailedPrecondition):
        call(alice, "ExecuteMint", 99)
    assert call(alice, "ClientAccountBalance") == 0
    assert call(alice, "GetMintOrder").state == STATE_APPROVED


def test_execute_before_approval(call, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    with pytest.raises(FailedPrecondition):
        call(alice, "ExecuteMint", 10)


def test_rejected_order_cannot_be_executed_or_decided_again(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    call(approver, "RejectMint", alice.id)

    assert call(alice, "GetMintOrder").state == STATE_REJECTED
    with pytest.raises(FailedPrecondition):
        call(alice, "ExecuteMint", 10)
    with pytest.raises(FailedPrecondition):
        call(approver, "ApproveMint", alice.id)


def test_new_order_overwrites_previous(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    call(approver, "ApproveMint", alice.id)
    call(alice, "OrderBurn", 4)

    with pytest.raises(NotFound):
        call(alice, "GetMintOrder")
    entry = call(alice, "GetBurnOrder")
    assert (entry.kind, entry.amount, entry.state) == ("Burn", 4, STATE_ORDERED)


def test_only_approver_decides_and_lists(call, alice, bob):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    with pytest.raises(PermissionDenied):
        call(bob, "ApproveMint", alice.id)
    with pytest.raises(PermissionDenied):
        call(bob, "RejectMint", alice.id)
    with pytest.raises(PermissionDenied):
        call(bob, "GetMintOrders")


def test_decide_on_wrong_kind(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    with pytest.raises(NotFound):
        call(approver, "ApproveBurn", alice.id)
    with pytest.raises(NotFound):
        call(approver, "ApproveMint", "x509::CN=nobody")


def test_pending_lists_split_by_kind(call, approver, alice, bob, carol):
    for identity in (alice, bob, carol):
        call(identity, "CreateAccount")
    call(alice, "OrderMint", 10)
    call(bob, "OrderBurn", 5)
    call(carol, "OrderMint", 7)

    mints = call(approver, "GetMintOrders")
    burns = call(approver, "GetBurnOrders")
    assert sorted(mints) == sorted([alice.id, carol.id])
    assert list(burns) == [bob.id]
    assert burns[bob.id].to_dict() == {"mintburn": "Burn", "amount": 5, "state": STATE_ORDERED}


def test_burn_order_for_minter_org(call, fund, approver):
    fund(approver, 50)
    call(approver, "OrderBurn", 20)
    call(approver, "ApproveBurn", approver.id)
    call(approver, "ExecuteBurn", 20)

    assert call(approver, "ClientAccountBalance") == 30
    assert call(approver, "TotalSupply") == 30


def test_burn_order_outside_minter_org_rolls_back(call, fund, approver, alice):
    fund(alice, 50)
    call(alice, "OrderBurn", 20)
    call(approver, "ApproveBurn", alice.id)

    with pytest.raises(PermissionDenied):
        call(alice, "ExecuteBurn", 20)
    # the order survives the failed execution
    assert call(alice, "GetBurnOrder").state == STATE_APPROVED
    assert call(alice, "ClientAccountBalance") == 50


def test_table_version_bumps_on_every_write(call, approver, alice):
    call(alice, "CreateAccount")
    call(alice, "OrderMint", 10)
    first = _table().version
    call(approver, "ApproveMint", alice.id)
    call(alice, "ExecuteMint", 10)
    assert _table().version == first + 2
