"""
Shared fixtures: identities in different organizations, a fixed invocation
clock, and helpers that run contract operations the way the API does.
"""

from datetime import datetime, timezone

import pytest

from core.context import ClientIdentity, TransactionContext
from core.exceptions import Conflict
from core.services import contract, invoke

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def approver() -> ClientIdentity:
    return ClientIdentity(id="x509::CN=central-bank::O=Org1", msp_id="Org1MSP")


@pytest.fixture
def alice() -> ClientIdentity:
    return ClientIdentity(id="x509::CN=alice::O=Org2", msp_id="Org2MSP")


@pytest.fixture
def bob() -> ClientIdentity:
    return ClientIdentity(id="x509::CN=bob::O=Org3", msp_id="Org3MSP")


@pytest.fixture
def carol() -> ClientIdentity:
    return ClientIdentity(id="x509::CN=carol::O=Org2", msp_id="Org2MSP")


@pytest.fixture
def call(db):
    """Run one atomic invocation; `at` sets the transaction timestamp."""
    def _call(identity, operation, *args, at=T0):
        return invoke(identity, operation, *args, timestamp=at)
    return _call


@pytest.fixture
def ctx_for(db):
    """Raw context for exercising component methods outside the facade."""
    def _ctx(identity, at=T0):
        return TransactionContext.new(identity, at)
    return _ctx


@pytest.fixture
def ledger():
    return contract.ledger


@pytest.fixture
def fund(call, approver):
    """Give `identity` an account holding `amount` more tokens, via order/approve/execute."""
    def _fund(identity, amount):
        try:
            call(identity, "CreateAccount")
        except Conflict:
            pass
        call(identity, "OrderMint", amount)
        call(approver, "ApproveMint", identity.id)
        call(identity, "ExecuteMint", amount)
    return _fund
