"""
Per-invocation context handed to every contract operation.

Holds everything the host platform supplies for one call: the state adapter,
the caller identity, the transaction id and the transaction timestamp.
Nothing here survives the invocation.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.adapters.state_adapter import StateAdapter
from core.constants import peer_mspid


@dataclass(frozen=True)
class ClientIdentity:
    """Caller principal and its organization (MSP id)."""
    id: str
    msp_id: str


@dataclass
class TransactionContext:
    identity: ClientIdentity
    stub: StateAdapter
    tx_id: str
    timestamp: datetime
    peer_msp_id: str = field(default_factory=peer_mspid)

    @property
    def client_id(self) -> str:
        return self.identity.id

    @property
    def msp_id(self) -> str:
        return self.identity.msp_id

    @staticmethod
    def new(identity: ClientIdentity, timestamp: Optional[datetime] = None) -> "TransactionContext":
        """
        Open a context for a fresh invocation. timestamp defaults to now (UTC).
        """
        tx_id = uuid.uuid4().hex
        return TransactionContext(
            identity=identity,
            stub=StateAdapter(tx_id),
            tx_id=tx_id,
            timestamp=timestamp or timezone.now(),
        )
