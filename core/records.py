"""
Records persisted in the host world state.

Each record knows its JSON shape (field names match what clients and the
event stream see) and round-trips through bytes for the state adapter.
Bid commitments are SHA-256 over RFC 8785 canonical JSON, so any peer that
holds the plaintext bid recomputes the same hash.
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import jcs

from core.constants import AUCTION_ITEM, AUCTION_OPEN


def canonicalize(obj: dict) -> bytes:
    return jcs.canonicalize(obj)


def canonical_hash(obj: dict) -> str:
    """Lowercase hex SHA-256 of the canonical form."""
    return hashlib.sha256(canonicalize(obj)).hexdigest()


def _dump(obj: dict) -> bytes:
    # not key-sorted: revealed bids are ranked in submission order
    return json.dumps(obj, separators=(",", ":")).encode("utf-8")


@dataclass
class OrderEntry:
    """One principal's outstanding mint or burn order."""
    kind: str
    amount: int
    state: str

    def to_dict(self) -> dict:
        return {"mintburn": self.kind, "amount": self.amount, "state": self.state}

    @staticmethod
    def from_dict(data: dict) -> "OrderEntry":
        return OrderEntry(kind=data["mintburn"], amount=int(data["amount"]), state=data["state"])


@dataclass
class OrderTable:
    """
    The single global mint/burn order table.

    version is bumped on every write so concurrent read-modify-write cycles
    show up as conflicting updates of the same record.
    """
    orders: Dict[str, OrderEntry] = field(default_factory=dict)
    version: int = 0

    def to_bytes(self) -> bytes:
        return _dump({
            "version": self.version,
            "state": {principal: entry.to_dict() for principal, entry in self.orders.items()},
        })

    @staticmethod
    def from_bytes(raw: Optional[bytes]) -> "OrderTable":
        if not raw:
            return OrderTable()
        data = json.loads(raw)
        return OrderTable(
            orders={p: OrderEntry.from_dict(e) for p, e in (data.get("state") or {}).items()},
            version=int(data.get("version", 0)),
        )


@dataclass
class FullBid:
    """A revealed (plaintext) bid."""
    price: int
    org: str
    bidder: str
    item: str = AUCTION_ITEM

    def to_dict(self) -> dict:
        return {"objectType": self.item, "price": self.price, "org": self.org, "bidder": self.bidder}

    @staticmethod
    def from_dict(data: dict) -> "FullBid":
        return FullBid(
            price=int(data["price"]),
            org=data["org"],
            bidder=data["bidder"],
            item=data.get("objectType", AUCTION_ITEM),
        )

    def commitment(self) -> str:
        return canonical_hash(self.to_dict())


@dataclass
class BidHash:
    """A sealed bid: the bidder's organization and the commitment to the full bid."""
    org: str
    hash: str

    def to_dict(self) -> dict:
        return {"org": self.org, "hash": self.hash}

    @staticmethod
    def from_dict(data: dict) -> "BidHash":
        return BidHash(org=data["org"], hash=data["hash"])


@dataclass
class Auction:
    amount: int
    price_per_kwh: int
    time_started: datetime
    time_remaining: int
    seller: str
    organizations: List[str]
    item: str = AUCTION_ITEM
    private_bids: Dict[str, BidHash] = field(default_factory=dict)
    revealed_bids: Dict[str, FullBid] = field(default_factory=dict)
    winner: str = ""
    price: int = 0
    status: str = AUCTION_OPEN

    def minutes_elapsed(self, now: datetime) -> int:
        return int((now - self.time_started).total_seconds() // 60)

    def is_expired(self, now: datetime) -> bool:
        """Expiry is always derived from start time and duration, never from status."""
        return self.minutes_elapsed(now) >= self.time_remaining

    def to_dict(self) -> dict:
        return {
            "objectType": "auction",
            "item": self.item,
            "amount": self.amount,
            "priceperkwh": self.price_per_kwh,
            "time_started": self.time_started.isoformat(),
            "time_remaining": self.time_remaining,
            "seller": self.seller,
            "organizations": list(self.organizations),
            "privateBids": {k: b.to_dict() for k, b in self.private_bids.items()},
            "revealedBids": {k: b.to_dict() for k, b in self.revealed_bids.items()},
            "winner": self.winner,
            "price": self.price,
            "status": self.status,
        }

    @staticmethod
    def from_dict(data: dict) -> "Auction":
        return Auction(
            item=data.get("item", AUCTION_ITEM),
            amount=int(data["amount"]),
            price_per_kwh=int(data["priceperkwh"]),
            time_started=datetime.fromisoformat(data["time_started"]),
            time_remaining=int(data["time_remaining"]),
            seller=data["seller"],
            organizations=list(data.get("organizations") or []),
            private_bids={k: BidHash.from_dict(b) for k, b in (data.get("privateBids") or {}).items()},
            revealed_bids={k: FullBid.from_dict(b) for k, b in (data.get("revealedBids") or {}).items()},
            winner=data.get("winner", ""),
            price=int(data.get("price", 0)),
            status=data["status"],
        )

    def to_bytes(self) -> bytes:
        return _dump(self.to_dict())

    @staticmethod
    def from_bytes(raw: bytes) -> "Auction":
        return Auction.from_dict(json.loads(raw))


@dataclass(frozen=True)
class Account:
    """Caller's view of its own account: active balance plus escrowed hold."""
    client_id: str
    active: int
    hold: int

    def to_dict(self) -> dict:
        return {"clientID": self.client_id, "active": self.active, "hold": self.hold}
