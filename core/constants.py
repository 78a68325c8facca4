"""Record keys, key prefixes and status values shared by the contract.


- Balances live directly under the principal id; holds/allowances/bids under composite keys.
- TOTAL_SUPPLY_KEY and MINT_BURN_KEY are the two singleton records.
- approver_mspid / minter_mspid read the privileged organizations from settings on every call.
"""

from django.conf import settings

TOTAL_SUPPLY_KEY = "totalSupply"
MINT_BURN_KEY = "MintBurn"

# Singleton records; never usable as an account or auction id.
RESERVED_KEYS = (TOTAL_SUPPLY_KEY, MINT_BURN_KEY)

HOLD_PREFIX = "hold"
ALLOWANCE_PREFIX = "allowance"
BID_PREFIX = "bid"

# Separator used to build composite keys; never valid inside a key segment.
COMPOSITE_KEY_SEP = "\x1f"

# Sender/recipient reported in Transfer events for mint and burn.
NULL_ACCOUNT = "0x0"

ORDER_MINT = "Mint"
ORDER_BURN = "Burn"

STATE_ORDERED = "Ordered"
STATE_APPROVED = "Approved"
STATE_REJECTED = "Rejected"

AUCTION_OPEN = "open"
AUCTION_CLOSED = "closed"
AUCTION_ENDED = "ended"

AUCTION_ITEM = "energy(KWh)"

EVENT_TRANSFER = "Transfer"
EVENT_APPROVAL = "Approval"
EVENT_AUCTION_ENDED = "AuctionEnded"


def approver_mspid() -> str:
    """
    Organization allowed to approve/reject orders, list orders and check auctions.
    """
    return getattr(settings, "LEDGER_APPROVER_MSPID", "Org1MSP")


def minter_mspid() -> str:
    """
    Organization allowed to run the burn primitive.
    """
    return getattr(settings, "LEDGER_MINTER_MSPID", "Org1MSP")


def peer_mspid() -> str:
    return getattr(settings, "HOST_PEER_MSPID", "Org1MSP")


def private_collection(mspid: str) -> str:
    """
    Name of the implicit private data collection owned by an organization.
    """
    return f"_implicit_org_{mspid}"
