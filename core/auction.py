"""Sealed-bid energy auction.

    open -> closed -> ended   (the ended record is written, then deleted)

Bids are backed by escrow holds on the token ledger. Expiry is never trusted
from the stored status: every access re-derives it from the start time and
duration against the invocation timestamp.
"""

import json
import logging

from core.constants import (
	BID_PREFIX, RESERVED_KEYS, COMPOSITE_KEY_SEP,
	AUCTION_OPEN, AUCTION_CLOSED, AUCTION_ENDED, EVENT_AUCTION_ENDED,
	approver_mspid, private_collection,
)
from core.context import TransactionContext
from core.exceptions import (
	LedgerError, InvalidArgument, NotFound, FailedPrecondition, PermissionDenied, Conflict,
)
from core.ledger import TokenLedger
from core.records import Auction, FullBid, BidHash, canonicalize

log = logging.getLogger(__name__)


class AuctionLifecycle:

	def __init__(self, ledger: TokenLedger):
		self.ledger = ledger

	# --- Record access -------------------------------------------------------------

	def _load(self, ctx: TransactionContext, auction_id: str) -> Auction:
		raw = ctx.stub.get_state(auction_id)
		if raw is None:
			raise NotFound(f"auction not found: {auction_id}")
		try:
			return Auction.from_bytes(raw)
		except (ValueError, KeyError, TypeError):
			# balances and other singleton records share the key space
			raise NotFound(f"auction not found: {auction_id}") from None

	def _save(self, ctx: TransactionContext, auction_id: str, auction: Auction) -> None:
		ctx.stub.put_state(auction_id, auction.to_bytes())

	def _bid_key(self, ctx: TransactionContext, auction_id: str, bidder: str) -> str:
		return ctx.stub.create_composite_key(BID_PREFIX, [auction_id, bidder])

	def _join(self, ctx: TransactionContext, auction_id: str, auction: Auction) -> None:
		"""
		Add the caller's organization to the auction and to its endorsers, once.
		"""
		if ctx.msp_id in auction.organizations:
			return
		auction.organizations.append(ctx.msp_id)
		orgs = ctx.stub.get_endorsement_orgs(auction_id)
		if ctx.msp_id not in orgs:
			ctx.stub.set_endorsement_orgs(auction_id, orgs + [ctx.msp_id])

	def _expire(self, ctx: TransactionContext, auction_id: str) -> None:
		"""
		Best-effort close + end of an auction whose time is up. Failures are logged only.
		"""
		try:
			self._close(ctx, auction_id)
		except LedgerError as exc:
			log.warning("auto-close of auction %s failed: %s", auction_id, exc)
		try:
			self._end(ctx, auction_id)
		except LedgerError as exc:
			log.warning("auto-end of auction %s failed: %s", auction_id, exc)

	def _require_biddable(self, ctx: TransactionContext, auction_id: str) -> Auction:
		auction = self._load(ctx, auction_id)
		if auction.status != AUCTION_OPEN:
			raise FailedPrecondition("cannot join closed or ended auction", {"status": auction.status})
		if auction.is_expired(ctx.timestamp):
			self._expire(ctx, auction_id)
			raise FailedPrecondition("time is up", {"auction_id": auction_id})
		return auction

	# --- Operations --------------------------------------------------------------------

	def create_auction(self, ctx: TransactionContext, auction_id: str, price_per_kwh: int, amount: int,
			time_remaining: int) -> Auction:
		"""
		Open an auction selling `amount` KWh; the caller becomes the seller.
		The reserve price starts at amount * price_per_kwh.
		"""
		if not auction_id or auction_id in RESERVED_KEYS or COMPOSITE_KEY_SEP in auction_id:
			raise InvalidArgument("invalid auction id", {"auction_id": auction_id})
		if price_per_kwh <= 0 or amount <= 0 or time_remaining <= 0:
			raise InvalidArgument("price per KWh, amount and time remaining must be positive integers")
		if ctx.stub.get_state(auction_id) is not None:
			raise Conflict(f"a record already exists under {auction_id}")

		auction = Auction(
			amount=amount,
			price_per_kwh=price_per_kwh,
			time_started=ctx.timestamp,
			time_remaining=time_remaining,
			seller=ctx.client_id,
			organizations=[ctx.msp_id],
			price=amount * price_per_kwh,
		)
		self._save(ctx, auction_id, auction)
		ctx.stub.set_endorsement_orgs(auction_id, [ctx.msp_id])

		log.info("auction %s opened by %s: %d KWh, reserve %d", auction_id, ctx.client_id, amount, auction.price)
		return auction

	def get_auction(self, ctx: TransactionContext, auction_id: str) -> Auction:
		return self._load(ctx, auction_id)

	def submit_sealed_bid(self, ctx: TransactionContext, auction_id: str, price: int) -> str:
		"""
		Commit to a bid without revealing it: the plaintext goes to the caller
		organization's private collection, only its hash goes on the auction.
		Returns the bid key.
		"""
		if price <= 0:
			raise InvalidArgument("bid price must be a positive integer")
		auction = self._require_biddable(ctx, auction_id)
		self.ledger.client_account_balance(ctx)

		key = self._bid_key(ctx, auction_id, ctx.client_id)
		bid = FullBid(price=price, org=ctx.msp_id, bidder=ctx.client_id, item=auction.item)
		ctx.stub.put_private_data(private_collection(ctx.msp_id), key, canonicalize(bid.to_dict()))

		auction.private_bids[key] = BidHash(org=ctx.msp_id, hash=bid.commitment())
		self._join(ctx, auction_id, auction)
		self._save(ctx, auction_id, auction)

		log.info("sealed bid on auction %s committed by %s", auction_id, ctx.client_id)
		return key

	def submit_bid(self, ctx: TransactionContext, auction_id: str, amount: int) -> str:
		"""
		Reveal a bid of `amount` and escrow the funds behind it. Returns the bid key.

		A re-bid replaces the caller's earlier bid: the escrow behind the old
		amount is released before the new amount is held.
		"""
		if amount <= 0:
			raise InvalidArgument("bid amount must be a positive integer")
		auction = self._require_biddable(ctx, auction_id)

		key = self._bid_key(ctx, auction_id, ctx.client_id)
		previous = auction.revealed_bids.get(key)
		escrowed = previous.price if previous is not None else 0

		balance = self.ledger.client_account_balance(ctx)
		if balance + escrowed < amount:
			raise FailedPrecondition("balance is less than amount", {"balance": balance, "amount": amount})

		bid = FullBid(price=amount, org=ctx.msp_id, bidder=ctx.client_id, item=auction.item)

		sealed = auction.private_bids.get(key)
		if sealed is not None and sealed.hash != bid.commitment():
			raise FailedPrecondition("revealed bid does not match the sealed bid", {"bid_key": key})

		auction.revealed_bids[key] = bid
		self._join(ctx, auction_id, auction)
		self._save(ctx, auction_id, auction)

		if escrowed:
			self.ledger.release_hold(ctx, escrowed)
		self.ledger.create_hold(ctx, amount)

		log.info("bid of %d on auction %s revealed by %s", amount, auction_id, ctx.client_id)
		return key

	def _close(self, ctx: TransactionContext, auction_id: str) -> Auction:
		auction = self._load(ctx, auction_id)
		if auction.status != AUCTION_OPEN:
			raise FailedPrecondition("cannot close auction that is not open", {"status": auction.status})
		auction.status = AUCTION_CLOSED
		self._save(ctx, auction_id, auction)

		log.info("auction %s closed", auction_id)
		return auction

	def close_auction(self, ctx: TransactionContext, auction_id: str) -> Auction:
		"""
		Stop accepting bids. Seller only.
		"""
		auction = self._load(ctx, auction_id)
		if auction.seller != ctx.client_id:
			raise PermissionDenied("auction can only be closed by seller")
		return self._close(ctx, auction_id)

	def _check_sealed_bids(self, ctx: TransactionContext, auction: Auction) -> None:
		"""
		Make sure no sealed bid that was never revealed would beat the result.

		Plaintext of the executing peer's own organization is opened and compared;
		for other organizations the host must still hold a private record whose
		hash matches the commitment.
		"""
		for key, sealed in auction.private_bids.items():
			if key in auction.revealed_bids:
				continue
			collection = private_collection(sealed.org)
			if sealed.org == ctx.peer_msp_id:
				raw = ctx.stub.get_private_data(collection, key)
				if raw is None:
					raise FailedPrecondition("sealed bid does not exist", {"bid_key": key})
				bid = FullBid.from_dict(json.loads(raw))
				if bid.commitment() != sealed.hash:
					raise FailedPrecondition("sealed bid does not match its commitment", {"bid_key": key})
				if bid.price > auction.price:
					raise FailedPrecondition(
						"cannot end auction, an unrevealed bid is higher than the winning price",
						{"bid_key": key},
					)
			else:
				if ctx.stub.get_private_data_hash(collection, key) != sealed.hash:
					raise FailedPrecondition("sealed bid hash does not exist", {"bid_key": key})

	def _end(self, ctx: TransactionContext, auction_id: str) -> dict:
		auction = self._load(ctx, auction_id)
		if auction.status != AUCTION_CLOSED:
			raise FailedPrecondition("can only end a closed auction", {"status": auction.status})
		if not auction.revealed_bids:
			raise FailedPrecondition("no bids have been revealed, cannot end auction")

		# strictly greater only: on a tie the earlier bid keeps the lead
		for bid in auction.revealed_bids.values():
			if bid.price > auction.price:
				auction.winner = bid.bidder
				auction.price = bid.price

		self._check_sealed_bids(ctx, auction)

		auction.status = AUCTION_ENDED
		self._save(ctx, auction_id, auction)

		snapshot = {"auctionID": auction_id, **auction.to_dict()}
		ctx.stub.set_event(EVENT_AUCTION_ENDED, snapshot)
		ctx.stub.del_state(auction_id)

		log.info("auction %s ended: winner %s at %d", auction_id, auction.winner or "-", auction.price)
		return snapshot

	def end_auction(self, ctx: TransactionContext, auction_id: str) -> dict:
		"""
		Pick the winner, run the sealed-bid check, then retire the auction.

		The record is deleted in the same call; the returned snapshot (also emitted
		as an AuctionEnded event) is the only trace of the result.
		"""
		auction = self._load(ctx, auction_id)
		if auction.seller != ctx.client_id:
			raise PermissionDenied("auction can only be ended by seller")
		return self._end(ctx, auction_id)

	def check_auction(self, ctx: TransactionContext, auction_id: str) -> Auction:
		"""
		Approver's sweep: returns the auction while it is running, retires it once expired.
		"""
		if ctx.msp_id != approver_mspid():
			raise PermissionDenied("client is not authorized to check auctions", {"msp_id": ctx.msp_id})

		auction = self._load(ctx, auction_id)
		if auction.status != AUCTION_OPEN:
			raise FailedPrecondition("auction is closed or ended", {"status": auction.status})
		if auction.is_expired(ctx.timestamp):
			self._expire(ctx, auction_id)
			raise FailedPrecondition("auction closed and ended", {"auction_id": auction_id})
		return auction
