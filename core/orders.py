"""Mint/burn approval workflow.

A principal orders a supply change, the approver organization approves or
rejects it, and the principal then executes exactly the approved amount:

    Ordered -> Approved -> (executed, entry deleted)
    Ordered -> Rejected

All orders live in one global table record (MINT_BURN_KEY), one entry per
principal; a new order overwrites whatever that principal had before.
"""

import logging
from typing import Dict

from core.constants import (
	MINT_BURN_KEY, ORDER_MINT, ORDER_BURN,
	STATE_ORDERED, STATE_APPROVED, STATE_REJECTED, approver_mspid,
)
from core.context import TransactionContext
from core.exceptions import InvalidArgument, NotFound, FailedPrecondition, PermissionDenied
from core.ledger import TokenLedger
from core.records import OrderEntry, OrderTable

log = logging.getLogger(__name__)


class MintBurnWorkflow:

	def __init__(self, ledger: TokenLedger):
		self.ledger = ledger

	# --- Table access ------------------------------------------------------------

	def _load(self, ctx: TransactionContext) -> OrderTable:
		return OrderTable.from_bytes(ctx.stub.get_state(MINT_BURN_KEY))

	def _save(self, ctx: TransactionContext, table: OrderTable) -> None:
		table.version += 1
		ctx.stub.put_state(MINT_BURN_KEY, table.to_bytes())

	def _require_approver(self, ctx: TransactionContext, action: str) -> None:
		if ctx.msp_id != approver_mspid():
			raise PermissionDenied(f"client is not authorized to {action}", {"msp_id": ctx.msp_id})

	# --- Principal side ------------------------------------------------------------

	def _order(self, ctx: TransactionContext, kind: str, amount: int) -> OrderEntry:
		# only account holders may order
		self.ledger.client_account_balance(ctx)
		if amount <= 0:
			raise InvalidArgument(f"{kind.lower()} amount must be a positive integer")

		table = self._load(ctx)
		entry = OrderEntry(kind=kind, amount=amount, state=STATE_ORDERED)
		table.orders[ctx.client_id] = entry
		self._save(ctx, table)

		log.info("%s order of %d placed by %s", kind.lower(), amount, ctx.client_id)
		return entry

	def order_mint(self, ctx: TransactionContext, amount: int) -> OrderEntry:
		return self._order(ctx, ORDER_MINT, amount)

	def order_burn(self, ctx: TransactionContext, amount: int) -> OrderEntry:
		return self._order(ctx, ORDER_BURN, amount)

	def _execute(self, ctx: TransactionContext, kind: str, amount: int) -> int:
		"""
		Run the approved order of the caller through the ledger primitive, then drop it.
		Returns the caller's resulting balance.
		"""
		self.ledger.client_account_balance(ctx)

		table = self._load(ctx)
		entry = table.orders.get(ctx.client_id)
		if entry is None or entry.state != STATE_APPROVED or entry.amount != amount or entry.kind != kind:
			raise FailedPrecondition(
				f"{kind.lower()} is not approved or amount is different than amount ordered",
				{"amount": amount},
			)

		if kind == ORDER_MINT:
			self.ledger.mint(ctx, amount)
		else:
			self.ledger.burn(ctx, amount)

		del table.orders[ctx.client_id]
		self._save(ctx, table)

		log.info("%s order of %d executed by %s", kind.lower(), amount, ctx.client_id)
		return self.ledger.client_account_balance(ctx)

	def execute_mint(self, ctx: TransactionContext, amount: int) -> int:
		return self._execute(ctx, ORDER_MINT, amount)

	def execute_burn(self, ctx: TransactionContext, amount: int) -> int:
		return self._execute(ctx, ORDER_BURN, amount)

	def _get_own(self, ctx: TransactionContext, kind: str) -> OrderEntry:
		self.ledger.client_account_balance(ctx)
		entry = self._load(ctx).orders.get(ctx.client_id)
		if entry is None or entry.kind != kind:
			raise NotFound(f"there is no {kind.lower()} order")
		return entry

	def get_mint_order(self, ctx: TransactionContext) -> OrderEntry:
		return self._get_own(ctx, ORDER_MINT)

	def get_burn_order(self, ctx: TransactionContext) -> OrderEntry:
		return self._get_own(ctx, ORDER_BURN)

	# --- Approver side -----------------------------------------------------------------

	def _decide(self, ctx: TransactionContext, kind: str, principal: str, decision: str) -> OrderEntry:
		self._require_approver(ctx, f"decide on {kind.lower()} orders")

		table = self._load(ctx)
		entry = table.orders.get(principal)
		if entry is None or entry.kind != kind:
			raise NotFound(f"there are no {kind.lower()} orders for {principal}")
		if entry.state != STATE_ORDERED:
			raise FailedPrecondition(f"{kind.lower()} is not in order stage", {"state": entry.state})

		entry.state = decision
		self._save(ctx, table)

		log.info("%s order of %s %s by %s", kind.lower(), principal, decision.lower(), ctx.client_id)
		return entry

	def approve_mint(self, ctx: TransactionContext, principal: str) -> OrderEntry:
		return self._decide(ctx, ORDER_MINT, principal, STATE_APPROVED)

	def approve_burn(self, ctx: TransactionContext, principal: str) -> OrderEntry:
		return self._decide(ctx, ORDER_BURN, principal, STATE_APPROVED)

	def reject_mint(self, ctx: TransactionContext, principal: str) -> OrderEntry:
		return self._decide(ctx, ORDER_MINT, principal, STATE_REJECTED)

	def reject_burn(self, ctx: TransactionContext, principal: str) -> OrderEntry:
		return self._decide(ctx, ORDER_BURN, principal, STATE_REJECTED)

	def _pending(self, ctx: TransactionContext, kind: str) -> Dict[str, OrderEntry]:
		self._require_approver(ctx, f"get {kind.lower()} orders")
		return {
			principal: entry
			for principal, entry in self._load(ctx).orders.items()
			if entry.kind == kind and entry.state == STATE_ORDERED
		}

	def get_mint_orders(self, ctx: TransactionContext) -> Dict[str, OrderEntry]:
		return self._pending(ctx, ORDER_MINT)

	def get_burn_orders(self, ctx: TransactionContext) -> Dict[str, OrderEntry]:
		return self._pending(ctx, ORDER_BURN)
