"""Contract facade: every remote-callable operation runs as one atomic invocation.

invoke() opens a fresh TransactionContext, runs the operation inside
transaction.atomic and lets any LedgerError escape it, so the host state keeps
either all of the invocation's writes or none of them.

The raw mint/burn primitives, hold execution and the internal close/end
variants are not listed in OPERATIONS: supply only changes through the
approval workflow and nobody can pay themselves out of another account's hold.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from django.db import transaction

from core.auction import AuctionLifecycle
from core.context import ClientIdentity, TransactionContext
from core.exceptions import InvalidArgument, LedgerError
from core.ledger import TokenLedger
from core.orders import MintBurnWorkflow

log = logging.getLogger(__name__)


class EnergyContract:
	"""
	The ledger, the mint/burn workflow and the auction wired together.
	"""

	OPERATIONS = {
		# token ledger
		"CreateAccount": ("ledger", "create_account"),
		"Transfer": ("ledger", "transfer"),
		"TransferFrom": ("ledger", "transfer_from"),
		"Approve": ("ledger", "approve"),
		"Allowance": ("ledger", "allowance"),
		"BalanceOf": ("ledger", "balance_of"),
		"ClientAccountBalance": ("ledger", "client_account_balance"),
		"ClientAccountID": ("ledger", "client_account_id"),
		"TotalSupply": ("ledger", "total_supply"),
		"GetAccount": ("ledger", "get_account"),
		"CreateHold": ("ledger", "create_hold"),
		"ReturnHold": ("ledger", "return_hold"),
		# mint/burn workflow
		"OrderMint": ("orders", "order_mint"),
		"OrderBurn": ("orders", "order_burn"),
		"ApproveMint": ("orders", "approve_mint"),
		"ApproveBurn": ("orders", "approve_burn"),
		"RejectMint": ("orders", "reject_mint"),
		"RejectBurn": ("orders", "reject_burn"),
		"ExecuteMint": ("orders", "execute_mint"),
		"ExecuteBurn": ("orders", "execute_burn"),
		"GetMintOrder": ("orders", "get_mint_order"),
		"GetBurnOrder": ("orders", "get_burn_order"),
		"GetMintOrders": ("orders", "get_mint_orders"),
		"GetBurnOrders": ("orders", "get_burn_orders"),
		# auction
		"CreateAuction": ("auctions", "create_auction"),
		"GetAuction": ("auctions", "get_auction"),
		"SubmitSealedBid": ("auctions", "submit_sealed_bid"),
		"SubmitBid": ("auctions", "submit_bid"),
		"CloseAuction": ("auctions", "close_auction"),
		"EndAuction": ("auctions", "end_auction"),
		"CheckAuction": ("auctions", "check_auction"),
	}

	def __init__(self):
		self.ledger = TokenLedger()
		self.orders = MintBurnWorkflow(self.ledger)
		self.auctions = AuctionLifecycle(self.ledger)

	def resolve(self, operation: str) -> Callable[..., Any]:
		try:
			component, method = self.OPERATIONS[operation]
		except KeyError:
			raise InvalidArgument(f"unknown operation {operation}") from None
		return getattr(getattr(self, component), method)


contract = EnergyContract()


def invoke(identity: ClientIdentity, operation: str, *args, timestamp: Optional[datetime] = None) -> Any:
	"""
	Run one contract operation for `identity`. timestamp overrides the transaction
	time (defaults to now).
	"""
	fn = contract.resolve(operation)
	ctx = TransactionContext.new(identity, timestamp)
	try:
		with transaction.atomic():
			result = fn(ctx, *args)
	except LedgerError as exc:
		log.info("tx %s %s by %s failed: %s", ctx.tx_id, operation, identity.id, exc)
		raise
	log.debug("tx %s %s by %s committed", ctx.tx_id, operation, identity.id)
	return result
