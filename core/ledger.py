"""Token ledger: balances, allowances, escrow holds, mint and burn.

Every method takes the invocation's TransactionContext and does its whole
read-validate-write cycle against ctx.stub. All validation happens before the
first write, so a failing call leaves nothing behind even outside the host's
transaction boundary.
"""

import logging

from core.constants import (
	TOTAL_SUPPLY_KEY, RESERVED_KEYS, COMPOSITE_KEY_SEP, HOLD_PREFIX, ALLOWANCE_PREFIX, NULL_ACCOUNT,
	EVENT_TRANSFER, EVENT_APPROVAL, minter_mspid,
)
from core.context import TransactionContext
from core.exceptions import InvalidArgument, NotFound, FailedPrecondition, PermissionDenied, Conflict
from core.records import Account

log = logging.getLogger(__name__)


class TokenLedger:

	# --- Accounts ---------------------------------------------------------------

	def create_account(self, ctx: TransactionContext) -> str:
		"""
		Open a zero balance for the caller and return its account id.
		Fails if the caller already has one.
		"""
		self._check_account(ctx.client_id)
		if ctx.stub.get_state(ctx.client_id) is not None:
			raise Conflict(f"account {ctx.client_id} already exists")
		ctx.stub.put_int(ctx.client_id, 0)
		log.info("account %s created", ctx.client_id)
		return ctx.client_id

	def _check_account(self, account: str) -> None:
		# singleton records and composite keys never hold a balance
		if not account or account in RESERVED_KEYS or COMPOSITE_KEY_SEP in account:
			raise InvalidArgument("invalid account id", {"account": account})

	def _require_balance(self, ctx: TransactionContext, account: str) -> int:
		self._check_account(account)
		balance = ctx.stub.get_int(account)
		if balance is None:
			raise NotFound(f"the account {account} does not exist")
		return balance

	def _hold_key(self, ctx: TransactionContext, holder: str) -> str:
		return ctx.stub.create_composite_key(HOLD_PREFIX, [holder])

	def _allowance_key(self, ctx: TransactionContext, owner: str, spender: str) -> str:
		return ctx.stub.create_composite_key(ALLOWANCE_PREFIX, [owner, spender])

	def _emit_transfer(self, ctx: TransactionContext, sender: str, recipient: str, value: int) -> None:
		ctx.stub.set_event(EVENT_TRANSFER, {"from": sender, "to": recipient, "value": value})

	# --- Supply ---------------------------------------------------------------------

	def mint(self, ctx: TransactionContext, amount: int) -> None:
		"""
		Create `amount` new tokens on the caller's balance.

		Not gated here: the approval workflow (core.orders) is the only caller
		reachable from outside.
		"""
		if amount <= 0:
			raise InvalidArgument("mint amount must be a positive integer")

		current = ctx.stub.get_int(ctx.client_id) or 0
		supply = ctx.stub.get_int(TOTAL_SUPPLY_KEY) or 0

		updated = current + amount
		ctx.stub.put_int(ctx.client_id, updated)
		ctx.stub.put_int(TOTAL_SUPPLY_KEY, supply + amount)
		self._emit_transfer(ctx, NULL_ACCOUNT, ctx.client_id, amount)

		log.info("minter account %s balance updated from %d to %d", ctx.client_id, current, updated)

	def burn(self, ctx: TransactionContext, amount: int) -> None:
		"""
		Destroy `amount` tokens from the caller's balance. Minter organization only.
		"""
		if ctx.msp_id != minter_mspid():
			raise PermissionDenied("client is not authorized to burn tokens", {"msp_id": ctx.msp_id})
		if amount <= 0:
			raise InvalidArgument("burn amount must be a positive integer")

		current = self._require_balance(ctx, ctx.client_id)
		if current < amount:
			raise FailedPrecondition(f"client account {ctx.client_id} has insufficient funds")
		supply = ctx.stub.get_int(TOTAL_SUPPLY_KEY)
		if supply is None or supply < amount:
			raise FailedPrecondition("total supply is smaller than the burn amount")

		updated = current - amount
		ctx.stub.put_int(ctx.client_id, updated)
		ctx.stub.put_int(TOTAL_SUPPLY_KEY, supply - amount)
		self._emit_transfer(ctx, ctx.client_id, NULL_ACCOUNT, amount)

		log.info("burner account %s balance updated from %d to %d", ctx.client_id, current, updated)

	# --- Transfers --------------------------------------------------------------------

	def _transfer(self, ctx: TransactionContext, sender: str, recipient: str, value: int) -> None:
		"""
		Shared by transfer and transfer_from. A zero transfer is allowed.
		"""
		if value < 0:
			raise InvalidArgument("transfer amount cannot be negative")
		self._check_account(sender)
		self._check_account(recipient)

		sender_balance = ctx.stub.get_int(sender)
		if sender_balance is None:
			raise NotFound(f"client account {sender} has no balance")
		if sender_balance < value:
			raise FailedPrecondition(f"client account {sender} has insufficient funds")

		if sender == recipient:
			log.info("client %s transferred %d to itself, balance unchanged", sender, value)
			return

		# recipient balance is created on demand
		recipient_balance = ctx.stub.get_int(recipient) or 0

		ctx.stub.put_int(sender, sender_balance - value)
		ctx.stub.put_int(recipient, recipient_balance + value)

		log.info("client %s balance updated from %d to %d", sender, sender_balance, sender_balance - value)
		log.info("recipient %s balance updated from %d to %d", recipient, recipient_balance, recipient_balance + value)

	def transfer(self, ctx: TransactionContext, recipient: str, amount: int) -> None:
		self._transfer(ctx, ctx.client_id, recipient, amount)
		self._emit_transfer(ctx, ctx.client_id, recipient, amount)

	def transfer_from(self, ctx: TransactionContext, sender: str, recipient: str, value: int) -> None:
		"""
		Move `value` from `sender` to `recipient` on behalf of the caller, drawing down
		the caller's allowance on `sender`.
		"""
		key = self._allowance_key(ctx, sender, ctx.client_id)
		allowance = ctx.stub.get_int(key) or 0
		if allowance < value:
			raise FailedPrecondition("spender does not have enough allowance for transfer")

		self._transfer(ctx, sender, recipient, value)

		ctx.stub.put_int(key, allowance - value)
		self._emit_transfer(ctx, sender, recipient, value)

		log.info("spender %s allowance updated from %d to %d", ctx.client_id, allowance, allowance - value)

	def approve(self, ctx: TransactionContext, spender: str, value: int) -> None:
		"""
		Set (not add to) the amount `spender` may draw from the caller.
		"""
		if value < 0:
			raise InvalidArgument("allowance cannot be negative")
		ctx.stub.put_int(self._allowance_key(ctx, ctx.client_id, spender), value)
		ctx.stub.set_event(EVENT_APPROVAL, {"owner": ctx.client_id, "spender": spender, "value": value})

		log.info("client %s approved a withdrawal allowance of %d for spender %s", ctx.client_id, value, spender)

	# --- Reads --------------------------------------------------------------------------

	def allowance(self, ctx: TransactionContext, owner: str, spender: str) -> int:
		return ctx.stub.get_int(self._allowance_key(ctx, owner, spender)) or 0

	def balance_of(self, ctx: TransactionContext, account: str) -> int:
		return self._require_balance(ctx, account)

	def client_account_balance(self, ctx: TransactionContext) -> int:
		return self._require_balance(ctx, ctx.client_id)

	def client_account_id(self, ctx: TransactionContext) -> str:
		"""
		The caller's account id is its principal id; others use it as the payment address.
		"""
		return ctx.client_id

	def total_supply(self, ctx: TransactionContext) -> int:
		return ctx.stub.get_int(TOTAL_SUPPLY_KEY) or 0

	def get_hold(self, ctx: TransactionContext, holder: str) -> int:
		return ctx.stub.get_int(self._hold_key(ctx, holder)) or 0

	def get_account(self, ctx: TransactionContext) -> Account:
		active = self._require_balance(ctx, ctx.client_id)
		return Account(client_id=ctx.client_id, active=active, hold=self.get_hold(ctx, ctx.client_id))

	# --- Escrow holds ----------------------------------------------------------------------

	def create_hold(self, ctx: TransactionContext, amount: int) -> Account:
		"""
		Move `amount` from the caller's active balance into its hold (adds to an existing hold).
		Returns the caller's account as left by the call.
		"""
		if amount <= 0:
			raise InvalidArgument("hold amount must be a positive integer")
		balance = self._require_balance(ctx, ctx.client_id)
		if balance < amount:
			raise FailedPrecondition(f"client account {ctx.client_id} has insufficient funds for hold")

		key = self._hold_key(ctx, ctx.client_id)
		held = ctx.stub.get_int(key) or 0

		ctx.stub.put_int(ctx.client_id, balance - amount)
		ctx.stub.put_int(key, held + amount)

		log.info("account %s hold updated from %d to %d", ctx.client_id, held, held + amount)
		return Account(client_id=ctx.client_id, active=balance - amount, hold=held + amount)

	def release_hold(self, ctx: TransactionContext, amount: int) -> None:
		"""
		Move `amount` of the caller's hold back into its active balance.
		"""
		if amount <= 0:
			raise InvalidArgument("hold amount must be a positive integer")
		balance = self._require_balance(ctx, ctx.client_id)
		key = self._hold_key(ctx, ctx.client_id)
		held = ctx.stub.get_int(key) or 0
		if held < amount:
			raise FailedPrecondition("hold is smaller than the released amount", {"hold": held, "amount": amount})

		ctx.stub.put_int(ctx.client_id, balance + amount)
		ctx.stub.put_int(key, held - amount)

		log.info("account %s hold updated from %d to %d", ctx.client_id, held, held - amount)

	def execute_hold(self, ctx: TransactionContext, holder: str, amount: int) -> None:
		"""
		Pay `amount` out of `holder`'s hold to the caller and refund the rest to `holder`.

		The hold is fully consumed: it is zeroed, the same end state as return_hold.
		Not remotely callable: settlement code runs it with the payee as caller.
		"""
		if amount <= 0:
			raise InvalidArgument("hold amount must be a positive integer")

		key = self._hold_key(ctx, holder)
		held = ctx.stub.get_int(key)
		if held is None:
			raise NotFound(f"account {holder} has no hold")
		if held < amount:
			raise FailedPrecondition("hold is smaller than the executed amount", {"hold": held, "amount": amount})

		caller_balance = self._require_balance(ctx, ctx.client_id)
		holder_balance = self._require_balance(ctx, holder)

		if holder == ctx.client_id:
			ctx.stub.put_int(holder, holder_balance + held)
		else:
			ctx.stub.put_int(ctx.client_id, caller_balance + amount)
			ctx.stub.put_int(holder, holder_balance + held - amount)
		ctx.stub.put_int(key, 0)

		log.info("hold of %s executed: %d paid to %s, %d refunded", holder, amount, ctx.client_id, held - amount)

	def return_hold(self, ctx: TransactionContext, holder: str) -> None:
		"""
		Release `holder`'s entire hold back into its active balance.
		"""
		key = self._hold_key(ctx, holder)
		held = ctx.stub.get_int(key)
		if held is None:
			raise NotFound(f"account {holder} has no hold")
		balance = self._require_balance(ctx, holder)

		ctx.stub.put_int(holder, balance + held)
		ctx.stub.put_int(key, 0)

		log.info("hold of %s returned: balance updated from %d to %d", holder, balance, balance + held)
