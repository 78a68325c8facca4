"""Mint/burn approval workflow endpoints.

<kind> is "mint" or "burn"; each route maps onto the matching contract operation.
"""

from django.http import JsonResponse

from core.exceptions import NotFound
from .common import contract_endpoint, call, body_of, str_arg, int_arg

OPERATIONS = {
	"mint": {
		"order": "OrderMint", "get": "GetMintOrder", "list": "GetMintOrders",
		"approve": "ApproveMint", "reject": "RejectMint", "execute": "ExecuteMint",
	},
	"burn": {
		"order": "OrderBurn", "get": "GetBurnOrder", "list": "GetBurnOrders",
		"approve": "ApproveBurn", "reject": "RejectBurn", "execute": "ExecuteBurn",
	},
}


def _operation(kind: str, action: str) -> str:
	if kind not in OPERATIONS:
		raise NotFound(f"unknown order kind {kind}")
	return OPERATIONS[kind][action]


@contract_endpoint("POST")
def place_order(request, kind: str):
	"""
	POST: {"amount"} orders a supply change for the caller (replaces any previous order)
	"""
	body = body_of(request)
	entry = call(request, _operation(kind, "order"), int_arg(body, "amount"))
	return JsonResponse(entry.to_dict(), status=201)


@contract_endpoint("GET")
def my_order(request, kind: str):
	"""
	GET: The caller's own order of this kind
	"""
	return JsonResponse(call(request, _operation(kind, "get")).to_dict())


@contract_endpoint("GET")
def pending_orders(request, kind: str):
	"""
	GET: All orders of this kind still waiting for a decision (approver only)
	"""
	orders = call(request, _operation(kind, "list"))
	return JsonResponse({principal: entry.to_dict() for principal, entry in orders.items()})


@contract_endpoint("POST")
def approve_order(request, kind: str):
	"""
	POST: {"principal"} approves that principal's order (approver only)
	"""
	body = body_of(request)
	return JsonResponse(call(request, _operation(kind, "approve"), str_arg(body, "principal")).to_dict())


@contract_endpoint("POST")
def reject_order(request, kind: str):
	"""
	POST: {"principal"} rejects that principal's order (approver only)
	"""
	body = body_of(request)
	return JsonResponse(call(request, _operation(kind, "reject"), str_arg(body, "principal")).to_dict())


@contract_endpoint("POST")
def execute_order(request, kind: str):
	"""
	POST: {"amount"} runs the caller's approved order; amount must match the order exactly
	"""
	body = body_of(request)
	balance = call(request, _operation(kind, "execute"), int_arg(body, "amount"))
	return JsonResponse({"ok": True, "balance": balance})
