"""Operational endpoints that move tokens (accounts, transfers, allowances, holds)."""

from django.http import JsonResponse

from .common import contract_endpoint, call, body_of, str_arg, int_arg


def health(request):
	return JsonResponse({"ok": True})


@contract_endpoint("POST")
def create_account(request):
	"""
	POST: Open a zero balance for the caller
	"""
	return JsonResponse({"account": call(request, "CreateAccount")}, status=201)


@contract_endpoint("POST")
def transfer(request):
	"""
	POST: {"recipient", "amount"} from the caller's balance
	"""
	body = body_of(request)
	call(request, "Transfer", str_arg(body, "recipient"), int_arg(body, "amount"))
	return JsonResponse({"ok": True})


@contract_endpoint("POST")
def transfer_from(request):
	"""
	POST: {"from", "to", "value"} drawing on the caller's allowance
	"""
	body = body_of(request)
	call(request, "TransferFrom", str_arg(body, "from"), str_arg(body, "to"), int_arg(body, "value"))
	return JsonResponse({"ok": True})


@contract_endpoint("POST")
def approve(request):
	"""
	POST: {"spender", "value"} sets the spender's allowance on the caller
	"""
	body = body_of(request)
	call(request, "Approve", str_arg(body, "spender"), int_arg(body, "value"))
	return JsonResponse({"ok": True})


@contract_endpoint("POST")
def create_hold(request):
	"""
	POST: {"amount"} moved from the caller's balance into escrow
	"""
	body = body_of(request)
	account = call(request, "CreateHold", int_arg(body, "amount"))
	return JsonResponse(account.to_dict(), status=201)


@contract_endpoint("POST")
def return_hold(request):
	"""
	POST: {"holder"} releases the holder's whole escrow back to its balance
	"""
	body = body_of(request)
	call(request, "ReturnHold", str_arg(body, "holder"))
	return JsonResponse({"ok": True})
