"""Read-only endpoints to inspect accounts, supply and allowances."""

from django.http import JsonResponse

from .common import contract_endpoint, call, str_arg


@contract_endpoint("GET")
def me(request):
	"""
	GET: The caller's account id (its payment address)
	"""
	return JsonResponse({"account": call(request, "ClientAccountID")})


@contract_endpoint("GET")
def account(request):
	"""
	GET: Caller's active balance and outstanding hold
	"""
	return JsonResponse(call(request, "GetAccount").to_dict())


@contract_endpoint("GET")
def balance(request):
	"""
	GET: Caller's active balance
	"""
	return JsonResponse({"balance": call(request, "ClientAccountBalance")})


@contract_endpoint("GET")
def balance_of(request):
	"""
	GET: Active balance of ?account=...
	"""
	acct = str_arg(request.GET, "account")
	return JsonResponse({"account": acct, "balance": call(request, "BalanceOf", acct)})


@contract_endpoint("GET")
def total_supply(request):
	return JsonResponse({"total_supply": call(request, "TotalSupply")})


@contract_endpoint("GET")
def allowance(request):
	"""
	GET: What ?spender= may still draw from ?owner=
	"""
	owner, spender = str_arg(request.GET, "owner"), str_arg(request.GET, "spender")
	return JsonResponse({"owner": owner, "spender": spender, "allowance": call(request, "Allowance", owner, spender)})
