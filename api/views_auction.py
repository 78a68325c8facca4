"""Energy auction endpoints: create, bid (sealed and revealed), close, end, check."""

from django.http import JsonResponse

from .common import contract_endpoint, call, body_of, str_arg, int_arg


def _render(auction_id: str, auction) -> dict:
	return {"auctionID": auction_id, **auction.to_dict()}


@contract_endpoint("POST")
def create_auction(request):
	"""
	POST: {"auction_id", "price_per_kwh", "amount", "time_remaining"}; caller becomes the seller
	"""
	body = body_of(request)
	auction_id = str_arg(body, "auction_id")
	auction = call(
		request, "CreateAuction",
		auction_id, int_arg(body, "price_per_kwh"), int_arg(body, "amount"), int_arg(body, "time_remaining"),
	)
	return JsonResponse(_render(auction_id, auction), status=201)


@contract_endpoint("GET")
def auction_detail(request, auction_id: str):
	return JsonResponse(_render(auction_id, call(request, "GetAuction", auction_id)))


@contract_endpoint("POST")
def sealed_bid(request, auction_id: str):
	"""
	POST: {"price"} commits to a bid; only its hash is published on the auction
	"""
	body = body_of(request)
	key = call(request, "SubmitSealedBid", auction_id, int_arg(body, "price"))
	return JsonResponse({"auctionID": auction_id, "bid_key": key}, status=201)


@contract_endpoint("POST")
def bid(request, auction_id: str):
	"""
	POST: {"amount"} reveals a bid and escrows the amount from the caller's balance
	"""
	body = body_of(request)
	key = call(request, "SubmitBid", auction_id, int_arg(body, "amount"))
	return JsonResponse({"auctionID": auction_id, "bid_key": key}, status=201)


@contract_endpoint("POST")
def close_auction(request, auction_id: str):
	"""
	POST: Seller stops the bidding
	"""
	return JsonResponse(_render(auction_id, call(request, "CloseAuction", auction_id)))


@contract_endpoint("POST")
def end_auction(request, auction_id: str):
	"""
	POST: Seller settles the result; the response is the final (already deleted) record
	"""
	return JsonResponse(call(request, "EndAuction", auction_id))


@contract_endpoint("GET")
def check_auction(request, auction_id: str):
	"""
	GET: Approver checks a running auction, retiring it once its time is up
	"""
	return JsonResponse(_render(auction_id, call(request, "CheckAuction", auction_id)))
