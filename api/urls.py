"""Public API surface of the contract.

- /account*, /balance*, /total-supply, /allowance: reads
- /transfer*, /approve, /hold/*: token movements
- /orders/<mint|burn>/*: supply change approval workflow
- /auctions/*: sealed-bid energy auction
The caller identity travels in the gateway headers (see IDENTITY_*_HEADER).
"""

from django.urls import path
from .views_ops import health, create_account, transfer, transfer_from, approve, create_hold, return_hold
from .views_read import me, account, balance, balance_of, total_supply, allowance
from .views_orders import place_order, my_order, pending_orders, approve_order, reject_order, execute_order
from .views_auction import create_auction, auction_detail, sealed_bid, bid, close_auction, end_auction, check_auction


urlpatterns = [
	path("health", health),
	path("me", me),
	path("account", account),
	path("account/create", create_account),
	path("balance", balance),
	path("balance-of", balance_of),
	path("total-supply", total_supply),
	path("allowance", allowance),
	path("approve", approve),
	path("transfer", transfer),
	path("transfer-from", transfer_from),
	path("hold/create", create_hold),
	path("hold/return", return_hold),
	path("orders/<str:kind>", place_order),
	path("orders/<str:kind>/mine", my_order),
	path("orders/<str:kind>/pending", pending_orders),
	path("orders/<str:kind>/approve", approve_order),
	path("orders/<str:kind>/reject", reject_order),
	path("orders/<str:kind>/execute", execute_order),
	path("auctions", create_auction),
	path("auctions/<str:auction_id>", auction_detail),
	path("auctions/<str:auction_id>/sealed-bids", sealed_bid),
	path("auctions/<str:auction_id>/bids", bid),
	path("auctions/<str:auction_id>/close", close_auction),
	path("auctions/<str:auction_id>/end", end_auction),
	path("auctions/<str:auction_id>/check", check_auction),
]
