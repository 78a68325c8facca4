"""
HTTP surface: identity headers, argument parsing, error mapping and a few
end-to-end flows through the Django test client.
"""

import json
import logging

import pytest

pytestmark = pytest.mark.django_db


def _headers(identity):
    return {"HTTP_X_CLIENT_ID": identity.id, "HTTP_X_CLIENT_MSPID": identity.msp_id}


@pytest.fixture
def post(client):
    def _post(identity, url, body=None):
        return client.post(
            url, data=json.dumps(body or {}), content_type="application/json", **_headers(identity),
        )
    return _post


@pytest.fixture
def get(client):
    def _get(identity, url, params=None):
        return client.get(url, params or {}, **_headers(identity))
    return _get


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_missing_identity_is_forbidden(client):
    resp = client.get("/api/balance")
    assert resp.status_code == 403
    assert resp.json()["code"] == "PERMISSION_DENIED"


def test_wrong_method(get, alice):
    resp = get(alice, "/api/account/create")
    assert resp.status_code == 405


def test_create_account_and_read_it(post, get, alice):
    resp = post(alice, "/api/account/create")
    assert resp.status_code == 201
    assert resp.json() == {"account": alice.id}

    assert get(alice, "/api/me").json() == {"account": alice.id}
    assert get(alice, "/api/account").json() == {"clientID": alice.id, "active": 0, "hold": 0}

    resp = post(alice, "/api/account/create")
    assert resp.status_code == 409
    assert resp.json()["code"] == "ALREADY_EXISTS"


def test_unknown_account_is_404(get, alice):
    resp = get(alice, "/api/balance-of", {"account": "x509::CN=nobody"})
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_mint_workflow_over_http(post, get, approver, alice):
    post(alice, "/api/account/create")

    resp = post(alice, "/api/orders/mint", {"amount": 100})
    assert resp.status_code == 201
    assert resp.json() == {"mintburn": "Mint", "amount": 100, "state": "Ordered"}

    assert get(alice, "/api/orders/mint/pending").status_code == 403
    assert list(get(approver, "/api/orders/mint/pending").json()) == [alice.id]

    resp = post(approver, "/api/orders/mint/approve", {"principal": alice.id})
    assert resp.json()["state"] == "Approved"
    assert get(alice, "/api/orders/mint/mine").json()["state"] == "Approved"

    resp = post(alice, "/api/orders/mint/execute", {"amount": "100"})
    assert resp.json() == {"ok": True, "balance": 100}
    assert get(alice, "/api/total-supply").json() == {"total_supply": 100}


def test_unknown_order_kind(post, alice):
    resp = post(alice, "/api/orders/melt", {"amount": 1})
    assert resp.status_code == 404


def test_transfer_and_allowance_over_http(post, get, fund, alice, bob, carol):
    fund(alice, 50)

    resp = post(alice, "/api/transfer", {"recipient": bob.id, "amount": 80})
    assert resp.status_code == 412
    assert resp.json()["code"] == "FAILED_PRECONDITION"

    post(alice, "/api/approve", {"spender": bob.id, "value": 20})
    resp = get(bob, "/api/allowance", {"owner": alice.id, "spender": bob.id})
    assert resp.json() == {"owner": alice.id, "spender": bob.id, "allowance": 20}

    resp = post(bob, "/api/transfer-from", {"from": alice.id, "to": carol.id, "value": 15})
    assert resp.status_code == 200
    assert get(carol, "/api/balance").json() == {"balance": 15}


@pytest.mark.parametrize("body", [{}, {"recipient": "x", "amount": "ten"}, {"recipient": "x", "amount": True}])
def test_bad_arguments_are_400(post, fund, alice, body):
    fund(alice, 10)
    resp = post(alice, "/api/transfer", body)
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_ARGUMENT"


def test_invalid_json_body(client, alice):
    resp = client.post("/api/transfer", data="{not json", content_type="application/json", **_headers(alice))
    assert resp.status_code == 400


def test_holds_over_http(post, get, fund, alice, bob):
    fund(alice, 100)
    post(bob, "/api/account/create")

    resp = post(alice, "/api/hold/create", {"amount": 40})
    assert resp.status_code == 201
    assert resp.json() == {"clientID": alice.id, "active": 60, "hold": 40}

    # holds are only paid out by settlement code, never over the wire
    assert post(bob, "/api/hold/execute", {"holder": alice.id, "amount": 25}).status_code == 404

    assert post(alice, "/api/hold/return", {"holder": alice.id}).status_code == 200
    assert get(alice, "/api/account").json() == {"clientID": alice.id, "active": 100, "hold": 0}
    assert get(bob, "/api/balance").json() == {"balance": 0}

    resp = post(alice, "/api/hold/return", {"holder": "x509::CN=nobody"})
    assert resp.status_code == 404


def test_auction_over_http(post, get, fund, approver, alice, bob):
    fund(alice, 100)

    resp = post(bob, "/api/auctions", {"auction_id": "a-1", "price_per_kwh": 10, "amount": 5, "time_remaining": 30})
    assert resp.status_code == 201
    assert resp.json()["price"] == 50
    assert resp.json()["auctionID"] == "a-1"

    resp = post(alice, "/api/auctions/a-1/bids", {"amount": 70})
    assert resp.status_code == 201
    assert resp.json()["bid_key"].startswith("\x1fbid\x1fa-1\x1f")

    assert get(approver, "/api/auctions/a-1/check").json()["status"] == "open"
    assert get(alice, "/api/auctions/a-1/check").status_code == 403

    assert post(alice, "/api/auctions/a-1/close").status_code == 403
    assert post(bob, "/api/auctions/a-1/close").json()["status"] == "closed"

    resp = post(bob, "/api/auctions/a-1/end")
    assert resp.json()["winner"] == alice.id
    assert resp.json()["price"] == 70

    assert get(bob, "/api/auctions/a-1").status_code == 404


def test_sealed_bid_over_http(post, get, alice, bob):
    post(alice, "/api/account/create")
    post(bob, "/api/auctions", {"auction_id": "a-2", "price_per_kwh": 10, "amount": 5, "time_remaining": 30})

    resp = post(alice, "/api/auctions/a-2/sealed-bids", {"price": 90})
    assert resp.status_code == 201
    key = resp.json()["bid_key"]

    auction = get(bob, "/api/auctions/a-2").json()
    assert auction["privateBids"][key]["org"] == alice.msp_id
    assert auction["revealedBids"] == {}


def test_host_stub_inspection(post, client, alice):
    post(alice, "/api/account/create")

    resp = client.get("/stub/host/state", {"key": alice.id})
    assert resp.status_code == 200
    assert resp.json()["value"] == "0"

    resp = client.get("/stub/host/events", {"name": "Transfer"})
    assert resp.status_code == 200


def test_non_account_records_map_to_client_errors(post, get, fund, alice, bob):
    fund(alice, 100)
    post(bob, "/api/auctions", {"auction_id": "a-3", "price_per_kwh": 10, "amount": 5, "time_remaining": 30})

    resp = post(alice, "/api/transfer", {"recipient": "totalSupply", "amount": 40})
    assert resp.status_code == 400
    assert get(alice, "/api/total-supply").json() == {"total_supply": 100}

    assert post(alice, "/api/transfer", {"recipient": "a-3", "amount": 10}).status_code == 404
    assert get(alice, "/api/balance-of", {"account": "MintBurn"}).status_code == 400
    assert get(alice, "/api/balance-of", {"account": "a-3"}).status_code == 404
    assert get(alice, "/api/balance").json() == {"balance": 100}


def test_rejected_calls_are_logged(get, alice, caplog, monkeypatch):
    # the api logger does not propagate to the root handler caplog listens on
    monkeypatch.setattr(logging.getLogger("api"), "propagate", True)
    with caplog.at_level(logging.INFO, logger="api.common"):
        resp = get(alice, "/api/balance")

    assert resp.status_code == 404
    assert "GET /api/balance rejected with NOT_FOUND" in caplog.text
