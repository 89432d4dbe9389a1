"""
Tests for request construction (method, request path, body) per endpoint.

**Purpose**: The request path is both signed and sent, so these tests pin
down the exact wire contract: paths, query strings (including status
deduplication and defaults) and JSON bodies.
"""

import json
from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

import pytest

from src.models.types import (
    AccountId,
    OrderId,
    ProductId,
    Side,
    OrderType,
    TimeInForce,
    STP,
    Status,
)
from src.venues import request_builder
from src.venues.request_builder import ApiRequest, render_query


def query_items(request_path):
    """Split a request path into (path, list of query pairs)."""
    parts = urlsplit(request_path)
    return parts.path, parse_qsl(parts.query)


def test_render_query_empty_has_no_question_mark():
    assert render_query([]) == ""


def test_render_query_keeps_repeated_keys_in_order():
    assert render_query([("status", "open"), ("status", "done")]) == "?status=open&status=done"


def test_render_query_encodes_values():
    assert render_query([("product_id", "BTC USD&x")]) == "?product_id=BTC+USD%26x"


def test_accounts_request():
    assert request_builder.accounts() == ApiRequest("GET", "/accounts", "")


def test_account_request():
    req = request_builder.account(AccountId("a1b2"))
    assert req.method == "GET"
    assert req.request_path == "/accounts/a1b2"
    assert req.body == ""


def test_account_request_rejects_empty_id():
    with pytest.raises(ValueError, match="account_id cannot be empty"):
        request_builder.account(AccountId(""))
    with pytest.raises(ValueError, match="account_id cannot be empty"):
        request_builder.account(AccountId("   "))


def test_list_orders_defaults_to_status_all():
    """No statuses and no product: query is exactly status=all."""
    req = request_builder.list_orders(None, None)
    assert req.method == "GET"
    assert req.request_path == "/orders?status=all"
    assert req.body == ""


def test_list_orders_deduplicates_statuses_and_adds_product():
    req = request_builder.list_orders(
        [Status.DONE, Status.OPEN, Status.DONE], ProductId("BTC-USD")
    )
    path, items = query_items(req.request_path)

    assert path == "/orders"
    status_values = [value for key, value in items if key == "status"]
    assert sorted(status_values) == ["done", "open"]
    assert [value for key, value in items if key == "product_id"] == ["BTC-USD"]
    assert len(items) == 3


def test_list_orders_status_order_is_canonical():
    """Same filter in any input order renders to the same (signed) path."""
    a = request_builder.list_orders([Status.DONE, Status.OPEN])
    b = request_builder.list_orders([Status.OPEN, Status.DONE, Status.OPEN])
    assert a.request_path == b.request_path == "/orders?status=open&status=done"


def test_list_orders_statuses_are_lowercase():
    req = request_builder.list_orders([Status.PENDING, Status.ACTIVE])
    _, items = query_items(req.request_path)
    assert all(value == value.lower() for _, value in items)


def test_list_orders_product_only_keeps_default_status():
    req = request_builder.list_orders(None, ProductId("ETH-USD"))
    assert req.request_path == "/orders?status=all&product_id=ETH-USD"


def test_list_orders_explicit_empty_list_sends_no_status():
    req = request_builder.list_orders([], ProductId("ETH-USD"))
    assert req.request_path == "/orders?product_id=ETH-USD"


def test_place_order_minimal_body_omits_optional_fields():
    req = request_builder.place_order(
        ProductId("BTC-USD"), Side.BUY, Decimal("0.01"), Decimal("100.00"), False
    )
    assert req.method == "POST"
    assert req.request_path == "/orders"

    body = json.loads(req.body)
    assert body == {
        "product_id": "BTC-USD",
        "side": "buy",
        "size": "0.01",
        "price": "100.00",
        "post_only": False,
    }
    assert "type" not in body
    assert "stp" not in body
    assert "time_in_force" not in body
    assert "null" not in req.body


def test_place_order_full_body():
    req = request_builder.place_order(
        ProductId("BTC-USD"),
        Side.SELL,
        Decimal("1.5"),
        Decimal("42000"),
        True,
        order_type=OrderType.LIMIT,
        stp=STP.CANCEL_OLDEST,
        time_in_force=TimeInForce.IOC,
    )
    body = json.loads(req.body)
    assert body["side"] == "sell"
    assert body["post_only"] is True
    assert body["type"] == "limit"
    assert body["stp"] == "co"
    assert body["time_in_force"] == "IOC"


def test_place_order_has_no_query_string():
    req = request_builder.place_order(
        ProductId("BTC-USD"), Side.BUY, Decimal("1"), Decimal("1"), False
    )
    assert "?" not in req.request_path


def test_place_order_decimals_never_use_exponent():
    req = request_builder.place_order(
        ProductId("BTC-USD"), Side.BUY, Decimal("1E-8"), Decimal("5E+3"), False
    )
    body = json.loads(req.body)
    assert body["size"] == "0.00000001"
    assert body["price"] == "5000"


def test_place_order_float_sizes_keep_full_precision():
    req = request_builder.place_order(
        ProductId("BTC-USD"), Side.BUY, 1e-8, 30000.5, False
    )
    body = json.loads(req.body)
    assert body["size"] == "0.00000001"
    assert body["price"] == "30000.5"


def test_place_order_rejects_empty_product():
    with pytest.raises(ValueError, match="product_id cannot be empty"):
        request_builder.place_order(ProductId(""), Side.BUY, Decimal("1"), Decimal("1"), False)


def test_cancel_order_request():
    req = request_builder.cancel_order(OrderId("d0c5340b-6d6c"))
    assert req.method == "DELETE"
    assert req.request_path == "/orders/d0c5340b-6d6c"
    assert req.body == ""


def test_cancel_order_escapes_path_segment():
    req = request_builder.cancel_order(OrderId("a/b"))
    assert req.request_path == "/orders/a%2Fb"


def test_cancel_all_without_product():
    req = request_builder.cancel_all()
    assert req == ApiRequest("DELETE", "/orders", "")


def test_cancel_all_with_product():
    req = request_builder.cancel_all(ProductId("BTC-USD"))
    assert req.request_path == "/orders?product_id=BTC-USD"


@pytest.mark.parametrize(
    "product_id, order_id, expected",
    [
        (None, None, "/fills"),
        ("BTC-USD", None, "/fills?product_id=BTC-USD"),
        (None, "abc", "/fills?order_id=abc"),
        ("BTC-USD", "abc", "/fills?product_id=BTC-USD&order_id=abc"),
    ],
)
def test_fills_query(product_id, order_id, expected):
    req = request_builder.fills(
        ProductId(product_id) if product_id else None,
        OrderId(order_id) if order_id else None,
    )
    assert req.method == "GET"
    assert req.request_path == expected
