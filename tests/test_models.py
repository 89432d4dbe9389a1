"""
Tests for the account, order and fill models.

Payload fixtures (conftest.py) mirror the examples in the exchange's API
documentation.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.models.accounts import Account
from src.models.fills import Fill
from src.models.orders import Order, PlaceOrderBody, statuses
from src.models.types import (
    OrderType,
    Side,
    STP,
    Status,
    TimeInForce,
    to_decimal,
    to_timestamp,
)


def test_statuses_deduplicates_and_orders():
    assert statuses([Status.DONE, Status.OPEN, Status.DONE]) == [Status.OPEN, Status.DONE]


def test_statuses_empty():
    assert statuses([]) == []


def test_status_all_is_last():
    assert list(Status)[-1] == Status.ALL


def test_account_from_dict(account_payload):
    acct = Account.from_dict(account_payload)

    assert acct.currency == "BTC"
    assert acct.balance == Decimal("0.5")
    assert acct.hold == Decimal("0.1")
    assert acct.trading_enabled is True


def test_account_missing_field(account_payload):
    del account_payload["currency"]
    with pytest.raises(KeyError):
        Account.from_dict(account_payload)


def test_account_bad_decimal(account_payload):
    account_payload["balance"] = "lots"
    with pytest.raises(ValueError, match="balance"):
        Account.from_dict(account_payload)


def test_order_from_dict(order_payload):
    order = Order.from_dict(order_payload)

    assert order.side == Side.BUY
    assert order.order_type == OrderType.LIMIT
    assert order.status == Status.PENDING
    assert order.stp == STP.DECREASE_AND_CANCEL
    assert order.time_in_force == TimeInForce.GTC
    assert order.price == Decimal("0.1")
    assert order.created_at.tzinfo is not None
    assert order.created_at.year == 2016
    assert order.done_at is None
    assert not order.is_done


def test_order_market_without_price(order_payload):
    order_payload.update({"type": "market", "funds": "100.00"})
    del order_payload["price"]
    del order_payload["size"]

    order = Order.from_dict(order_payload)

    assert order.order_type == OrderType.MARKET
    assert order.price is None
    assert order.funds == Decimal("100.00")


def test_order_done(order_payload):
    order_payload.update({
        "status": "done",
        "done_at": "2016-12-08T20:05:00.000Z",
        "done_reason": "filled",
    })
    order = Order.from_dict(order_payload)

    assert order.is_done
    assert order.done_reason == "filled"
    assert order.done_at > order.created_at


def test_place_order_body_omits_none():
    body = PlaceOrderBody("BTC-USD", Side.SELL, Decimal("2"), Decimal("3.50"), True)
    assert body.to_dict() == {
        "product_id": "BTC-USD",
        "side": "sell",
        "size": "2",
        "price": "3.50",
        "post_only": True,
    }


def test_place_order_body_includes_given_options():
    body = PlaceOrderBody(
        "BTC-USD", Side.BUY, Decimal("1"), Decimal("1"), False,
        order_type=OrderType.LIMIT, stp=STP.CANCEL_BOTH, time_in_force=TimeInForce.FOK,
    )
    d = body.to_dict()
    assert d["type"] == "limit"
    assert d["stp"] == "cb"
    assert d["time_in_force"] == "FOK"


def test_fill_from_dict(fill_payload):
    fill = Fill.from_dict(fill_payload)

    assert fill.trade_id == 74
    assert fill.price == Decimal("10.00")
    assert fill.fee == Decimal("0.00025")
    assert fill.side == Side.BUY
    assert not fill.is_maker
    assert fill.created_at == datetime(2014, 11, 7, 22, 19, 28, 578544, tzinfo=timezone.utc)


def test_to_decimal_missing():
    with pytest.raises(ValueError, match="required"):
        to_decimal(None, "price")


def test_to_timestamp_naive_is_utc():
    ts = to_timestamp("2020-01-01T00:00:00", "created_at")
    assert ts == datetime(2020, 1, 1, tzinfo=timezone.utc)


def test_to_timestamp_invalid():
    with pytest.raises(ValueError, match="created_at"):
        to_timestamp("yesterday-ish", "created_at")


def test_place_order_body_converts_floats_exactly():
    body = PlaceOrderBody("BTC-USD", Side.BUY, 1e-8, 30000.5, False)

    assert body.size == Decimal("0.00000001")
    assert body.to_dict()["size"] == "0.00000001"
    assert body.to_dict()["price"] == "30000.5"


def test_place_order_body_rejects_non_numbers():
    with pytest.raises(ValueError, match="size"):
        PlaceOrderBody("BTC-USD", Side.BUY, True, Decimal("1"), False)
    with pytest.raises(ValueError, match="price"):
        PlaceOrderBody("BTC-USD", Side.BUY, Decimal("1"), Decimal("NaN"), False)


@pytest.mark.parametrize("value", ["NaN", "sNaN", "Infinity", "-Infinity", float("inf")])
def test_to_decimal_rejects_non_finite(value):
    with pytest.raises(ValueError, match="finite"):
        to_decimal(value, "price")


def test_account_non_finite_balance(account_payload):
    account_payload["balance"] = "NaN"
    with pytest.raises(ValueError, match="balance"):
        Account.from_dict(account_payload)
