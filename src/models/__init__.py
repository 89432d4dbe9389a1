"""
Typed value objects for the Coinbase Pro authenticated API.

Defines ids, enums and the Account, Order and Fill payloads exchanged with
the exchange, plus the PlaceOrderBody request body.
"""

from .types import (
    AccountId,
    OrderId,
    ProductId,
    Price,
    Size,
    Side,
    OrderType,
    TimeInForce,
    STP,
    Status,
)
from .accounts import Account
from .orders import Order, PlaceOrderBody, statuses
from .fills import Fill

__all__ = [
    "AccountId",
    "OrderId",
    "ProductId",
    "Price",
    "Size",
    "Side",
    "OrderType",
    "TimeInForce",
    "STP",
    "Status",
    "Account",
    "Order",
    "PlaceOrderBody",
    "statuses",
    "Fill",
]
