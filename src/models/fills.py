"""
Fill model for the /fills endpoint.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .types import OrderId, ProductId, Side, to_decimal, to_timestamp


@dataclass(frozen=True)
class Fill:
    """
    A (partial) execution of one of our orders.

    Attributes:
        trade_id: Exchange trade id (integer, unique per product).
        product_id: Product traded.
        order_id: Order this fill belongs to.
        price: Execution price.
        size: Executed size in base currency.
        fee: Fee charged in quote currency.
        side: Side of our order.
        liquidity: "M" (maker) or "T" (taker).
        settled: Whether the fill has settled.
        created_at: Execution time (UTC).
    """
    trade_id: int
    product_id: ProductId
    order_id: OrderId
    price: Decimal
    size: Decimal
    fee: Decimal
    side: Side
    liquidity: str
    settled: bool
    created_at: datetime

    @classmethod
    def from_dict(cls, data: dict) -> "Fill":
        """
        Create a Fill from a decoded JSON object.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field has an unexpected value.
        """
        return cls(
            trade_id=int(data["trade_id"]),
            product_id=ProductId(data["product_id"]),
            order_id=OrderId(data["order_id"]),
            price=to_decimal(data.get("price"), "price"),
            size=to_decimal(data.get("size"), "size"),
            fee=to_decimal(data.get("fee", "0"), "fee"),
            side=Side(data["side"]),
            liquidity=data.get("liquidity", ""),
            settled=bool(data.get("settled", False)),
            created_at=to_timestamp(data.get("created_at"), "created_at"),
        )

    @property
    def is_maker(self) -> bool:
        return self.liquidity == "M"
