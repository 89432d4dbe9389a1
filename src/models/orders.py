"""
Order model, place-order request body and status filter normalisation.

**Conceptual**: Orders flow both ways. PlaceOrderBody is what we send to
POST /orders; Order is what the exchange sends back (from POST /orders and
GET /orders). They are separate types because the response carries
server-assigned fields (id, status, fill progress) the request never has.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from .types import (
    OrderId,
    ProductId,
    Price,
    Size,
    Side,
    OrderType,
    TimeInForce,
    STP,
    Status,
    format_decimal,
    to_decimal,
    to_optional_decimal,
    to_timestamp,
    to_optional_timestamp,
)


def statuses(values: Iterable[Status]) -> List[Status]:
    """
    Deduplicate status filters and put them in canonical order.

    **Conceptual**: The exchange treats repeated status parameters as a set,
    so [DONE, OPEN, DONE] and [OPEN, DONE] are the same filter. Normalising
    here means the same filter always renders to the same query string
    (which matters because the query string is part of the signed message).

    Args:
        values: Status filters in any order, possibly with duplicates.

    Returns:
        Unique statuses in Status declaration order.

    Example:
        >>> statuses([Status.DONE, Status.OPEN, Status.DONE])
        [<Status.OPEN: 'open'>, <Status.DONE: 'done'>]
    """
    unique = set(values)
    return [status for status in Status if status in unique]


@dataclass(frozen=True)
class PlaceOrderBody:
    """
    JSON body for POST /orders.

    Optional fields left as None are omitted from the payload entirely
    (never sent as null), so the exchange applies its own defaults.

    Attributes:
        product_id: Product to trade (e.g., "BTC-USD").
        side: Buy or sell.
        size: Amount of base currency.
        price: Price per unit of base currency.
        post_only: Reject the order if it would take liquidity.
        order_type: Limit (exchange default), market or stop.
        stp: Self-trade prevention policy.
        time_in_force: GTC (exchange default), GTT, IOC or FOK.
    """
    product_id: ProductId
    side: Side
    size: Size
    price: Price
    post_only: bool
    order_type: Optional[OrderType] = None
    stp: Optional[STP] = None
    time_in_force: Optional[TimeInForce] = None

    def __post_init__(self):
        # Floats go through str() so 1e-8 stays 0.00000001 on the wire
        object.__setattr__(self, "size", to_decimal(self.size, "size"))
        object.__setattr__(self, "price", to_decimal(self.price, "price"))

    def to_dict(self) -> dict:
        """Convert to the JSON object expected by the exchange."""
        body = {
            "product_id": self.product_id,
            "side": self.side.value,
            "size": format_decimal(self.size),
            "price": format_decimal(self.price),
            "post_only": self.post_only,
        }
        if self.order_type is not None:
            body["type"] = self.order_type.value
        if self.stp is not None:
            body["stp"] = self.stp.value
        if self.time_in_force is not None:
            body["time_in_force"] = self.time_in_force.value
        return body


@dataclass(frozen=True)
class Order:
    """
    An order as reported by the exchange.

    Market orders may carry `funds` instead of `size`/`price`, so those are
    optional here even though PlaceOrderBody always sets them.
    """
    id: OrderId
    product_id: ProductId
    side: Side
    order_type: OrderType
    created_at: datetime
    status: Status
    settled: bool
    post_only: bool = False
    price: Optional[Decimal] = None
    size: Optional[Decimal] = None
    funds: Optional[Decimal] = None
    stp: Optional[STP] = None
    time_in_force: Optional[TimeInForce] = None
    fill_fees: Decimal = Decimal("0")
    filled_size: Decimal = Decimal("0")
    executed_value: Decimal = Decimal("0")
    done_at: Optional[datetime] = None
    done_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        """
        Create an Order from a decoded JSON object.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a field has an unexpected value (unknown enum,
                bad decimal, bad timestamp).
        """
        stp = data.get("stp")
        time_in_force = data.get("time_in_force")
        return cls(
            id=OrderId(data["id"]),
            product_id=ProductId(data["product_id"]),
            side=Side(data["side"]),
            order_type=OrderType(data.get("type", OrderType.LIMIT.value)),
            created_at=to_timestamp(data.get("created_at"), "created_at"),
            status=Status(data["status"]),
            settled=bool(data.get("settled", False)),
            post_only=bool(data.get("post_only", False)),
            price=to_optional_decimal(data.get("price"), "price"),
            size=to_optional_decimal(data.get("size"), "size"),
            funds=to_optional_decimal(data.get("funds"), "funds"),
            stp=STP(stp) if stp else None,
            time_in_force=TimeInForce(time_in_force) if time_in_force else None,
            fill_fees=to_decimal(data.get("fill_fees", "0"), "fill_fees"),
            filled_size=to_decimal(data.get("filled_size", "0"), "filled_size"),
            executed_value=to_decimal(data.get("executed_value", "0"), "executed_value"),
            done_at=to_optional_timestamp(data.get("done_at"), "done_at"),
            done_reason=data.get("done_reason"),
        )

    @property
    def is_done(self) -> bool:
        return self.status == Status.DONE
