"""
Request construction for the Coinbase Pro authenticated endpoints.

**Conceptual**: Every call the client makes boils down to three strings:
an HTTP method, a request path (URL path plus rendered query string) and a
body. Coinbase Pro signs exactly these three strings, so they must be
computed once, up front, and then used both for the signature and for the
actual HTTP request. If the query string we sign differs from the query
string requests builds from a params dict (ordering, encoding), the
exchange rejects the request with "invalid signature".

That is why this module renders query strings itself instead of handing a
`params=` dict to requests: the ApiRequest it returns is the single source
of truth for what goes over the wire.

**Wire contract**:
    GET    /accounts
    GET    /accounts/{account_id}
    GET    /orders?status=<repeated>&product_id=<id>
    POST   /orders                      (JSON body)
    DELETE /orders/{order_id}
    DELETE /orders?product_id=<id>
    GET    /fills?product_id=<id>&order_id=<id>

This module does no I/O and has no dependency on requests, which keeps it
trivially testable.
"""

import json
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode

from src.models.orders import PlaceOrderBody, statuses as normalise_statuses
from src.models.types import (
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

GET = "GET"
POST = "POST"
DELETE = "DELETE"

QueryItems = List[Tuple[str, str]]


@dataclass(frozen=True)
class ApiRequest:
    """
    A fully constructed API request, ready to be signed and sent.

    Attributes:
        method: HTTP method ("GET", "POST", "DELETE").
        request_path: Path plus rendered query string, e.g.
            "/orders?status=open&product_id=BTC-USD".
        body: Exact JSON text of the body, or "" if there is none.
    """
    method: str
    request_path: str
    body: str = ""


def render_query(items: Sequence[Tuple[str, str]]) -> str:
    """
    Render query items into a query string with a leading "?".

    Empty input renders to "" (no dangling "?"). Repeated keys are kept in
    the given order, which is how the exchange receives multi-valued filters.

    Example:
        >>> render_query([("status", "open"), ("status", "done")])
        '?status=open&status=done'
        >>> render_query([])
        ''
    """
    if not items:
        return ""
    return "?" + urlencode(list(items))


def _path_segment(value: str, name: str) -> str:
    """Validate and percent-encode a single path segment (an id)."""
    if not value or not str(value).strip():
        raise ValueError(f"{name} cannot be empty")
    return quote(str(value).strip(), safe="")


def product_query(product_id: Optional[ProductId]) -> QueryItems:
    """Query item for an optional product filter."""
    if product_id is None:
        return []
    return [("product_id", str(product_id))]


def order_id_query(order_id: Optional[OrderId]) -> QueryItems:
    """Query item for an optional order filter."""
    if order_id is None:
        return []
    return [("order_id", str(order_id))]


def status_query(status_filter: Optional[Sequence[Status]]) -> QueryItems:
    """
    Query items for the order status filter.

    None means "no filter given" and defaults to [Status.ALL]. Statuses are
    deduplicated and emitted lower-case in canonical order.

    Note an explicit empty list is passed through as no status parameter at
    all, in which case the exchange applies its own default (open, pending
    and active orders).
    """
    if status_filter is None:
        status_filter = [Status.ALL]
    return [("status", status.value.lower()) for status in normalise_statuses(status_filter)]


def accounts() -> ApiRequest:
    """GET /accounts"""
    return ApiRequest(GET, "/accounts")


def account(account_id: AccountId) -> ApiRequest:
    """GET /accounts/{account_id}"""
    return ApiRequest(GET, f"/accounts/{_path_segment(account_id, 'account_id')}")


def list_orders(
    status_filter: Optional[Sequence[Status]] = None,
    product_id: Optional[ProductId] = None,
) -> ApiRequest:
    """
    GET /orders with repeated status parameters and optional product_id.

    Example:
        >>> list_orders().request_path
        '/orders?status=all'
        >>> list_orders([Status.DONE, Status.OPEN, Status.DONE], ProductId("BTC-USD")).request_path
        '/orders?status=open&status=done&product_id=BTC-USD'
    """
    query = status_query(status_filter) + product_query(product_id)
    return ApiRequest(GET, "/orders" + render_query(query))


def place_order(
    product_id: ProductId,
    side: Side,
    size: Size,
    price: Price,
    post_only: bool,
    order_type: Optional[OrderType] = None,
    stp: Optional[STP] = None,
    time_in_force: Optional[TimeInForce] = None,
) -> ApiRequest:
    """
    POST /orders with a JSON body and no query string.

    The body is serialized here (not by requests) because the signature has
    to cover the exact bytes sent.
    """
    if not product_id or not str(product_id).strip():
        raise ValueError("product_id cannot be empty")

    body = PlaceOrderBody(
        product_id=product_id,
        side=side,
        size=size,
        price=price,
        post_only=post_only,
        order_type=order_type,
        stp=stp,
        time_in_force=time_in_force,
    )
    return ApiRequest(POST, "/orders", json.dumps(body.to_dict()))


def cancel_order(order_id: OrderId) -> ApiRequest:
    """DELETE /orders/{order_id}, no body."""
    return ApiRequest(DELETE, f"/orders/{_path_segment(order_id, 'order_id')}")


def cancel_all(product_id: Optional[ProductId] = None) -> ApiRequest:
    """DELETE /orders, optionally restricted to one product."""
    return ApiRequest(DELETE, "/orders" + render_query(product_query(product_id)))


def fills(
    product_id: Optional[ProductId] = None,
    order_id: Optional[OrderId] = None,
) -> ApiRequest:
    """
    GET /fills filtered by product and/or order.

    The exchange requires at least one of the two filters; we leave that
    check to the server so its error message reaches the caller unchanged.
    """
    query = product_query(product_id) + order_id_query(order_id)
    return ApiRequest(GET, "/fills" + render_query(query))
