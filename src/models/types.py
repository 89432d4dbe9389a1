"""
Primitive types shared by the account, order and fill models.

**Conceptual**: Coinbase Pro identifies everything with opaque strings
(account ids and order ids are UUIDs, product ids look like "BTC-USD") and
transmits all prices and sizes as decimal strings. This module gives those
primitives names so the rest of the code reads in domain terms.

**Why Decimal for prices and sizes?**
  - The exchange sends "0.00100000", not 0.001. Parsing into float would
    lose precision on round trips (and order sizes must match exactly).
  - Decimal preserves the string representation, so what we send back is
    exactly what we would have typed.

**Why str-valued enums?**
  - The wire value IS the enum value, so encoding is `member.value` and
    decoding is `Enum(value)`; no lookup tables to keep in sync.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import NewType, Optional, Any

import pandas as pd


AccountId = NewType("AccountId", str)
OrderId = NewType("OrderId", str)
ProductId = NewType("ProductId", str)

Price = Decimal
Size = Decimal


class Side(str, Enum):
    """Order side."""
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Order type. Limit is the exchange default when omitted."""
    LIMIT = "limit"
    MARKET = "market"
    STOP = "stop"


class TimeInForce(str, Enum):
    """
    Time-in-force policy for limit orders.

    GTC: good till cancelled
    GTT: good till time
    IOC: immediate or cancel
    FOK: fill or kill
    """
    GTC = "GTC"
    GTT = "GTT"
    IOC = "IOC"
    FOK = "FOK"


class STP(str, Enum):
    """
    Self-trade prevention policy.

    Applies when an order would match against another order from the same
    user.
    """
    DECREASE_AND_CANCEL = "dc"
    CANCEL_OLDEST = "co"
    CANCEL_NEWEST = "cn"
    CANCEL_BOTH = "cb"


class Status(str, Enum):
    """
    Order lifecycle status, also used as a filter when listing orders.

    ALL is a filter-only value: the exchange never reports an order as "all".
    Declaration order is the order statuses are serialized in.
    """
    OPEN = "open"
    PENDING = "pending"
    ACTIVE = "active"
    DONE = "done"
    ALL = "all"


def to_decimal(value: Any, field: str) -> Decimal:
    """
    Parse a wire value into a Decimal.

    Args:
        value: String (or number) from the JSON payload.
        field: Field name, used in the error message.

    Returns:
        Decimal value.

    Raises:
        ValueError: If value is missing, not a valid number, or not finite
            (NaN and Infinity are rejected).
    """
    if value is None or value == "":
        raise ValueError(f"Field '{field}' is required but missing")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Field '{field}' is not a valid decimal: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Field '{field}' is not a finite decimal: {value!r}")
    return result


def to_optional_decimal(value: Any, field: str) -> Optional[Decimal]:
    """Like to_decimal(), but None (or absent) stays None."""
    if value is None or value == "":
        return None
    return to_decimal(value, field)


def to_timestamp(value: Any, field: str) -> datetime:
    """
    Parse an ISO 8601 timestamp from the exchange into a UTC datetime.

    Coinbase sends timestamps like "2019-11-03T04:19:11.427Z" with a variable
    number of fractional digits, which pandas handles without a format string.

    Raises:
        ValueError: If value is missing or unparseable.
    """
    if not value:
        raise ValueError(f"Field '{field}' is required but missing")
    try:
        return pd.Timestamp(value).tz_convert("UTC").to_pydatetime()
    except TypeError:
        # Naive timestamp: the exchange always means UTC
        return pd.Timestamp(value).tz_localize("UTC").to_pydatetime()
    except ValueError:
        raise ValueError(f"Field '{field}' is not a valid timestamp: {value!r}")


def to_optional_timestamp(value: Any, field: str) -> Optional[datetime]:
    """Like to_timestamp(), but None (or absent) stays None."""
    if not value:
        return None
    return to_timestamp(value, field)


def format_decimal(value: Decimal) -> str:
    """
    Format a Decimal for the wire without exponent notation.

    Decimal("1E-8") would otherwise be sent as "1E-8", which the exchange
    rejects; format(..., "f") gives "0.00000001".
    """
    return format(value, "f")
