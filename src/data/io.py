"""
Tabular export of fills and orders.

**Conceptual**: The API returns lists of Fill/Order models. For analysis
(fees paid, average execution price, P&L reconciliation) a DataFrame is far
more convenient, and a CSV on disk is the easiest thing to hand to a
spreadsheet or a tax tool. This module is the single place where models
become rows.

**Conventions**:
  - `timestamp` is always the first column (the fill/order creation time, UTC).
  - Rows are sorted newest first, matching how the exchange pages results.
  - Decimals are written as strings, so no precision is lost in the CSV.
  - Enums are written as their wire values ("buy", "limit", "GTC").
"""

from enum import Enum
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from src.models.fills import Fill
from src.models.orders import Order


FILL_COLUMNS = [
    "timestamp",
    "trade_id",
    "product_id",
    "order_id",
    "side",
    "price",
    "size",
    "fee",
    "liquidity",
    "settled",
]

ORDER_COLUMNS = [
    "timestamp",
    "order_id",
    "product_id",
    "side",
    "order_type",
    "status",
    "price",
    "size",
    "filled_size",
    "executed_value",
    "fill_fees",
    "post_only",
    "time_in_force",
    "stp",
    "settled",
    "done_at",
    "done_reason",
]


def _wire(value):
    """Enum -> wire value; everything else unchanged."""
    if isinstance(value, Enum):
        return value.value
    return value


def _finish(rows: List[dict], columns: List[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=columns)
    if len(df) == 0:
        return df
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df.sort_values("timestamp", ascending=False, kind="stable").reset_index(drop=True)


def fills_to_frame(fills: Iterable[Fill]) -> pd.DataFrame:
    """
    Convert fills into a DataFrame with FILL_COLUMNS, newest first.

    Price, size and fee stay Decimal (object dtype); use
    `df["price"].astype(float)` for numeric work where precision is not a concern.

    Example:
        >>> df = fills_to_frame(client.fills(product_id=ProductId("BTC-USD")))
        >>> df.groupby("side")["size"].sum()
    """
    rows = [
        {
            "timestamp": fill.created_at,
            "trade_id": fill.trade_id,
            "product_id": fill.product_id,
            "order_id": fill.order_id,
            "side": _wire(fill.side),
            "price": fill.price,
            "size": fill.size,
            "fee": fill.fee,
            "liquidity": fill.liquidity,
            "settled": fill.settled,
        }
        for fill in fills
    ]
    return _finish(rows, FILL_COLUMNS)


def orders_to_frame(orders: Iterable[Order]) -> pd.DataFrame:
    """Convert orders into a DataFrame with ORDER_COLUMNS, newest first."""
    rows = [
        {
            "timestamp": order.created_at,
            "order_id": order.id,
            "product_id": order.product_id,
            "side": _wire(order.side),
            "order_type": _wire(order.order_type),
            "status": _wire(order.status),
            "price": order.price,
            "size": order.size,
            "filled_size": order.filled_size,
            "executed_value": order.executed_value,
            "fill_fees": order.fill_fees,
            "post_only": order.post_only,
            "time_in_force": _wire(order.time_in_force),
            "stp": _wire(order.stp),
            "settled": order.settled,
            "done_at": order.done_at,
            "done_reason": order.done_reason,
        }
        for order in orders
    ]
    return _finish(rows, ORDER_COLUMNS)


def write_frame_csv(df: pd.DataFrame, path: Path | str) -> Path:
    """
    Write an exported DataFrame to CSV, creating parent directories.

    Timestamps are written as ISO 8601 strings; Decimals via str() so the
    exact exchange representation survives.

    Returns:
        The path written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df_to_write = df.copy()
    if len(df_to_write) > 0:
        df_to_write["timestamp"] = df_to_write["timestamp"].map(lambda ts: ts.isoformat())
    df_to_write.to_csv(path, index=False)
    return path


def write_fills_csv(fills: Iterable[Fill], path: Path | str) -> Path:
    """Export fills to CSV (see fills_to_frame for the layout)."""
    return write_frame_csv(fills_to_frame(fills), path)


def write_orders_csv(orders: Iterable[Order], path: Path | str) -> Path:
    """Export orders to CSV (see orders_to_frame for the layout)."""
    return write_frame_csv(orders_to_frame(orders), path)
