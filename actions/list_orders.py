#!/usr/bin/env python3
"""
List Coinbase Pro orders, optionally filtered by status and product.

**Usage**:
    python actions/list_orders.py                       # all statuses
    python actions/list_orders.py --status open --status pending
    python actions/list_orders.py --product-id BTC-USD --output data/orders.csv

Statuses may repeat; duplicates are ignored. Without --status every order is
listed (status=all).
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import requests

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.data.io import orders_to_frame, write_frame_csv
from src.models.types import ProductId, Status
from src.venues.coinbase_pro_client import (
    CoinbaseProClient,
    CoinbaseProClientError,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="List Coinbase Pro orders",
        epilog="""
Examples:
  # Everything
  python actions/list_orders.py

  # Open BTC-USD orders only
  python actions/list_orders.py --status open --product-id BTC-USD
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--status",
        action="append",
        choices=[status.value for status in Status],
        help="Status filter (repeatable, default: all)",
    )
    parser.add_argument(
        "--product-id",
        type=str,
        default=None,
        help="Only list orders for this product (e.g., BTC-USD)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Also write the orders to this CSV file",
    )
    return parser.parse_args(argv)


def parse_statuses(values: Optional[List[str]]) -> Optional[List[Status]]:
    """Map --status values to Status members; None when no filter was given."""
    if not values:
        return None
    return [Status(value) for value in values]


def main(argv=None):
    args = parse_args(argv)

    try:
        settings = get_settings(require_coinbase_pro=True)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    product_id = ProductId(args.product_id) if args.product_id else None

    try:
        with CoinbaseProClient(settings.coinbase_pro) as client:
            orders = client.list_orders(parse_statuses(args.status), product_id)
    except CoinbaseProClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except requests.Timeout as e:
        print(f"Error: Request timed out: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(2)

    df = orders_to_frame(orders)
    if len(df) == 0:
        print("No orders found.")
    else:
        columns = ["timestamp", "order_id", "product_id", "side", "status", "price", "size", "filled_size"]
        print(df[columns].to_string(index=False))

    if args.output:
        path = write_frame_csv(df, args.output)
        print(f"✓ Saved {len(df)} orders to {path}")

    sys.exit(0)


if __name__ == "__main__":
    main()
