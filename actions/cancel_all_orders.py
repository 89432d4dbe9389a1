#!/usr/bin/env python3
"""
Cancel all open Coinbase Pro orders, optionally for a single product.

**Usage**:
    python actions/cancel_all_orders.py --product-id BTC-USD
    python actions/cancel_all_orders.py --yes          # every product, no prompt

**Requirements**:
  - API key with "trade" permission

Without --yes the script asks for confirmation first, since there is no undo.
"""

import argparse
import sys
from pathlib import Path

import requests

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.models.types import ProductId
from src.venues.coinbase_pro_client import (
    CoinbaseProClient,
    CoinbaseProClientError,
    CoinbaseProAuthenticationError,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Cancel all open Coinbase Pro orders")
    parser.add_argument(
        "--product-id",
        type=str,
        default=None,
        help="Only cancel orders for this product (default: all products)",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    return parser.parse_args(argv)


def confirm(product_id, input_fn=input) -> bool:
    """Ask the user to confirm the cancellation. Anything but y/yes aborts."""
    scope = f"all open {product_id} orders" if product_id else "ALL open orders on every product"
    answer = input_fn(f"Cancel {scope}? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def main(argv=None):
    args = parse_args(argv)

    try:
        settings = get_settings(require_coinbase_pro=True)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    product_id = ProductId(args.product_id) if args.product_id else None

    try:
        if not args.yes and not confirm(product_id):
            print("Aborted.")
            sys.exit(0)

        with CoinbaseProClient(settings.coinbase_pro) as client:
            cancelled = client.cancel_all(product_id)

    except CoinbaseProAuthenticationError as e:
        print(f"Error: Authentication failed: {e}", file=sys.stderr)
        print("Cancelling orders needs an API key with trade permission.", file=sys.stderr)
        sys.exit(2)
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

    print(f"✓ Cancelled {len(cancelled)} order(s)")
    for order_id in cancelled:
        print(f"  {order_id}")
    sys.exit(0)


if __name__ == "__main__":
    main()
