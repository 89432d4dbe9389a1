#!/usr/bin/env python3
"""
Export Coinbase Pro fills to CSV.

**Purpose**: Pull recent fills for a product and/or an order and save them
to data/fills/, e.g. to reconcile fees or feed a tax tool.

**Usage**:
    python actions/export_fills.py --product-id BTC-USD
    python actions/export_fills.py --order-id d0c5340b-6d6c-49d9-b567-48c4bfca13d2
    python actions/export_fills.py --product-id ETH-USD --output data/fills/eth.csv

**What this script does**:
  1. Parse command line arguments (at least one of --product-id / --order-id)
  2. Load Coinbase Pro settings from environment (.env file)
  3. Fetch fills (GET /fills)
  4. Save to CSV and print a per-side summary

**Example output**:
    $ python actions/export_fills.py --product-id BTC-USD
    Fetching fills (product_id=BTC-USD)...
    ✓ Fetched 12 fills
      buy:  0.31000000 @ avg 41210.55 (fees 12.77)
      sell: 0.10000000 @ avg 42990.00 (fees 4.30)
    ✓ Saved to data/fills/BTC-USD_fills.csv
"""

import argparse
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional

import requests

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.data.io import write_fills_csv
from src.models.fills import Fill
from src.models.types import OrderId, ProductId
from src.venues.coinbase_pro_client import (
    CoinbaseProClient,
    CoinbaseProClientError,
    CoinbaseProAuthenticationError,
    CoinbaseProRateLimitError,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Export Coinbase Pro fills to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--product-id", type=str, default=None, help="Product filter (e.g., BTC-USD)")
    parser.add_argument("--order-id", type=str, default=None, help="Order filter")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output CSV path (default: data/fills/<product or order>_fills.csv)",
    )
    args = parser.parse_args(argv)
    if not args.product_id and not args.order_id:
        parser.error("at least one of --product-id or --order-id is required")
    return args


def default_output_path(product_id: Optional[str], order_id: Optional[str]) -> Path:
    """data/fills/<product_id or order_id>_fills.csv under the project root."""
    stem = product_id or order_id
    return project_root / "data" / "fills" / f"{stem}_fills.csv"


def summarize_fills(fills: List[Fill]) -> Dict[str, Dict[str, Decimal]]:
    """
    Aggregate fills per side.

    Returns:
        {"buy": {"size": ..., "notional": ..., "fees": ..., "avg_price": ...}, ...}
        Sides with no fills are absent.
    """
    summary: Dict[str, Dict[str, Decimal]] = {}
    for fill in fills:
        side = summary.setdefault(
            fill.side.value,
            {"size": Decimal("0"), "notional": Decimal("0"), "fees": Decimal("0")},
        )
        side["size"] += fill.size
        side["notional"] += fill.size * fill.price
        side["fees"] += fill.fee

    for side in summary.values():
        side["avg_price"] = side["notional"] / side["size"] if side["size"] else Decimal("0")
    return summary


def main(argv=None):
    """
    Exit codes:
      - 0: Success
      - 1: Configuration error
      - 2: API error, timeout or unexpected failure
      - 130: Interrupted
    """
    args = parse_args(argv)

    try:
        settings = get_settings(require_coinbase_pro=True)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    product_id = ProductId(args.product_id) if args.product_id else None
    order_id = OrderId(args.order_id) if args.order_id else None

    filters = ", ".join(
        f"{name}={value}" for name, value in (("product_id", product_id), ("order_id", order_id)) if value
    )
    print(f"Fetching fills ({filters})...")

    try:
        with CoinbaseProClient(settings.coinbase_pro) as client:
            fills = client.fills(product_id=product_id, order_id=order_id)

    except CoinbaseProAuthenticationError as e:
        print(f"Error: Authentication failed: {e}", file=sys.stderr)
        sys.exit(2)
    except CoinbaseProRateLimitError as e:
        print(f"Error: Rate limit exceeded: {e}", file=sys.stderr)
        print("Wait a moment before retrying.", file=sys.stderr)
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

    print(f"✓ Fetched {len(fills)} fills")
    for side, stats in sorted(summarize_fills(fills).items()):
        print(
            f"  {side}: {stats['size']} @ avg {stats['avg_price']:.2f} "
            f"(fees {stats['fees']:.2f})"
        )

    output = Path(args.output) if args.output else default_output_path(args.product_id, args.order_id)
    write_fills_csv(fills, output)
    print(f"✓ Saved to {output}")
    sys.exit(0)


if __name__ == "__main__":
    main()
