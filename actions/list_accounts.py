#!/usr/bin/env python3
"""
List Coinbase Pro account balances.

**Usage**:
    python actions/list_accounts.py
    python actions/list_accounts.py --nonzero

**Requirements**:
  - COINBASE_PRO_API_KEY, COINBASE_PRO_API_SECRET, COINBASE_PRO_PASSPHRASE
    set in .env (a key with "view" permission is enough)

**Example output**:
    $ python actions/list_accounts.py --nonzero
    CURRENCY          BALANCE        AVAILABLE             HOLD
    BTC            0.50000000       0.40000000       0.10000000
    USD         1250.00000000    1250.00000000       0.00000000
"""

import argparse
import sys
from pathlib import Path
from typing import List

import requests

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.models.accounts import Account
from src.venues.coinbase_pro_client import (
    CoinbaseProClient,
    CoinbaseProClientError,
    CoinbaseProAuthenticationError,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="List Coinbase Pro account balances")
    parser.add_argument(
        "--nonzero",
        action="store_true",
        help="Only show accounts with a non-zero balance",
    )
    return parser.parse_args(argv)


def format_accounts(accounts: List[Account], nonzero: bool = False) -> List[str]:
    """
    Render accounts as aligned text lines (header first), sorted by currency.
    """
    if nonzero:
        accounts = [acct for acct in accounts if acct.balance != 0]

    lines = [f"{'CURRENCY':<8} {'BALANCE':>16} {'AVAILABLE':>16} {'HOLD':>16}"]
    for acct in sorted(accounts, key=lambda a: a.currency):
        lines.append(
            f"{acct.currency:<8} {acct.balance:>16} {acct.available:>16} {acct.hold:>16}"
        )
    return lines


def main(argv=None):
    """
    Exit codes:
      - 0: Success
      - 1: Configuration error (missing credentials)
      - 2: API error, timeout or unexpected failure
      - 130: Interrupted
    """
    args = parse_args(argv)

    try:
        settings = get_settings(require_coinbase_pro=True)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        with CoinbaseProClient(settings.coinbase_pro) as client:
            accounts = client.accounts()
    except CoinbaseProAuthenticationError as e:
        print(f"Error: Authentication failed: {e}", file=sys.stderr)
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

    for line in format_accounts(accounts, nonzero=args.nonzero):
        print(line)
    sys.exit(0)


if __name__ == "__main__":
    main()
