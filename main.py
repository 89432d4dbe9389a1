"""
cbpro_authenticated – Main entry point.

Prints the balances of all accounts; a quick way to check that credentials
in .env are picked up and accepted by the exchange.
"""

import logging

from src.config.settings import get_settings
from src.venues.coinbase_pro_client import CoinbaseProClient


def main() -> None:
    """Print one line per account with a non-zero balance."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = get_settings(require_coinbase_pro=True)
    with CoinbaseProClient(settings.coinbase_pro) as client:
        for account in client.accounts():
            if account.balance:
                print(f"{account.currency}: {account.balance} (available {account.available})")


if __name__ == "__main__":
    main()
