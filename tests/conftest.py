"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, and
provides shared fixtures: test settings, a frozen clock and sample API
payloads in the shape the exchange returns them.
"""
import base64
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.config.settings import CoinbaseProSettings  # noqa: E402
from src.utils.time import FrozenClock  # noqa: E402


TEST_SECRET = base64.b64encode(b"test-secret-bytes").decode("ascii")


@pytest.fixture
def coinbase_settings():
    """CoinbaseProSettings with fake credentials pointing at a fake host."""
    return CoinbaseProSettings(
        api_key="test_key",
        api_secret=TEST_SECRET,
        passphrase="test_passphrase",
        base_url="https://api.test-coinbase.com",
        timeout_seconds=30,
    )


@pytest.fixture
def frozen_clock():
    """Clock frozen at 2020-01-01T00:00:00Z (epoch 1577836800)."""
    return FrozenClock(datetime(2020, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def account_payload():
    return {
        "id": "71452118-efc7-4cc4-8780-a5e22d4baa53",
        "currency": "BTC",
        "balance": "0.5000000000000000",
        "available": "0.4000000000000000",
        "hold": "0.1000000000000000",
        "profile_id": "75da88c5-05bf-4f54-bc85-5c775bd68254",
        "trading_enabled": True,
    }


@pytest.fixture
def order_payload():
    return {
        "id": "d0c5340b-6d6c-49d9-b567-48c4bfca13d2",
        "price": "0.10000000",
        "size": "0.01000000",
        "product_id": "BTC-USD",
        "side": "buy",
        "stp": "dc",
        "type": "limit",
        "time_in_force": "GTC",
        "post_only": False,
        "created_at": "2016-12-08T20:02:28.53864Z",
        "fill_fees": "0.0000000000000000",
        "filled_size": "0.00000000",
        "executed_value": "0.0000000000000000",
        "status": "pending",
        "settled": False,
    }


@pytest.fixture
def fill_payload():
    return {
        "trade_id": 74,
        "product_id": "BTC-USD",
        "price": "10.00",
        "size": "0.01",
        "order_id": "d50ec984-77a8-460a-b958-66f114b0de9b",
        "created_at": "2014-11-07T22:19:28.578544Z",
        "liquidity": "T",
        "fee": "0.00025",
        "settled": True,
        "side": "buy",
    }
