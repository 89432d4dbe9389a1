"""
Clock abstraction used to timestamp signed requests.

Coinbase Pro rejects any request whose CB-ACCESS-TIMESTAMP is more than 30
seconds away from server time, and the timestamp is part of the signed
message. Reading the time through a Clock object instead of calling
time.time() directly lets tests freeze "now" and assert exact signatures.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """
    Abstract time source.

    Anything with a now() returning a timezone-aware datetime is a Clock.
    Production code uses RealClock; tests use FrozenClock.
    """

    def now(self) -> datetime:
        ...


class RealClock:
    """Clock backed by the system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns the same instant.

    **Usage**:
        clock = FrozenClock(datetime(2020, 1, 1, tzinfo=timezone.utc))
        auth = CoinbaseProAuth(key, secret, passphrase, clock=clock)
        # every signature now uses timestamp 1577836800
    """

    def __init__(self, fixed_now: datetime):
        if fixed_now.tzinfo is None:
            raise ValueError("FrozenClock requires a timezone-aware datetime")
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def epoch_seconds(clock: Clock) -> str:
    """
    Current time of `clock` as a Unix timestamp string, as the exchange expects.

    Fractional seconds are kept (the exchange accepts "1577836800.5") but
    whole seconds render without a trailing ".0".

    Example:
        >>> epoch_seconds(FrozenClock(datetime(2020, 1, 1, tzinfo=timezone.utc)))
        '1577836800'
    """
    ts = clock.now().timestamp()
    if ts == int(ts):
        return str(int(ts))
    return f"{ts:.6f}".rstrip("0")
