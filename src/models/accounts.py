"""
Account model for the /accounts endpoints.

Each Coinbase Pro profile holds one account per currency. The API reports
balances as decimal strings; `available` is what can be traded right now,
`hold` is what is reserved by open orders (balance = available + hold).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .types import AccountId, to_decimal


@dataclass(frozen=True)
class Account:
    """
    A single-currency trading account.

    Attributes:
        id: Account id (UUID string).
        currency: Currency code (e.g., "BTC", "USD").
        balance: Total funds in the account.
        available: Funds available for trading.
        hold: Funds on hold by open orders.
        profile_id: Id of the profile the account belongs to.
        trading_enabled: Whether trading is enabled; None if not reported.
    """
    id: AccountId
    currency: str
    balance: Decimal
    available: Decimal
    hold: Decimal
    profile_id: str
    trading_enabled: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """
        Create an Account from a decoded JSON object.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a balance is not a valid decimal.
        """
        return cls(
            id=AccountId(data["id"]),
            currency=data["currency"],
            balance=to_decimal(data.get("balance"), "balance"),
            available=to_decimal(data.get("available"), "available"),
            hold=to_decimal(data.get("hold"), "hold"),
            profile_id=data["profile_id"],
            trading_enabled=data.get("trading_enabled"),
        )
