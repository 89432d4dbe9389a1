"""
Configuration settings for the Coinbase Pro client.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at startup, ensuring fail-fast behavior if credentials are missing or invalid.

**Why centralized config?**
  - Single source of truth for API credentials and endpoints.
  - Easy to test (inject fake settings instead of reading from environment).
  - Fail-fast validation (missing API secret -> clear error at startup, not
    a confusing "invalid signature" from the exchange mid-run).
  - Secrets management (credentials loaded from .env, never hardcoded).

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import base64
import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (dev/local environments); real environment wins
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


PRODUCTION_BASE_URL = "https://api.pro.coinbase.com"
SANDBOX_BASE_URL = "https://api-public.sandbox.pro.coinbase.com"

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class CoinbaseProSettings:
    """
    Configuration for the Coinbase Pro authenticated API.

    **Credentials**: Coinbase Pro API keys come as a triple: key, secret
    (base64) and a passphrase chosen at creation time. All three are needed
    to sign requests.

    **Security note**: credentials should:
      - Be loaded from environment variables (COINBASE_PRO_API_KEY, ...).
      - Never be hardcoded in source code or committed to git.
      - Be created with the minimum permissions needed (view/trade).

    **Sandbox**: The exchange runs a sandbox with separate keys. Setting
    sandbox=True switches the default base URL; an explicit base_url always
    wins.

    Attributes:
        api_key: API key. REQUIRED.
        api_secret: Base64-encoded API secret. REQUIRED.
        passphrase: API key passphrase. REQUIRED.
        base_url: REST endpoint (default: production).
        timeout_seconds: HTTP request timeout in seconds (default 30).
        sandbox: Whether the settings target the sandbox.
    """
    api_key: str
    api_secret: str
    passphrase: str
    base_url: str = PRODUCTION_BASE_URL
    timeout_seconds: int = 30
    sandbox: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        missing = [
            name
            for name, value in (
                ("COINBASE_PRO_API_KEY", self.api_key),
                ("COINBASE_PRO_API_SECRET", self.api_secret),
                ("COINBASE_PRO_PASSPHRASE", self.passphrase),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"Missing required setting(s): {', '.join(missing)}. "
                "Please set them in your .env file or environment variables."
            )
        if not self.base_url:
            raise ValueError("COINBASE_PRO_BASE_URL cannot be empty")
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )
        try:
            base64.b64decode(self.api_secret, validate=True)
        except binascii.Error as e:
            raise ValueError(
                f"COINBASE_PRO_API_SECRET is not valid base64: {e}"
            ) from e

    @classmethod
    def from_env(cls) -> "CoinbaseProSettings":
        """
        Load Coinbase Pro settings from environment variables.

        **Environment variables**:
          - COINBASE_PRO_API_KEY (required)
          - COINBASE_PRO_API_SECRET (required, base64)
          - COINBASE_PRO_PASSPHRASE (required)
          - COINBASE_PRO_SANDBOX (optional): "true" to target the sandbox.
          - COINBASE_PRO_BASE_URL (optional): overrides the sandbox switch.
          - COINBASE_PRO_TIMEOUT_SECONDS (optional): defaults to 30.

        Returns:
            CoinbaseProSettings loaded from environment.

        Raises:
            ValueError: If a credential is missing or the timeout is not an integer.

        Usage example:
            >>> # In .env file:
            >>> # COINBASE_PRO_API_KEY=...
            >>> # COINBASE_PRO_API_SECRET=...
            >>> # COINBASE_PRO_PASSPHRASE=...
            >>> # COINBASE_PRO_SANDBOX=true
            >>>
            >>> settings = CoinbaseProSettings.from_env()
            >>> print(settings.base_url)  # sandbox URL
        """
        sandbox = os.getenv("COINBASE_PRO_SANDBOX", "false").lower() in _TRUE_VALUES
        default_url = SANDBOX_BASE_URL if sandbox else PRODUCTION_BASE_URL
        base_url = os.getenv("COINBASE_PRO_BASE_URL") or default_url
        timeout_str = os.getenv("COINBASE_PRO_TIMEOUT_SECONDS", "30")

        try:
            timeout_seconds = int(timeout_str)
        except ValueError:
            raise ValueError(
                f"COINBASE_PRO_TIMEOUT_SECONDS must be an integer, got: {timeout_str}"
            )

        return cls(
            api_key=os.getenv("COINBASE_PRO_API_KEY", ""),
            api_secret=os.getenv("COINBASE_PRO_API_SECRET", ""),
            passphrase=os.getenv("COINBASE_PRO_PASSPHRASE", ""),
            base_url=base_url.rstrip("/"),
            timeout_seconds=timeout_seconds,
            sandbox=sandbox,
        )


@dataclass(frozen=True)
class Settings:
    """
    Top-level settings object.

    Attributes:
        coinbase_pro: Coinbase Pro API settings. None if credentials are not
            configured (e.g., when only working with exported CSV files).
    """
    coinbase_pro: Optional[CoinbaseProSettings] = None

    @classmethod
    def from_env(cls, require_coinbase_pro: bool = False) -> "Settings":
        """
        Load global settings from environment variables.

        Args:
            require_coinbase_pro: If True, raise if Coinbase Pro credentials
                are missing. If False (default), they are optional.

        Raises:
            ValueError: If require_coinbase_pro=True and credentials are missing.
        """
        coinbase_pro_settings = None
        try:
            coinbase_pro_settings = CoinbaseProSettings.from_env()
        except ValueError as e:
            if require_coinbase_pro:
                raise ValueError(
                    f"Coinbase Pro settings are required but could not be loaded: {e}"
                )

        return cls(coinbase_pro=coinbase_pro_settings)


_default_settings: Optional[Settings] = None


def get_settings(require_coinbase_pro: bool = False) -> Settings:
    """
    Get the global settings singleton (loaded from environment on first call).

    Tests should build Settings/CoinbaseProSettings directly instead, or call
    reset_settings() between cases.

    Raises:
        ValueError: If require_coinbase_pro=True and credentials are missing.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env(require_coinbase_pro=require_coinbase_pro)

    if require_coinbase_pro and _default_settings.coinbase_pro is None:
        raise ValueError(
            "Coinbase Pro settings are required but not configured. "
            "Please set COINBASE_PRO_API_KEY, COINBASE_PRO_API_SECRET and "
            "COINBASE_PRO_PASSPHRASE in your .env file."
        )

    return _default_settings


def reset_settings():
    """Reset the global settings singleton (for testing)."""
    global _default_settings
    _default_settings = None
