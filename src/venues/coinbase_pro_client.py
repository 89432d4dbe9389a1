"""
HTTP client for the Coinbase Pro authenticated REST API.

**Conceptual**: This module maps each API operation (list accounts, place
order, cancel order, list fills, ...) onto one signed HTTP request and
decodes the JSON response into typed models. It is a thin client: request
construction lives in request_builder, signing lives behind the
Authenticator protocol, and the models know how to decode themselves.

**Request flow** (same for every operation):
  1. request_builder produces ApiRequest(method, request_path, body)
  2. the authenticator signs exactly those three strings
  3. the session sends them, unchanged, to base_url + request_path
  4. the status code is mapped to an exception, or the JSON is decoded

**Error handling**: Two kinds of failure, "request failed" and "decode
failed", both rooted at CoinbaseProClientError. There are no retries: one
call, one request. Callers that want retries wrap the call themselves.
"""

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

import requests

from src.config.settings import CoinbaseProSettings
from src.models.accounts import Account
from src.models.fills import Fill
from src.models.orders import Order
from src.models.types import (
    AccountId,
    OrderId,
    ProductId,
    Price,
    Size,
    Side,
    OrderType,
    TimeInForce,
    STP,
    Status,
)
from src.venues import request_builder
from src.venues.base import Authenticator
from src.venues.coinbase_auth import CoinbaseProAuth
from src.venues.request_builder import ApiRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CoinbaseProClientError(Exception):
    """
    Base exception for Coinbase Pro client errors ("request failed").

    Caller can catch CoinbaseProClientError to handle every failure of this
    client, or catch the subclasses below for fine-grained handling.

    Attributes:
        status_code: HTTP status code, if the server answered at all.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CoinbaseProAuthenticationError(CoinbaseProClientError):
    """
    Raised on 401 Unauthorized / 403 Forbidden.

    **Recovery**: Check key, secret and passphrase; check the key has the
    permission the call needs (view vs trade); check the system clock (the
    exchange rejects timestamps more than 30 seconds off).
    """
    pass


class CoinbaseProNotFoundError(CoinbaseProClientError):
    """
    Raised on 404 Not Found (unknown account id, or an order that is
    already done/cancelled).
    """
    pass


class CoinbaseProRateLimitError(CoinbaseProClientError):
    """
    Raised on 429 Too Many Requests.

    Private endpoints allow a handful of requests per second per profile.
    """
    pass


class CoinbaseProServerError(CoinbaseProClientError):
    """Raised on 5xx responses."""
    pass


class CoinbaseProDecodeError(CoinbaseProClientError):
    """
    Raised when the response body is not valid JSON or does not have the
    expected shape ("decode failed").
    """
    pass


def _error_message(response) -> str:
    """Prefer the exchange's {"message": ...} field over the raw body."""
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text


def _decode_list(payload, decode: Callable[[dict], T], what: str) -> List[T]:
    if not isinstance(payload, list):
        raise CoinbaseProDecodeError(
            f"Expected a JSON array of {what}, got {type(payload).__name__}"
        )
    try:
        return [decode(item) for item in payload]
    except (KeyError, ValueError, TypeError) as e:
        raise CoinbaseProDecodeError(f"Failed to decode {what}: {e!r}") from e


def _decode_one(payload, decode: Callable[[dict], T], what: str) -> T:
    if not isinstance(payload, dict):
        raise CoinbaseProDecodeError(
            f"Expected a JSON object for {what}, got {type(payload).__name__}"
        )
    try:
        return decode(payload)
    except (KeyError, ValueError, TypeError) as e:
        raise CoinbaseProDecodeError(f"Failed to decode {what}: {e!r}") from e


class CoinbaseProClient:
    """
    Client for the Coinbase Pro authenticated endpoints.

    **Responsibilities**:
      - Send ApiRequests built by request_builder, signed by the authenticator
      - Map HTTP status codes to exceptions
      - Decode JSON into Account / Order / Fill models

    **NOT responsible for**:
      - Query string rendering (request_builder)
      - Signing (CoinbaseProAuth or any other Authenticator)
      - Retrying, paging or rate limiting

    **Example usage**:
        >>> from src.config.settings import get_settings
        >>> settings = get_settings(require_coinbase_pro=True)
        >>> with CoinbaseProClient(settings.coinbase_pro) as client:
        ...     for acct in client.accounts():
        ...         print(acct.currency, acct.available)
        ...     open_orders = client.list_orders([Status.OPEN], ProductId("BTC-USD"))
    """

    def __init__(
        self,
        settings: CoinbaseProSettings,
        auth: Optional[Authenticator] = None,
    ):
        """
        Args:
            settings: Credentials, base URL and timeout.
            auth: Authenticator to sign requests. Defaults to CoinbaseProAuth
                built from the credentials in settings.

        Raises:
            ValueError: If auth is not given and the secret is not valid base64.
        """
        self.settings = settings
        self.auth = auth or CoinbaseProAuth(
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            passphrase=settings.passphrase,
        )
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "cbpro_authenticated/0.1",
        })

    # --- Operations ---

    def accounts(self) -> List[Account]:
        """List all trading accounts of the profile (GET /accounts)."""
        payload = self._send(request_builder.accounts())
        return _decode_list(payload, Account.from_dict, "accounts")

    def account(self, account_id: AccountId) -> Account:
        """
        Get a single account (GET /accounts/{account_id}).

        Raises:
            ValueError: If account_id is empty.
            CoinbaseProNotFoundError: If the account does not exist.
        """
        payload = self._send(request_builder.account(account_id))
        return _decode_one(payload, Account.from_dict, "account")

    def list_orders(
        self,
        statuses: Optional[Sequence[Status]] = None,
        product_id: Optional[ProductId] = None,
    ) -> List[Order]:
        """
        List orders (GET /orders).

        Args:
            statuses: Status filters; None means [Status.ALL]. Duplicates are
                dropped.
            product_id: Only list orders for this product.

        Returns:
            Orders matching the filter, as returned by the exchange (first page).
        """
        payload = self._send(request_builder.list_orders(statuses, product_id))
        return _decode_list(payload, Order.from_dict, "orders")

    def place_order(
        self,
        product_id: ProductId,
        side: Side,
        size: Size,
        price: Price,
        post_only: bool,
        order_type: Optional[OrderType] = None,
        stp: Optional[STP] = None,
        time_in_force: Optional[TimeInForce] = None,
    ) -> Order:
        """
        Place a new order (POST /orders).

        Optional arguments left as None are omitted from the body and the
        exchange defaults apply (limit order, good till cancelled, stp=dc).

        Returns:
            The order as accepted by the exchange (status usually "pending").
        """
        request = request_builder.place_order(
            product_id, side, size, price, post_only,
            order_type=order_type, stp=stp, time_in_force=time_in_force,
        )
        logger.info(
            f"Placing {side.value} order: {size} {product_id} @ {price} "
            f"(post_only={post_only})"
        )
        payload = self._send(request)
        return _decode_one(payload, Order.from_dict, "order")

    def cancel_order(self, order_id: OrderId) -> None:
        """
        Cancel one order (DELETE /orders/{order_id}).

        The response body is ignored; success is the 2xx status.

        Raises:
            CoinbaseProNotFoundError: If the order is unknown or already done.
        """
        self._send(request_builder.cancel_order(order_id), decode_json=False)
        logger.info(f"Cancelled order {order_id}")

    def cancel_all(self, product_id: Optional[ProductId] = None) -> List[OrderId]:
        """
        Cancel all open orders, optionally for one product (DELETE /orders).

        Returns:
            Ids of the orders that were cancelled.
        """
        payload = self._send(request_builder.cancel_all(product_id))
        if not isinstance(payload, list) or not all(isinstance(oid, str) for oid in payload):
            raise CoinbaseProDecodeError(
                f"Expected a JSON array of order ids, got: {payload!r}"
            )
        logger.info(f"Cancelled {len(payload)} order(s)")
        return [OrderId(oid) for oid in payload]

    def fills(
        self,
        product_id: Optional[ProductId] = None,
        order_id: Optional[OrderId] = None,
    ) -> List[Fill]:
        """List recent fills for a product and/or an order (GET /fills)."""
        payload = self._send(request_builder.fills(product_id, order_id))
        return _decode_list(payload, Fill.from_dict, "fills")

    # --- Transport ---

    def _send(self, request: ApiRequest, decode_json: bool = True):
        """
        Sign and send one request, returning the decoded JSON payload.

        Raises:
            CoinbaseProAuthenticationError, CoinbaseProNotFoundError,
            CoinbaseProRateLimitError, CoinbaseProServerError: by status code.
            CoinbaseProClientError: Other 4xx, connection or transport errors.
            CoinbaseProDecodeError: If the body is not valid JSON.
            requests.Timeout: If the request exceeds the configured timeout.
        """
        url = f"{self.settings.base_url}{request.request_path}"
        headers = self.auth.headers(request.method, request.request_path, request.body)

        logger.debug(f"{request.method} {request.request_path}")

        try:
            response = self.session.request(
                request.method,
                url,
                data=request.body or None,
                headers=headers,
                timeout=self.settings.timeout_seconds,
            )

        except requests.Timeout as e:
            logger.warning(f"{request.method} {request.request_path} timed out")
            raise requests.Timeout(
                f"Request to Coinbase Pro timed out after {self.settings.timeout_seconds}s "
                f"({request.method} {request.request_path})."
            ) from e

        except requests.ConnectionError as e:
            raise CoinbaseProClientError(
                f"Failed to connect to Coinbase Pro at {self.settings.base_url}. "
                f"Check network connection and base URL."
            ) from e

        except requests.RequestException as e:
            raise CoinbaseProClientError(f"HTTP request failed: {e}") from e

        self._raise_for_status(request, response)

        if not decode_json:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise CoinbaseProDecodeError(
                f"Failed to parse JSON response: {e}. Response: {response.text}",
                status_code=response.status_code,
            ) from e

    def _raise_for_status(self, request: ApiRequest, response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return

        message = _error_message(response)
        logger.error(
            f"{request.method} {request.request_path} failed (status {status}): {message}"
        )

        if status in (401, 403):
            raise CoinbaseProAuthenticationError(
                f"Authentication failed (status {status}). "
                f"Check your API key, secret and passphrase. Response: {message}",
                status_code=status,
            )

        if status == 404:
            raise CoinbaseProNotFoundError(
                f"Not found: {request.request_path}. Response: {message}",
                status_code=status,
            )

        if status == 429:
            raise CoinbaseProRateLimitError(
                f"Rate limit exceeded. Slow down requests. Response: {message}",
                status_code=status,
            )

        if status >= 500:
            raise CoinbaseProServerError(
                f"Coinbase Pro server error (status {status}). Response: {message}",
                status_code=status,
            )

        raise CoinbaseProClientError(
            f"Request failed (status {status}): {message}",
            status_code=status,
        )

    # --- Resource management ---

    def close(self):
        """Close the HTTP session and release pooled connections."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
