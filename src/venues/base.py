"""
Authenticator protocol: the seam between request construction and signing.

**Conceptual**: The client knows how to build requests and how to send them;
it does not know how the exchange wants them signed. Anything that can turn
(method, request_path, body) into a dict of headers is an Authenticator.

**Why a Protocol?**
  - Structural typing: CoinbaseProAuth does not inherit from anything, and
    tests can pass a tiny stub object with a headers() method.
  - Keeps the client independent of the signing scheme (HMAC today; the
    exchange has also used other key types).
"""

from typing import Dict, Protocol


class Authenticator(Protocol):
    """
    Produces authentication headers for one request.

    Implementations MUST sign exactly the strings they are given: the
    request_path includes the rendered query string and the body is the exact
    JSON text that will be sent ("" for requests without a body).
    """

    def headers(self, method: str, request_path: str, body: str) -> Dict[str, str]:
        """
        Return headers that authenticate this request.

        Args:
            method: Upper-case HTTP method.
            request_path: Path plus query string, e.g. "/orders?status=all".
            body: Request body text, "" if none.

        Returns:
            Headers to merge into the outgoing request.
        """
        ...
