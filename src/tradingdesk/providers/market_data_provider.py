"""Upstream quote provider protocol."""

from typing import Any, Protocol


class UpstreamQuoteProvider(Protocol):
    """
    Protocol for the rate-limited third-party quote API.

    request() takes the query parameters for one call (function, symbol or
    keywords, interval, outputsize) and returns the decoded JSON body.
    Transport failures raise UpstreamUnavailableError. A body that carries an
    error message or a rate-limit notice is returned as-is; interpreting it
    is the gateway's job.
    """

    async def request(self, params: dict[str, Any], timeout: float) -> dict[str, Any]:
        """Issue one upstream call and return the JSON body."""
        ...

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        ...
