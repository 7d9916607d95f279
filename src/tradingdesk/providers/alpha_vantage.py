"""Alpha Vantage HTTP client."""

import logging
from typing import Any, Optional

import httpx

from tradingdesk.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class AlphaVantageProvider:
    """Thin async client for https://www.alphavantage.co/query."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co/query",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._client = client or httpx.AsyncClient()

    async def request(self, params: dict[str, Any], timeout: float) -> dict[str, Any]:
        query = {**params, "apikey": self._api_key}
        logger.debug("Alpha Vantage request function=%s", params.get("function"))
        try:
            response = await self._client.get(self._base_url, params=query, timeout=timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Alpha Vantage request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailableError("Alpha Vantage returned a non-JSON body") from exc

        if not isinstance(body, dict):
            raise UpstreamUnavailableError("Alpha Vantage returned an unexpected body")
        return body

    async def close(self) -> None:
        await self._client.aclose()
