import logging
import httpx
from typing import Any, Optional
from fake_useragent import UserAgent

logger = logging.getLogger(__name__)

class HTTPClient:
    def __init__(self, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.ua = UserAgent()
        self.timeout = timeout
        self.client = httpx.AsyncClient(http2=False, follow_redirects=True, transport=transport)

    def _get_headers(self):
        return {
            "User-Agent": self.ua.random,
            "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5,ar;q=0.3",
            "DNT": "1",
            "Connection": "keep-alive",
            "Cache-Control": "no-cache",
        }

    async def get_json(self, url: str) -> Any:
        """
        Fetches a URL and decodes the JSON body.
        Raises httpx.HTTPError on transport or status errors and
        ValueError when the body is not valid JSON. No retries.
        """
        response = await self.client.get(url, headers=self._get_headers(), timeout=self.timeout)
        response.raise_for_status()
        logger.debug(f"Fetched {url} ({response.status_code})")
        return response.json()

    async def close(self):
        await self.client.aclose()
