"""
Content Fetcher component for the Opportunity Scanner service.

Downloads the HTML of a subreddit page with a shared ``httpx.AsyncClient``.
"""
import logging
from typing import Optional

import httpx

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class ContentFetcher:
    """
    Fetches subreddit pages over HTTP.

    One GET per topic, no retries. Any transport error or non-2xx status
    becomes a ``FetchError``.
    """

    def __init__(
        self,
        base_url: str = settings.REDDIT_BASE_URL,
        user_agent: str = settings.FETCH_USER_AGENT,
        timeout: Optional[float] = settings.FETCH_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Site root the ``/r/<topic>`` path is appended to.
            user_agent: ``User-Agent`` header sent with every request.
            timeout: Request timeout in seconds; ``None`` keeps the httpx default.
            client: Optional pre-built client (tests inject one with a mock transport).
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        if client is None:
            client_kwargs = {
                "headers": {"User-Agent": user_agent},
                "follow_redirects": True,
            }
            if timeout is not None:
                client_kwargs["timeout"] = httpx.Timeout(timeout)
            client = httpx.AsyncClient(**client_kwargs)
        self.client = client

    def build_url(self, topic: str) -> str:
        """Canonical URL of a subreddit page."""
        return f"{self.base_url}/r/{topic}"

    async def fetch(self, topic: str) -> str:
        """
        Returns the raw markup of the subreddit page for ``topic``.

        Raises:
            FetchError: On transport failure or a non-2xx response.
        """
        url = self.build_url(topic)
        logger.info(f"Fetching content from: {url}")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Error fetching {url}: {e}")
            raise FetchError(str(e), original_error=e) from e

        logger.info(f"Response status for {url}: {response.status_code} ({len(response.text)} chars)")
        return response.text

    async def close(self) -> None:
        """Close the underlying HTTP client if this fetcher created it."""
        if self._owns_client:
            await self.client.aclose()
            logger.info("Content fetcher HTTP client closed")
