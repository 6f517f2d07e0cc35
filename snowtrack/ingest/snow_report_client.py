"""Snow report page client with retry and rate limit handling."""

import logging
import time

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; snowtrack/0.1.0)"


class SnowReportClient:
    def __init__(
        self,
        url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 5.0,
    ):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def fetch_html(self) -> str:
        """Fetch the snow report page markup.

        Retries on 503/429 and connection errors with exponential backoff.
        """
        headers = {"User-Agent": self.user_agent, "Accept": "text/html"}

        last_error: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(
                    self.url, headers=headers, timeout=self.timeout, follow_redirects=True
                )
                if resp.status_code in (503, 429) and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Snow report %s returned %d, retrying in %.1fs (attempt %d/%d)",
                        self.url, resp.status_code, delay, attempt + 1, self.max_retries,
                    )
                    time.sleep(delay)
                    continue
                resp.raise_for_status()
                return resp.text
            except httpx.RequestError as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Snow report request error, retrying in %.1fs: %s", delay, e
                    )
                    time.sleep(delay)
                    continue
                raise

        assert last_error is not None
        raise last_error
