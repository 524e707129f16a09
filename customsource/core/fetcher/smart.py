"""Smart waterfall fetcher: try simple first, escalate if blocked."""

from customsource.core.fetcher.base import HTMLFetcher
from customsource.core.fetcher.playwright import PlaywrightFetcher
from customsource.core.fetcher.simple import SimpleFetcher
from customsource.exceptions import BotDetectionError
from customsource.models.results import FetchResult


class SmartFetcher(HTMLFetcher):
    """Plain HTTP first, a real browser when the site blocks or needs JavaScript.

    This is the default for sources with Cloudflare bypass enabled. POST
    requests always go through plain HTTP.
    """

    def __init__(self, timeout: int = 30, playwright_timeout: int = 60000):
        """Initialize smart fetcher with both simple and Playwright fetchers.

        Args:
            timeout: Timeout for simple fetcher in seconds
            playwright_timeout: Timeout for Playwright fetcher in milliseconds

        """
        self.simple_fetcher = SimpleFetcher(timeout=timeout)
        self.playwright_fetcher = PlaywrightFetcher(timeout=playwright_timeout)

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch with the simple fetcher, escalating to Playwright."""
        try:
            result = self.simple_fetcher.fetch(url, headers)
            if not result.metadata.requires_js:
                return result
        except BotDetectionError:
            pass

        return self.playwright_fetcher.fetch(url, headers)

    def post(self, url: str, data: dict[str, str], headers: dict[str, str] | None = None) -> FetchResult:
        """Post through the simple fetcher."""
        return self.simple_fetcher.post(url, data, headers)

    def close(self):
        """Close the underlying session."""
        self.simple_fetcher.close()
