"""Playwright-based fetcher using a real browser."""

import time

from customsource.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from customsource.exceptions import BotDetectionError
from customsource.models.results import FetchResult
from customsource.utils.headers import UserAgentRotator


class PlaywrightFetcher(HTMLFetcher):
    """Playwright-based fetcher using a real browser.

    Slower, but gets through Cloudflare interstitials that plain HTTP cannot.
    """

    def __init__(self, timeout: int = 60000, headless: bool = True):
        """Initialize Playwright fetcher.

        Args:
            timeout: Page load timeout in milliseconds
            headless: Run browser in headless mode

        """
        self.timeout = timeout
        self.headless = headless

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch a page in Chromium with the source headers applied."""
        start_time = time.time()

        try:
            from playwright.sync_api import sync_playwright
        except ImportError as err:
            raise ImportError(
                'Playwright not installed. Install with: pip install playwright && playwright install chromium'
            ) from err

        extra_headers = dict(headers or {})
        user_agent = next(
            (value for name, value in extra_headers.items() if name.lower() == 'user-agent'),
            UserAgentRotator.get_chrome_windows(),
        )
        extra_headers = {name: value for name, value in extra_headers.items() if name.lower() != 'user-agent'}

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=self.headless, args=['--disable-blink-features=AutomationControlled', '--no-sandbox']
                )
                context = browser.new_context(
                    user_agent=user_agent,
                    extra_http_headers=extra_headers,
                    viewport={'width': 1920, 'height': 1080},
                    locale='en-US',
                )

                page = context.new_page()
                response = page.goto(url, wait_until='networkidle', timeout=self.timeout)
                page.wait_for_timeout(1000)

                html = page.content()
                final_url = page.url
                status_code = response.status if response else None

                browser.close()

        except Exception as e:
            return FetchResult(url=url, block_reason=str(e), fetch_time=time.time() - start_time)

        is_blocked, indicators = self._check_for_bot_detection(html, status_code or 200)
        if is_blocked:
            raise BotDetectionError(url, status_code or 0, indicators)

        return FetchResult(
            url=final_url or url,
            html=html,
            status_code=status_code,
            fetch_time=time.time() - start_time,
            metadata=ContentAnalyzer.analyze(html),
        )
