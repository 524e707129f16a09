"""Simple HTTP fetcher with realistic browser headers."""

import logging
import random
import time

import requests

from customsource.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from customsource.exceptions import BotDetectionError, FetchError
from customsource.models.results import FetchResult
from customsource.utils.headers import HeaderGenerator, UserAgentRotator
from customsource.utils.retry import get_retryer, log_retry


class SimpleFetcher(HTMLFetcher):
    """HTTP fetcher built on a requests session.

    Attributes:
        timeout: Request timeout in seconds
        rotate_user_agent: Whether to pick a new user agent per request
        min_delay: Minimum delay between requests in seconds
        max_delay: Maximum delay between requests in seconds
        max_attempts: Attempts per request, 1 means no retry
        session: Requests session used for connection pooling
        last_request_time: Timestamp of the last request

    """

    def __init__(
        self,
        timeout: int = 30,
        rotate_user_agent: bool = True,
        min_delay: float = 0.0,
        max_delay: float = 0.0,
        max_attempts: int = 1,
        session: requests.Session | None = None,
    ):
        """Initialize the simple fetcher.

        Args:
            timeout: Request timeout in seconds
            rotate_user_agent: If True, use a different user agent for each request
            min_delay: Minimum pause between requests
            max_delay: Maximum pause between requests
            max_attempts: Attempts per request. Defaults to 1 (no retry).
            session: Session to reuse, a new one if None

        """
        self.timeout = timeout
        self.rotate_user_agent = rotate_user_agent
        self.min_delay = min_delay
        self.max_delay = max(max_delay, min_delay)
        self.max_attempts = max_attempts
        self.session = session or requests.Session()
        self.last_request_time = 0.0
        self.logger = logging.getLogger(__name__)

    def _apply_request_delay(self):
        """Apply a random delay between requests to stay polite."""
        if self.max_delay > 0:
            elapsed = time.time() - self.last_request_time
            delay_needed = random.uniform(self.min_delay, self.max_delay)

            if elapsed < delay_needed:
                time.sleep(delay_needed - elapsed)

        self.last_request_time = time.time()

    def _get_headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        """Browser headers for one request, overlaid by ``extra``."""
        user_agent = UserAgentRotator.get_random() if self.rotate_user_agent else UserAgentRotator.get_chrome_windows()
        return HeaderGenerator.generate_headers(user_agent=user_agent, extra=extra)

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch a document with a GET request."""
        return self._request('GET', url, headers)

    def post(self, url: str, data: dict[str, str], headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch a document with a form POST."""
        return self._request('POST', url, headers, data=data)

    def _request(
        self, method: str, url: str, headers: dict[str, str] | None, data: dict[str, str] | None = None
    ) -> FetchResult:
        """Send a request, retrying only when ``max_attempts`` allows it.

        Args:
            method: 'GET' or 'POST'
            url: URL to request
            headers: Source headers
            data: Form body for POST

        Returns:
            FetchResult; failures are reported in ``block_reason`` rather than raised

        Raises:
            BotDetectionError: If the site blocked the request on every attempt

        """
        retryer = get_retryer(
            max_attempts=self.max_attempts,
            exceptions=(FetchError,),
            log_callback=log_retry,
        )
        try:
            for attempt in retryer:
                with attempt:
                    result = self._send(method, url, headers, data)
                    if not result.success and not result.is_blocked:
                        raise FetchError(url, result.block_reason, result.status_code)
                    return result
        except BotDetectionError:
            raise
        except FetchError as e:
            return FetchResult(url=url, html=None, status_code=e.status_code, block_reason=e.reason)
        return FetchResult(url=url, block_reason='No attempt was made')

    def _send(self, method: str, url: str, headers: dict[str, str] | None, data: dict[str, str] | None) -> FetchResult:
        """Send one request and wrap the response."""
        start_time = time.time()
        self._apply_request_delay()

        try:
            response = self.session.request(
                method,
                url,
                headers=self._get_headers(headers),
                data=data,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            self.logger.warning(f'{method} {url} failed: {e}')
            return FetchResult(url=url, block_reason=str(e), fetch_time=time.time() - start_time)

        status_code = response.status_code
        try:
            html = response.text
        except (UnicodeDecodeError, LookupError):
            html = response.content.decode('utf-8', errors='replace')

        is_blocked, indicators = self._check_for_bot_detection(html, status_code)
        if is_blocked:
            raise BotDetectionError(url, status_code, indicators)

        if status_code >= 400:
            return FetchResult(
                url=response.url or url,
                status_code=status_code,
                block_reason=f'HTTP {status_code}',
                fetch_time=time.time() - start_time,
            )

        return FetchResult(
            url=response.url or url,
            html=html,
            status_code=status_code,
            fetch_time=time.time() - start_time,
            metadata=ContentAnalyzer.analyze(html),
        )

    def close(self):
        """Close the session."""
        self.session.close()
