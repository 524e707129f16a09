"""Browser-like request headers, merged with per-source headers."""

import random


class UserAgentRotator:
    """Manages a pool of realistic user agents.

    Attributes:
        USER_AGENTS: Desktop and mobile user agents to pick from

    """

    USER_AGENTS = [
        # Chrome on Windows
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36',
        # Chrome on Mac
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
        # Firefox on Windows
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0',
        # Safari on Mac
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15',
        # Chrome on Android, what a reading app on a phone would send
        'Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Mobile Safari/537.36',
    ]

    @classmethod
    def get_random(cls) -> str:
        """Get a random user agent."""
        return random.choice(cls.USER_AGENTS)

    @classmethod
    def get_chrome_windows(cls) -> str:
        """Get a Chrome on Windows user agent."""
        chrome_windows = [ua for ua in cls.USER_AGENTS if 'Chrome' in ua and 'Windows' in ua]
        return random.choice(chrome_windows)


class HeaderGenerator:
    """Generates browser headers and overlays source headers on top."""

    @staticmethod
    def generate_headers(
        user_agent: str | None = None,
        referer: str | None = None,
        extra: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Generate realistic browser headers.

        Args:
            user_agent: User agent to send, random if None
            referer: Referer to send, omitted if None
            extra: Source headers; they replace generated headers with the same name

        Returns:
            The headers for one request

        """
        if user_agent is None:
            user_agent = UserAgentRotator.get_random()

        headers = {
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
            'Accept-Language': random.choice(['en-US,en;q=0.9', 'en-GB,en;q=0.9', 'en-US,en;q=0.5']),
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive',
            'Upgrade-Insecure-Requests': '1',
        }

        if 'Chrome' in user_agent:
            headers.update(
                {
                    'Sec-Fetch-Dest': 'document',
                    'Sec-Fetch-Mode': 'navigate',
                    'Sec-Fetch-Site': 'none' if referer is None else 'same-origin',
                    'Sec-Fetch-User': '?1',
                }
            )

        if referer:
            headers['Referer'] = referer

        return merge_headers(headers, extra)


def merge_headers(base: dict[str, str], extra: dict[str, str] | None) -> dict[str, str]:
    """Overlay ``extra`` on ``base``, matching header names case-insensitively.

    Args:
        base: Default headers
        extra: Headers that win on conflict, in their own order

    Returns:
        A new header mapping

    """
    if not extra:
        return dict(base)
    overridden = {name.lower() for name in extra}
    merged = {name: value for name, value in base.items() if name.lower() not in overridden}
    merged.update(extra)
    return merged
