"""Abstract base class for HTML fetchers and content analyzer."""

import re
from abc import ABC, abstractmethod

from customsource.models.results import ContentMetadata, FetchResult


class ContentAnalyzer:
    """Analyzes fetched content to detect special cases."""

    @staticmethod
    def analyze(html: str) -> ContentMetadata:
        """Analyze a response body and return metadata.

        Args:
            html: Body of the response

        Returns:
            Metadata describing the body

        """
        metadata = ContentMetadata()
        metadata.content_length = len(html)

        stripped = html.lstrip()
        if stripped.startswith(('{', '[')):
            metadata.content_type = 'json'
            return metadata

        js_data = ContentAnalyzer._detect_javascript_heavy(html.lower())
        metadata.requires_js = js_data['requires_js']
        metadata.js_framework = js_data['framework']

        return metadata

    @staticmethod
    def _detect_javascript_heavy(html_lower: str) -> dict:
        """Detect JavaScript-heavy sites that need browser rendering.

        Args:
            html_lower: The body in lowercase

        Returns:
            A dict of whether JS is required and which framework was seen

        """
        frameworks = {
            'react': ['data-reactroot', 'react-root', '__react'],
            'vue': ['v-if=', 'v-for=', 'vue.js', '__vue'],
            'angular': ['ng-app', 'ng-controller', 'ng-version'],
            'next': ['__next', '_next/static'],
            'nuxt': ['__nuxt', '_nuxt/'],
        }

        detected_framework = None
        for framework, indicators in frameworks.items():
            if any(indicator in html_lower for indicator in indicators):
                detected_framework = framework
                break

        # Under 100 chars of visible body usually means client-side rendering
        body_match = re.search(r'<body[^>]*>(.*?)</body>', html_lower, re.DOTALL)
        if body_match:
            body_content = body_match.group(1)
            body_content = re.sub(r'<script[^>]*>.*?</script>', '', body_content, flags=re.DOTALL)
            body_content = re.sub(r'<style[^>]*>.*?</style>', '', body_content, flags=re.DOTALL)
            minimal_content = len(body_content.strip()) < 100
        else:
            minimal_content = False

        has_noscript_warning = '<noscript>' in html_lower and (
            'enable javascript' in html_lower or 'requires javascript' in html_lower
        )

        requires_js = (detected_framework is not None and minimal_content) or has_noscript_warning

        return {'requires_js': requires_js, 'framework': detected_framework}


class HTMLFetcher(ABC):
    """Abstract base class for HTML fetchers.

    Implement this interface to plug a different HTTP stack into a source.
    Per-source headers are passed with every call and override the
    fetcher's own defaults.
    """

    @abstractmethod
    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch a document with a GET request.

        Args:
            url: URL to fetch
            headers: Extra headers for this request

        Returns:
            FetchResult with the body, metadata and status

        Raises:
            BotDetectionError: If bot detection is triggered

        """
        pass

    def post(self, url: str, data: dict[str, str], headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch a document with a form POST.

        Fetchers that cannot post fall back to a GET on the same URL.

        Args:
            url: URL to post to
            data: Form fields
            headers: Extra headers for this request

        Returns:
            FetchResult with the body, metadata and status

        """
        return self.fetch(url, headers)

    def close(self) -> None:
        """Release any resources held by the fetcher."""
        return None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def _check_for_bot_detection(self, html: str, status_code: int) -> tuple[bool, list[str]]:
        """Check if a response indicates bot detection.

        Args:
            html: Body of the response
            status_code: HTTP status code

        Returns:
            Tuple of (is_blocked, indicators). Returns (False, []) if no blocking detected.

        """
        if status_code in [403, 429, 503]:
            html_check = (html or '')[:2000].lower()
            if 'cloudflare' in html_check or 'cf-' in html_check or 'captcha' in html_check:
                return True, [f'HTTP {status_code}', 'Cloudflare protection']
            return True, [f'HTTP {status_code}']

        if status_code == 200 and html:
            # Only the top of the page, where block messages appear
            html_check = html[:2000].lower()

            strict_indicators = {
                'challenge-form': 'Cloudflare challenge',
                'cf-captcha': 'Cloudflare CAPTCHA',
                'just a moment...</title>': 'Cloudflare interstitial',
                'access denied</title>': 'Access denied page',
                'rate limit exceeded': 'Rate limit',
                'please verify you are human': 'Human verification',
                'enable javascript to continue': 'JavaScript block',
            }

            found = [message for indicator, message in strict_indicators.items() if indicator in html_check]
            return bool(found), found

        return False, []
