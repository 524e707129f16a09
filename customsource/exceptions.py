"""Custom exceptions for customsource."""


class CustomSourceError(Exception):
    """Base class for all customsource exceptions."""

    pass


class FetchError(CustomSourceError):
    """Raised when a document could not be fetched."""

    def __init__(self, url: str, reason: str | None = None, status_code: int | None = None):
        """Initialize fetch error.

        Args:
            url: URL that failed to fetch
            reason: Human-readable failure reason
            status_code: HTTP status code received, if any

        """
        self.url = url
        self.reason = reason or 'Unknown error'
        self.status_code = status_code
        status = f' (status={status_code})' if status_code is not None else ''
        super().__init__(f'Failed to fetch {url}{status}: {self.reason}')


class BotDetectionError(FetchError):
    """Raised when bot detection is triggered."""

    def __init__(self, url: str, status_code: int, indicators: list[str]):
        """Initialize bot detection error.

        Args:
            url: URL where bot detection was triggered
            status_code: HTTP status code received
            indicators: List of bot detection indicators found

        """
        self.indicators = indicators
        super().__init__(url, f'Bot detection triggered: {", ".join(indicators)}', status_code)


class ConfigValidationError(CustomSourceError):
    """Raised when a scraping configuration is rejected at the write boundary."""

    def __init__(self, errors: list[str]):
        """Initialize validation error with every problem found.

        Args:
            errors: Human-readable description of each problem

        """
        self.errors = errors
        super().__init__(f'Invalid source configuration: {"; ".join(errors)}')
