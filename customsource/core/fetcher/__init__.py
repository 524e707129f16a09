"""Fetcher factory and exports."""

from customsource.core.fetcher.base import ContentAnalyzer, HTMLFetcher
from customsource.core.fetcher.playwright import PlaywrightFetcher
from customsource.core.fetcher.simple import SimpleFetcher
from customsource.core.fetcher.smart import SmartFetcher

FETCHER_TYPES: dict[str, type[HTMLFetcher]] = {
    'simple': SimpleFetcher,
    'playwright': PlaywrightFetcher,
    'smart': SmartFetcher,
}


def create_fetcher(fetcher_type: str = 'simple', **kwargs) -> HTMLFetcher:
    """Create an HTML fetcher.

    Args:
        fetcher_type: Type of fetcher ('simple', 'playwright', 'smart')
        **kwargs: Additional arguments for the fetcher

    Returns:
        HTMLFetcher instance

    """
    if fetcher_type not in FETCHER_TYPES:
        raise ValueError(f'Unknown fetcher type: {fetcher_type}. Choose from: {list(FETCHER_TYPES.keys())}')

    return FETCHER_TYPES[fetcher_type](**kwargs)


__all__ = [
    'FETCHER_TYPES',
    'ContentAnalyzer',
    'HTMLFetcher',
    'PlaywrightFetcher',
    'SimpleFetcher',
    'SmartFetcher',
    'create_fetcher',
]
