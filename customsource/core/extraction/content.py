"""Extracts reader-ready chapter markup."""

import logging

from customsource.core.document import Document, is_blank
from customsource.models import ContentSelectors

logger = logging.getLogger(__name__)

MEDIA_SELECTOR = 'img, video, audio, source'
MEDIA_ATTRIBUTES = ('src', 'data-src', 'data-lazy-src')


class ContentExtractor:
    """Turns a chapter document into sanitized inner markup.

    The primary selector is tried first, then each fallback in order. Unwanted
    nodes are removed and media URLs are made absolute so the markup renders
    outside the original page.
    """

    def extract(self, document: Document, selectors: ContentSelectors, base_url: str) -> str:
        """Extract the chapter body.

        Args:
            document: Chapter document
            selectors: Content selectors of the source
            base_url: Source base URL, used when the document has no URL of its own

        Returns:
            Inner HTML of the matched element, or '' if nothing matched

        """
        if is_blank(selectors.primary):
            return ''

        page_url = document.url or base_url

        element = None
        for selector_used in [selectors.primary, *selectors.fallbacks]:
            element = document.select_first(selector_used)
            if element is not None:
                logger.debug(f'Content matched {selector_used!r}')
                break

        if element is None:
            return ''

        for selector in selectors.remove_selectors:
            for unwanted in document.select(selector, element):
                if unwanted is not element and not unwanted.decomposed:
                    document.remove(unwanted)

        for media in document.select(MEDIA_SELECTOR, element):
            for name in MEDIA_ATTRIBUTES:
                if media.has_attr(name):
                    media[name] = document.abs_attr(media, name, page_url) or ''

        return document.inner_html(element)
