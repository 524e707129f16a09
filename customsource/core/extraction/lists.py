"""Extracts listing pages (popular, latest, search) into summary items."""

import logging

from bs4 import Tag

from customsource.core.document import Document, is_blank, strip_base_url
from customsource.models import MangaItem, MangaListSelectors, MangasPage

logger = logging.getLogger(__name__)

COVER_ATTRIBUTES = ('src', 'data-src', 'data-lazy-src')


class ListExtractor:
    """Turns a listing document into an ordered page of items.

    Container nodes that cannot be turned into an item (no link, no title,
    or any error while reading them) are dropped, never fatal.
    """

    def extract(self, document: Document, selectors: MangaListSelectors, base_url: str) -> MangasPage:
        """Extract every item of a listing page.

        Args:
            document: Listing document
            selectors: List selectors of the source
            base_url: Source base URL, stripped from item URLs

        Returns:
            Items in document order and whether another page exists

        """
        items = []
        for node in document.select(selectors.list):
            try:
                item = self._extract_item(document, node, selectors, base_url)
            except Exception as e:
                logger.debug(f'Dropping list node after error: {e}')
                continue
            if item is not None:
                items.append(item)

        if not is_blank(selectors.next_page):
            has_next_page = document.select_first(selectors.next_page) is not None
        else:
            has_next_page = bool(items)

        return MangasPage(items=items, has_next_page=has_next_page)

    def _extract_item(
        self, document: Document, node: Tag, selectors: MangaListSelectors, base_url: str
    ) -> MangaItem | None:
        """Build one item from a container node, or None to drop it."""
        link = document.select_first(selectors.link or 'a[href]', node) or document.select_first('a', node)
        if link is None:
            return None

        href = document.abs_attr(link, 'href')
        if href is None:
            return None

        title = (
            document.select_text(selectors.title, node)
            or (document.attr(link, 'title') or '').strip()
            or document.text(link)
        )
        if not title:
            return None

        return MangaItem(
            url=strip_base_url(href, base_url),
            title=title,
            cover_url=document.select_attr(selectors.cover, COVER_ATTRIBUTES, node),
        )
