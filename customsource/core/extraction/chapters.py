"""Extracts chapter lists, optionally through an AJAX endpoint."""

import logging
import re
from collections.abc import Callable

from bs4 import Tag

from customsource.core.document import Document, is_blank, strip_base_url
from customsource.core.extraction.dates import DateParser
from customsource.core.templating import build_ajax_url
from customsource.models import ChapterItem, ChapterSelectors, ScrapingConfig
from customsource.utils.combinators import first_of

logger = logging.getLogger(__name__)

DocumentFetcher = Callable[[str], Document]


class ChapterListExtractor:
    """Turns a work's page into an ordered list of chapter stubs.

    When the configuration has a chapter-list AJAX template, the novel id is
    scraped from the page (or its URL) and the chapter list is read from the
    AJAX response instead. Malformed chapter nodes are dropped. AJAX fetch
    errors propagate to the caller.

    Attributes:
        date_parser: Parser for chapter upload dates

    """

    def __init__(self, date_parser: DateParser | None = None):
        """Initialize the extractor.

        Args:
            date_parser: Parser for chapter dates. Defaults to DateParser().

        """
        self.date_parser = date_parser or DateParser()

    def extract(
        self,
        document: Document,
        selectors: ChapterSelectors,
        base_url: str,
        config: ScrapingConfig,
        fetch: DocumentFetcher | None = None,
    ) -> list[ChapterItem]:
        """Extract every chapter of a work.

        Args:
            document: The work's page
            selectors: Chapter selectors of the source
            base_url: Source base URL, stripped from chapter URLs
            config: Source configuration (AJAX template, id lookup, reversal flag)
            fetch: Fetches a URL with the source headers; required for the AJAX path

        Returns:
            Chapters in page order, reversed once if the configuration asks for it

        Raises:
            FetchError: If the AJAX chapter list could not be fetched

        """
        list_document = self._acquire_list_document(document, base_url, config, fetch)

        chapters = []
        for node in list_document.select(selectors.list):
            try:
                chapter = self._extract_chapter(list_document, node, selectors, base_url)
            except Exception as e:
                logger.debug(f'Dropping chapter node after error: {e}')
                continue
            if chapter is not None:
                chapters.append(chapter)

        if config.reverse_chapter_order:
            chapters.reverse()
        return chapters

    def extract_novel_id(self, document: Document, config: ScrapingConfig) -> str | None:
        """Find the id used by the chapter-list AJAX template.

        Tries the id selector (attribute, or element text), then the URL pattern
        against the page URL.

        Args:
            document: The work's page
            config: Source configuration

        Returns:
            The id, or None if no lookup produced one

        """
        return first_of(
            lambda: self._novel_id_from_selector(document, config),
            lambda: self._novel_id_from_url(document.url, config.novel_id_url_pattern),
        )

    def _acquire_list_document(
        self,
        document: Document,
        base_url: str,
        config: ScrapingConfig,
        fetch: DocumentFetcher | None,
    ) -> Document:
        """Pick the document holding the chapter list."""
        if is_blank(config.chapter_list_ajax_template):
            return document

        novel_id = self.extract_novel_id(document, config)
        if novel_id is None:
            logger.debug(f'No novel id found on {document.url}, parsing the page itself')
            return document
        if fetch is None:
            raise ValueError('A fetch function is required for AJAX chapter lists')

        ajax_url = build_ajax_url(config.chapter_list_ajax_template, base_url, novel_id)
        logger.info(f'Fetching chapter list via AJAX: {ajax_url}')
        return fetch(ajax_url)

    @staticmethod
    def _novel_id_from_selector(document: Document, config: ScrapingConfig) -> str | None:
        element = document.select_first(config.novel_id_selector)
        if element is None:
            return None
        if config.novel_id_attribute:
            value = document.attr(element, config.novel_id_attribute)
            return value.strip() if value else None
        return document.text(element) or None

    @staticmethod
    def _novel_id_from_url(url: str, pattern: str | None) -> str | None:
        if is_blank(pattern):
            return None
        match = re.search(pattern, url)
        if match is None or match.re.groups < 1:
            return None
        return match.group(1)

    def _extract_chapter(
        self, document: Document, node: Tag, selectors: ChapterSelectors, base_url: str
    ) -> ChapterItem | None:
        """Build one chapter from a list node, or None to drop it."""
        link = document.select_first(selectors.link or 'a', node) or document.select_first('a', node)
        if link is None:
            return None

        href = document.abs_attr(link, 'href')
        if href is None:
            return None

        name = first_of(
            lambda: document.select_text(selectors.name, node),
            lambda: document.text(link),
        )
        if name is None:
            return None

        return ChapterItem(
            url=strip_base_url(href, base_url),
            name=name,
            upload_timestamp=self.date_parser.parse(document.select_text(selectors.date, node)),
        )
