"""Extracts a work's detail page into a metadata record."""

from customsource.core.document import Document, strip_base_url
from customsource.core.extraction.lists import COVER_ATTRIBUTES
from customsource.models import DetailRecord, DetailSelectors, MangaStatus

# Checked in order; the first keyword found wins.
STATUS_KEYWORDS: tuple[tuple[str, MangaStatus], ...] = (
    ('ongoing', MangaStatus.ONGOING),
    ('completed', MangaStatus.COMPLETED),
    ('hiatus', MangaStatus.ON_HIATUS),
    ('cancelled', MangaStatus.CANCELLED),
)


def parse_status(status: str | None) -> MangaStatus:
    """Map a free-form status string to a status.

    Args:
        status: Status text scraped from the page

    Returns:
        The status of the first keyword contained in the text, UNKNOWN otherwise

    Example:
        >>> parse_status('Ongoing, formerly on hiatus')
        <MangaStatus.ONGOING: 1>

    """
    if status is None:
        return MangaStatus.UNKNOWN
    lowered = status.lower()
    for keyword, value in STATUS_KEYWORDS:
        if keyword in lowered:
            return value
    return MangaStatus.UNKNOWN


class DetailExtractor:
    """Turns a detail document into a metadata record.

    Every field is optional: a missing selector or a selector matching
    nothing leaves the field empty.
    """

    def extract(self, document: Document, selectors: DetailSelectors, base_url: str) -> DetailRecord:
        """Extract work metadata.

        Args:
            document: Detail page document
            selectors: Detail selectors of the source
            base_url: Source base URL

        Returns:
            The metadata record

        """
        return DetailRecord(
            url=strip_base_url(document.url, base_url),
            title=document.select_text(selectors.title) or '',
            author=document.select_text(selectors.author),
            artist=document.select_text(selectors.artist),
            description=document.select_text(selectors.description),
            genre=document.select_text(selectors.genre),
            status=parse_status(document.select_text(selectors.status)),
            cover_url=document.select_attr(selectors.cover, COVER_ATTRIBUTES),
        )
