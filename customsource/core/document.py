"""Parsed HTML documents and the selector helpers shared by every extractor."""

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

Root = BeautifulSoup | Tag


def is_blank(value: str | None) -> bool:
    """True for None, empty and whitespace-only strings."""
    return value is None or not value.strip()


class Document:
    """An HTML document fetched from ``url``.

    Selector methods never pass a blank selector to the selector engine:
    a blank selector simply matches nothing.

    Attributes:
        url: URL the document was fetched from, used to resolve relative links
        soup: Parsed tree

    """

    def __init__(self, html: str, url: str = ''):
        """Parse a document.

        Args:
            html: Raw HTML
            url: URL the HTML came from

        """
        self.url = url
        self.soup = BeautifulSoup(html, 'lxml')

    def select(self, selector: str | None, root: Root | None = None) -> list[Tag]:
        """All elements matching ``selector`` in ``root``, in document order.

        Like jsoup, ``root`` itself is included when it matches.
        """
        if is_blank(selector):
            return []
        if root is None:
            return list(self.soup.select(selector))
        matches = list(root.select(selector))
        if self._root_matches(selector, root):
            matches.insert(0, root)
        return matches

    def select_first(self, selector: str | None, root: Root | None = None) -> Tag | None:
        """First element matching ``selector`` in ``root``, or None."""
        if is_blank(selector):
            return None
        if root is None:
            return self.soup.select_one(selector)
        if self._root_matches(selector, root):
            return root
        return root.select_one(selector)

    @staticmethod
    def _root_matches(selector: str, root: Root) -> bool:
        """True if ``root`` is an element (not the whole tree) matching ``selector``."""
        return not isinstance(root, BeautifulSoup) and root.css.match(selector)

    @staticmethod
    def text(element: Tag) -> str:
        """Text content of ``element`` with whitespace collapsed."""
        return ' '.join(element.get_text().split())

    @staticmethod
    def attr(element: Tag, name: str) -> str | None:
        """Raw attribute value, or None when absent."""
        value = element.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return ' '.join(value)
        return value

    def abs_attr(self, element: Tag, name: str, base: str | None = None) -> str | None:
        """Attribute value resolved against ``base`` or the document URL, or None when absent."""
        value = self.attr(element, name)
        if is_blank(value):
            return None
        return urljoin(base or self.url, value.strip())

    @staticmethod
    def remove(element: Tag) -> None:
        """Delete ``element`` from the tree."""
        element.decompose()

    @staticmethod
    def inner_html(element: Root) -> str:
        """Markup of the children of ``element``."""
        return element.decode_contents()

    def select_text(self, selector: str | None, root: Root | None = None) -> str | None:
        """Trimmed text of the first match, None when nothing matches or the text is blank."""
        element = self.select_first(selector, root)
        if element is None:
            return None
        text = self.text(element)
        return text or None

    def select_attr(self, selector: str | None, attrs: tuple[str, ...], root: Root | None = None) -> str | None:
        """First non-blank attribute of the first match, trying each name plain then absolute.

        Args:
            selector: Selector for the element holding the attribute
            attrs: Attribute names in priority order
            root: Element to search under, the whole document if None

        Returns:
            The first non-blank value found, or None

        """
        element = self.select_first(selector, root)
        if element is None:
            return None
        for name in attrs:
            value = self.attr(element, name)
            if not is_blank(value):
                return value.strip()
            value = self.abs_attr(element, name)
            if not is_blank(value):
                return value
        return None


def strip_base_url(url: str, base_url: str) -> str:
    """Make ``url`` relative to ``base_url`` when it starts with it."""
    if base_url and url.startswith(base_url):
        return url[len(base_url) :]
    return url


def to_absolute_url(url: str, base_url: str) -> str:
    """Resolve a stored relative URL against the source base URL."""
    if url.startswith(('http://', 'https://')):
        return url
    if url.startswith('//'):
        return f'https:{url}'
    return base_url + (url if url.startswith('/') else f'/{url}')
