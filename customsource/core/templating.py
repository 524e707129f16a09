"""Expands URL templates with ``{baseUrl}``, ``{page}``, ``{query}`` and ``{novelId}`` placeholders."""

from urllib.parse import quote

PAGE = '{page}'

# Query parameters that may be dropped entirely on page 1.
ELIDABLE_QUERY_FORMS = ('?page={page}&', '?page={page}', '&page={page}')

# Removed, in this order, when page 1 is elided.
PAGE_GLUE_FORMS = ('/{page}', '?page={page}', '&page={page}', '{page}')


def _can_elide(url: str) -> bool:
    """True unless ``{page}`` is the value of a query parameter other than a plain ``page=``.

    ``pg={page}``, ``p={page}`` and the like keep an explicit page number.
    """
    remaining = url
    for form in ELIDABLE_QUERY_FORMS:
        remaining = remaining.replace(form, '')
    return '=' + PAGE not in remaining


def _expand_page(url: str, page: int) -> str:
    """Substitute or elide every ``{page}`` placeholder.

    The decision is made once per call so mixed forms are handled alike.

    Args:
        url: URL with placeholders other than ``{page}`` already expanded
        page: 1-based page number

    Returns:
        URL with no ``{page}`` placeholder left

    """
    if PAGE not in url:
        return url

    if page == 1 and _can_elide(url):
        url = url.replace('?page={page}&', '?')
        for form in PAGE_GLUE_FORMS:
            url = url.replace(form, '')
        return url

    return url.replace(PAGE, str(page))


def expand_url(
    template: str,
    base_url: str,
    page: int = 1,
    query: str | None = None,
    aux_id: str | None = None,
) -> str:
    """Expand a URL template into a concrete URL.

    Args:
        template: Template such as ``'{baseUrl}/list/{page}'``
        base_url: Value for ``{baseUrl}``
        page: Value for ``{page}``; page 1 is elided unless ``{page}`` is a query value such as ``pg={page}``
        query: Search term for ``{query}``, percent-encoded as UTF-8
        aux_id: Value for ``{novelId}``, inserted as is

    Returns:
        The concrete URL with trailing ``/``, ``?`` and ``&`` removed

    Example:
        >>> expand_url('{baseUrl}/list/{page}', 'https://x.com', 1)
        'https://x.com/list'
        >>> expand_url('{baseUrl}?s={query}&page={page}', 'https://x.com', 1, 'foo bar')
        'https://x.com?s=foo%20bar'

    """
    url = template.replace('{baseUrl}', base_url)

    if query is not None:
        url = url.replace('{query}', quote(query, safe=''))

    if aux_id is not None:
        url = url.replace('{novelId}', aux_id)

    url = _expand_page(url, page)
    return url.rstrip('/?&')


def build_list_url(template: str, base_url: str, page: int) -> str:
    """Expand a popular or latest listing template."""
    return expand_url(template, base_url, page)


def build_search_url(template: str, base_url: str, query: str, page: int) -> str:
    """Expand a search template."""
    return expand_url(template, base_url, page, query=query)


def build_ajax_url(template: str, base_url: str, novel_id: str) -> str:
    """Expand a chapter-list AJAX template.

    Only ``{baseUrl}`` and ``{novelId}`` are replaced. Trailing separators are
    kept because endpoints such as WordPress ``ajax/chapters/`` require them.
    """
    return template.replace('{baseUrl}', base_url).replace('{novelId}', novel_id)
