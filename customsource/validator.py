"""Validates scraping configurations before they are saved."""

import re

import soupsieve

from customsource.exceptions import ConfigValidationError
from customsource.models.config import ScrapingConfig, SourceSelectors


def _selector_errors(selectors: SourceSelectors) -> list[str]:
    """Find selector fields that are present but blank or not valid CSS.

    Args:
        selectors: Selector groups to check

    Returns:
        One message per bad selector

    """
    errors = []
    for group_name in ('popular', 'search', 'details', 'chapters', 'content'):
        group = getattr(selectors, group_name)
        if group is None:
            continue
        for field_name, value in group:
            values = value if isinstance(value, list) else [value]
            for item in values:
                if item is None:
                    continue
                if not item.strip():
                    errors.append(f'selectors.{group_name}.{field_name} must not be blank')
                    continue
                try:
                    soupsieve.compile(item)
                except soupsieve.SelectorSyntaxError as e:
                    errors.append(f'selectors.{group_name}.{field_name} is not a valid selector {item!r}: {e}')
    return errors


def validate_config(config: ScrapingConfig) -> ScrapingConfig:
    """Check that a configuration is complete for its delegation mode.

    Every configuration needs its identity fields and a popular URL template.
    A local one also needs a search template and the popular, details,
    chapters and content selector groups. Any selector that is present must
    be non-blank CSS that compiles.

    Args:
        config: Configuration to check

    Returns:
        The same configuration, unchanged

    Raises:
        ConfigValidationError: Listing every problem found

    """
    errors: list[str] = []

    if not config.name.strip():
        errors.append('name must not be blank')
    if not config.base_url.strip():
        errors.append('baseUrl must not be blank')
    elif not config.base_url.startswith('http'):
        errors.append('baseUrl must start with http:// or https://')

    if not config.popular_url_template or not config.popular_url_template.strip():
        errors.append('popularUrlTemplate is required')

    if not config.is_delegated:
        if not config.search_url_template:
            errors.append('searchUrlTemplate is required')
        selectors = config.selectors
        for group_name in ('popular', 'details', 'chapters', 'content'):
            if getattr(selectors, group_name) is None:
                errors.append(f'selectors.{group_name} is required')

    errors.extend(_selector_errors(config.selectors))

    for field_name in ('novel_id_selector', 'novel_id_attribute'):
        value = getattr(config, field_name)
        if value is not None and not value.strip():
            errors.append(f'{field_name} must not be blank')

    if config.novel_id_selector and config.novel_id_selector.strip():
        try:
            soupsieve.compile(config.novel_id_selector)
        except soupsieve.SelectorSyntaxError as e:
            errors.append(f'novel_id_selector is not a valid selector: {e}')

    if config.novel_id_url_pattern is not None:
        try:
            pattern = re.compile(config.novel_id_url_pattern)
        except re.error as e:
            errors.append(f'novelIdUrlPattern is not a valid regex: {e}')
        else:
            if pattern.groups < 1:
                errors.append('novelIdUrlPattern needs one capture group')

    if errors:
        raise ConfigValidationError(errors)
    return config
