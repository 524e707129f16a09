"""Small helpers for chaining optional lookups."""

from collections.abc import Callable


def first_of(*attempts: Callable[[], str | None]) -> str | None:
    """Run each attempt in order and return the first non-blank result.

    Later attempts are not called once one succeeds.

    Args:
        *attempts: Zero-argument callables returning a string or None

    Returns:
        The first non-blank result, or None if every attempt came up empty

    """
    for attempt in attempts:
        value = attempt()
        if value is not None and value.strip():
            return value
    return None
