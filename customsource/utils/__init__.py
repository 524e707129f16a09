"""Utility components for customsource."""

from customsource.utils.combinators import first_of
from customsource.utils.files import init_customsource
from customsource.utils.headers import HeaderGenerator, UserAgentRotator, merge_headers
from customsource.utils.retry import get_retryer, log_retry

__all__ = [
    'HeaderGenerator',
    'UserAgentRotator',
    'first_of',
    'get_retryer',
    'init_customsource',
    'log_retry',
    'merge_headers',
]
