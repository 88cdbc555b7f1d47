"""Predicates selecting which failures a policy handles.

Anything a predicate rejects bypasses retry and fallback and reaches the
caller unchanged.
"""

from typing import Type

import httpx

from catfacts.domain.models.policy import FailurePredicate

# Retried in addition to every 5xx status
EXTRA_TRANSIENT_STATUS_CODES = frozenset({408})


def handle(*exception_types: Type[BaseException]) -> FailurePredicate:
    """Builds a predicate matching instances of any of `exception_types`.

    Raises:
        ValueError: If no exception type is given.
    """
    if not exception_types:
        raise ValueError("handle() needs at least one exception type")

    def predicate(failure: BaseException) -> bool:
        return isinstance(failure, exception_types)

    predicate.__name__ = "handle_" + "_or_".join(t.__name__ for t in exception_types)
    return predicate


def is_transient_http_error(failure: BaseException) -> bool:
    """Matches network-level failures, HTTP 5xx and HTTP 408 responses."""
    if isinstance(failure, httpx.TransportError):
        return True
    if isinstance(failure, httpx.HTTPStatusError):
        status = failure.response.status_code
        return status >= 500 or status in EXTRA_TRANSIENT_STATUS_CODES
    return False
