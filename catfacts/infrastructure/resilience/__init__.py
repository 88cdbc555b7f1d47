"""Resilience policies.

Retry and fallback executors, the backoff calculators they use, and the
composer that nests them so retries run first and fallback is the last resort.
"""

from catfacts.infrastructure.resilience.backoff import constant_backoff, linear_backoff
from catfacts.infrastructure.resilience.failure_predicates import handle, is_transient_http_error
from catfacts.infrastructure.resilience.fallback_policy import FallbackPolicy
from catfacts.infrastructure.resilience.policy_wrap import PolicyWrap, retry_then_fallback, wrap
from catfacts.infrastructure.resilience.retry_policy import RetryPolicy

__all__ = [
    "constant_backoff",
    "linear_backoff",
    "handle",
    "is_transient_http_error",
    "FallbackPolicy",
    "PolicyWrap",
    "retry_then_fallback",
    "wrap",
    "RetryPolicy",
]
