"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .contracts import BatchPolicy, RetryPolicy, TimeoutPolicy
from .retry import call_with_retry, classify_error
from .timeouts import await_with_timeout

__all__ = [
    "BatchPolicy",
    "RetryPolicy",
    "TimeoutPolicy",
    "call_with_retry",
    "classify_error",
    "await_with_timeout",
]
