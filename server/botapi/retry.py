# server/botapi/retry.py
from __future__ import annotations
from dataclasses import dataclass
from .errors import AuthenticationFailed


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    `delay(failures)` is the wait before the next attempt once `failures`
    attempts have failed: 2**failures * base_delay, i.e. 1s then 2s with
    the defaults.
    """
    max_attempts: int = 3
    base_delay: float = 0.5

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    def delay(self, failures: int) -> float:
        return (2 ** failures) * self.base_delay

    def is_retryable(self, exc: BaseException) -> bool:
        return not isinstance(exc, AuthenticationFailed)
