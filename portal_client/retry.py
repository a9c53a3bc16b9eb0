import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from portal_client.errors import ApiError, TransientNetworkFailure

logger = logging.getLogger(__name__)


def default_retry_predicate(error: Exception) -> bool:
    """Retry network failures and non-2xx answers, except 401."""
    if isinstance(error, TransientNetworkFailure):
        return True
    if isinstance(error, ApiError):
        return error.status_code != 401
    return False


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_multiplier: float = 2.0
    retry_predicate: Callable[[Exception], bool] = field(default=default_retry_predicate)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        return self.base_delay * self.backoff_multiplier ** (attempt - 1)

    def run(self, fn, sleep=time.sleep):
        """
        Call `fn` until it succeeds, the error is not retryable, or
        max_attempts calls have been made. The last error is re-raised as is.
        """
        attempt = 1
        while True:
            try:
                return fn()
            except Exception as exc:
                if attempt >= self.max_attempts or not self.retry_predicate(exc):
                    if attempt > 1:
                        logger.warning("request failed after %d attempts: %s", attempt, exc)
                    raise
                delay = self.delay_for(attempt)
                logger.info("attempt %d failed (%s); retrying in %.1fs", attempt, exc, delay)
                sleep(delay)
                attempt += 1
