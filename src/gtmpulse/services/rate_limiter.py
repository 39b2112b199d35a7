import math
import time
from dataclasses import dataclass
from typing import Optional

from limits import parse
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from gtmpulse.models.config_models import RateLimitConfig
from gtmpulse.utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int = 0


class RateLimiter:
    """
    Fixed-window request limiter keyed by client identifier.

    Counters live in the ``limits`` storage handed in, so several limiters can
    share one store and nothing is kept at module level. The window for a key
    opens on its first request and expires ``window_seconds`` later.
    """

    def __init__(self, storage: Optional[Storage] = None, limit: int = 100, window_seconds: int = 60):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        self.storage = storage if storage is not None else MemoryStorage()
        self.item = parse(f"{limit}/{window_seconds} second")
        self.strategy = FixedWindowRateLimiter(self.storage)

    @classmethod
    def from_config(cls, config: RateLimitConfig, storage: Optional[Storage] = None):
        return cls(storage=storage, limit=config.limit, window_seconds=config.window_seconds)

    @property
    def limit(self) -> int:
        return self.item.amount

    def check(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it may proceed."""
        allowed = self.strategy.hit(self.item, key)
        stats = self.strategy.get_window_stats(self.item, key)
        if allowed:
            return RateLimitDecision(allowed=True, remaining=stats.remaining)

        retry_after = max(0, math.ceil(stats.reset_time - time.time()))
        logger.info("Rate limit exceeded for %s, retry after %ss", key, retry_after)
        return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)
