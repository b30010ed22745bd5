import logging
import threading
import time

from cachetools import TLRUCache

from models import RateLimitRecord, RateLimitResult

logger = logging.getLogger(__name__)


def _expires_at(key, record, now):
    return record.reset_at


class FixedWindowRateLimiter:
    """Fixed-window request counter keyed by client identifier.

    Records live in a bounded TLRUCache and expire at their own reset time,
    so keys that stop sending requests are evicted instead of accumulating.
    State is local to this process; separate instances enforce separate limits.
    """

    def __init__(self, limit=30, window=60, max_keys=10000, clock=time.time):
        self.limit = limit
        self.window = window
        self.clock = clock
        self._records = TLRUCache(maxsize=max_keys, ttu=_expires_at, timer=clock)
        self._lock = threading.Lock()

    def check(self, key, limit=None, window=None):
        """Count one request for ``key`` and decide whether it is allowed.

        Never raises; callers only get a RateLimitResult back.
        """
        limit = self.limit if limit is None else limit
        window = self.window if window is None else window
        now = self.clock()

        with self._lock:
            record = self._records.get(key)

            if record is None or record.is_expired(now):
                self._records[key] = RateLimitRecord(reset_at=now + window)
                return RateLimitResult(True, limit - 1)

            if record.count >= limit:
                logger.warning(f"Rate limit exceeded for {key}")
                return RateLimitResult.denied(record, now)

            record.count += 1
            return RateLimitResult(True, limit - record.count)

    @property
    def tracked_keys(self):
        with self._lock:
            self._records.expire()
            return len(self._records)

    def reset(self):
        with self._lock:
            self._records.clear()
