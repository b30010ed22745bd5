import math
import threading
from datetime import date

# In-process state only; nothing here is persisted or shared across instances.


class RateLimitRecord:
    """Request count for one client key within its current window"""
    __slots__ = ('count', 'reset_at')

    def __init__(self, reset_at, count=1):
        self.count = count
        self.reset_at = reset_at

    def is_expired(self, now):
        return now >= self.reset_at


class RateLimitResult:
    """Allow/deny decision returned by the rate limiter"""
    __slots__ = ('allowed', 'remaining', 'retry_after')

    def __init__(self, allowed, remaining, retry_after=None):
        self.allowed = allowed
        self.remaining = remaining
        self.retry_after = retry_after

    @classmethod
    def denied(cls, record, now):
        # Never report 0 while the window is still open
        retry_after = max(1, math.ceil(record.reset_at - now))
        return cls(False, 0, retry_after)

    def headers(self):
        headers = {'X-RateLimit-Remaining': str(self.remaining)}
        if self.retry_after:
            headers['Retry-After'] = str(self.retry_after)
        return headers

    def __repr__(self):
        return f"RateLimitResult(allowed={self.allowed}, remaining={self.remaining}, retry_after={self.retry_after})"


class UsageData:
    """In-memory representation of usage statistics"""
    def __init__(self, today=date.today):
        self.today = today
        self.date = today()
        self.count = 0
        self._lock = threading.Lock()

    def _roll(self):
        today = self.today()
        if today != self.date:
            self.date = today
            self.count = 0

    def increment(self):
        with self._lock:
            self._roll()
            self.count += 1

    def snapshot(self):
        """(date, count) for today, read under the lock."""
        with self._lock:
            self._roll()
            return self.date, self.count
