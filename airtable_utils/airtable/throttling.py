import logging
import threading
import time
from collections import deque

from airtable_utils.airtable.conf import get_setting

logger = logging.getLogger(__name__)

_rate_limiters = {}
_rate_limiters_lock = threading.Lock()


class RateLimiter:
    """Sliding one second window allowing at most ``requests_per_second`` calls.

    Airtable allows 5 requests per second per base and answers anything above
    that with a 429 followed by a 30 second penalty.
    """

    window = 1.0

    def __init__(self, requests_per_second, clock=time.monotonic, sleep=time.sleep):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.requests_per_second = requests_per_second
        self.clock = clock
        self.sleep = sleep
        self._calls = deque()
        self._lock = threading.Lock()

    def acquire(self):
        """Block until one more request fits in the window. Returns the time waited."""
        waited = 0.0
        with self._lock:
            while True:
                now = self.clock()
                while self._calls and now - self._calls[0] >= self.window:
                    self._calls.popleft()
                if len(self._calls) < self.requests_per_second:
                    self._calls.append(now)
                    return waited
                delay = self.window - (now - self._calls[0])
                logger.debug("Throttling Airtable request for %.3fs", delay)
                self.sleep(delay)
                waited += delay

    def reset(self):
        with self._lock:
            self._calls.clear()


def get_rate_limiter(base_id):
    with _rate_limiters_lock:
        if base_id not in _rate_limiters:
            _rate_limiters[base_id] = RateLimiter(
                get_setting("AIRTABLE_REQUESTS_PER_SECOND")
            )
        return _rate_limiters[base_id]


def reset_rate_limiters():
    with _rate_limiters_lock:
        _rate_limiters.clear()
