"""
Rate Limiter
Bounds scan invocations per caller in a fixed window
"""
import math
import threading
import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_in: float

    @property
    def retry_after(self) -> int:
        """Whole seconds until the window resets"""
        return max(0, math.ceil(self.reset_in))


class RateLimiter(ABC):
    """Per-caller quota; swap implementations for a shared store"""

    @abstractmethod
    def try_consume(self, caller_id: str) -> RateLimitDecision:
        """Consume one unit for caller_id if the quota allows it"""


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter(RateLimiter):
    """
    Process-local limiter: identity -> (count, reset time).

    A window starts on the first request and is reset lazily on the first
    access after it expires. Denied requests do not count. Once more than
    max_tracked_callers windows are held, expired ones are evicted.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_tracked_callers: int = 10000
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.max_tracked_callers = max_tracked_callers
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def try_consume(self, caller_id: str) -> RateLimitDecision:
        with self._lock:
            now = self.clock()
            window = self._windows.get(caller_id)

            if window is None or now >= window.reset_at:
                window = _Window(count=0, reset_at=now + self.window_seconds)
                self._windows[caller_id] = window
                if len(self._windows) > self.max_tracked_callers:
                    self._evict_expired(now)

            if window.count >= self.max_requests:
                logger.warning(f"Rate limit hit for caller {caller_id}")
                return RateLimitDecision(False, 0, window.reset_at - now)

            window.count += 1
            return RateLimitDecision(True, self.max_requests - window.count, window.reset_at - now)

    @property
    def tracked_callers(self) -> int:
        return len(self._windows)

    def _evict_expired(self, now: float) -> None:
        """Drop windows that have run out; caller must hold the lock"""
        expired = [key for key, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired rate limit windows")

    def reset(self, caller_id: str = None) -> None:
        """Forget one caller's window, or all of them"""
        with self._lock:
            if caller_id is None:
                self._windows.clear()
            else:
                self._windows.pop(caller_id, None)
