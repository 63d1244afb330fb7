"""Sliding-window rate limiting.

A limiter keeps, per client key, the timestamps of requests seen inside the
trailing window. Pruning, the budget check and recording the new hit happen
under one lock so two concurrent requests cannot both take the last slot.

Keys whose history has emptied are dropped, and once per window the whole
store is swept for keys that have gone idle, so the store only holds clients
seen within the last window.

Limiters are owned by a ``RateLimitRegistry`` built from the ``RATE_LIMITS``
setting. The store and clock are injectable so tests can isolate clients and
move time forward.
"""

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: Optional[float] = None
    stamp: Optional[float] = None


class SlidingWindowLimiter:
    """Allow at most ``max_requests`` per key within ``window`` seconds."""

    def __init__(
        self,
        window: float,
        max_requests: int,
        skip_successful: bool = False,
        store: Optional[Dict[str, deque]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if window <= 0 or max_requests < 1:
            raise ImproperlyConfigured("Rate limit window and max_requests must be positive.")
        self.window = window
        self.max_requests = max_requests
        self.skip_successful = skip_successful
        self.store = store if store is not None else {}
        self.clock = clock
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _prune(self, history: deque, now: float):
        while history and history[0] <= now - self.window:
            history.popleft()

    def _sweep(self, now: float):
        """Drop every key whose newest hit has left the window."""
        cutoff = now - self.window
        stale = [key for key, history in self.store.items() if not history or history[-1] <= cutoff]
        for key in stale:
            del self.store[key]
        self._last_sweep = now

    def hit(self, key: str) -> RateLimitDecision:
        """Record a request for ``key`` unless its budget is used up."""
        with self._lock:
            now = self.clock()
            if now - self._last_sweep >= self.window:
                self._sweep(now)
            history = self.store.setdefault(key, deque())
            self._prune(history, now)
            if len(history) >= self.max_requests:
                retry_after = history[0] + self.window - now
                return RateLimitDecision(False, 0, retry_after=max(retry_after, 0.0))
            history.append(now)
            return RateLimitDecision(True, self.max_requests - len(history), stamp=now)

    def release(self, key: str, stamp: float):
        """Forget a previously recorded hit (used for requests that should not count)."""
        with self._lock:
            history = self.store.get(key)
            if not history:
                return
            try:
                history.remove(stamp)
            except ValueError:
                return
            if not history:
                del self.store[key]

    def count(self, key: str) -> int:
        with self._lock:
            history = self.store.get(key)
            if not history:
                return 0
            self._prune(history, self.clock())
            if not history:
                del self.store[key]
            return len(history)

    def reset(self, key: Optional[str] = None):
        with self._lock:
            if key is None:
                self.store.clear()
            else:
                self.store.pop(key, None)


class RateLimitRegistry:
    """Named rate-limit policies, e.g. ``general`` and ``auth``."""

    def __init__(self, policies: dict, clock: Callable[[], float] = time.monotonic):
        self._limiters = {
            scope: SlidingWindowLimiter(
                window=cfg["window"],
                max_requests=cfg["max_requests"],
                skip_successful=cfg.get("skip_successful", False),
                clock=clock,
            )
            for scope, cfg in policies.items()
        }

    @classmethod
    def from_settings(cls, clock: Callable[[], float] = time.monotonic):
        return cls(getattr(settings, "RATE_LIMITS", {}), clock=clock)

    def get(self, scope: str) -> SlidingWindowLimiter:
        try:
            return self._limiters[scope]
        except KeyError:
            raise ImproperlyConfigured(f"No rate limit policy configured for scope '{scope}'.")

    def reset(self):
        for limiter in self._limiters.values():
            limiter.reset()


_default_registry = None
_default_lock = threading.Lock()


def default_registry() -> RateLimitRegistry:
    """Process-wide registry used when a throttle has none injected."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = RateLimitRegistry.from_settings()
        return _default_registry
