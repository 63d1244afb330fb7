"""DRF throttles backed by the sliding-window limiters."""

from rest_framework.throttling import BaseThrottle

from .ratelimit import default_registry


def client_ip(request) -> str:
    """Client address as the throttles key it; honours ``NUM_PROXIES``."""
    return BaseThrottle().get_ident(request)


class SlidingWindowThrottle(BaseThrottle):
    """Throttle keyed by client address using the limiter for ``scope``.

    ``registry`` may be set on the class to inject a registry (tests do).
    """

    scope = None
    registry = None

    def get_registry(self):
        return self.registry or default_registry()

    def get_cache_key(self, request, view):
        return f"{self.scope}:{self.get_ident(request)}"

    def allow_request(self, request, view):
        self.limiter = self.get_registry().get(self.scope)
        self.key = self.get_cache_key(request, view)
        self.decision = self.limiter.hit(self.key)
        return self.decision.allowed

    def wait(self):
        return self.decision.retry_after

    def settle(self, request, response):
        """Called once the response is known; successful requests may be uncounted."""
        decision = getattr(self, "decision", None)
        if not decision or not decision.allowed or not self.limiter.skip_successful:
            return
        if response.status_code < 400:
            self.limiter.release(self.key, decision.stamp)


class GeneralRateThrottle(SlidingWindowThrottle):
    scope = "general"


class AuthRateThrottle(SlidingWindowThrottle):
    """Stricter policy for auth routes; only failed attempts use up the budget."""

    scope = "auth"
