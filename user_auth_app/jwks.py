"""Cached access to the identity provider's published signing keys.

The key set is fetched over HTTPS with a bounded timeout and kept for
``ttl`` seconds. When a refresh fails the last good key set keeps being
served and the next attempt waits ``failure_backoff`` seconds. A token signed
with an unknown ``kid`` triggers one early refresh (at most once per
``min_refresh_interval``) so key rotation is picked up without waiting for
the TTL.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional

import jwt
import requests
from jwt.exceptions import PyJWKSetError

logger = logging.getLogger(__name__)


class KeySetError(Exception):
    """No usable signing key could be found for a token."""


class KeySetUnavailable(KeySetError):
    """The key set could not be fetched and nothing is cached."""


def fetch_json(url: str, timeout: float) -> dict:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


class JWKSCache:
    def __init__(
        self,
        url: str,
        ttl: float = 600,
        timeout: float = 5.0,
        failure_backoff: float = 30,
        min_refresh_interval: float = 60,
        fetch: Callable[[str, float], dict] = fetch_json,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.ttl = ttl
        self.timeout = timeout
        self.failure_backoff = failure_backoff
        self.min_refresh_interval = min_refresh_interval
        self._fetch = fetch
        self._clock = clock
        self._lock = threading.Lock()
        self._keys: Dict[str, jwt.PyJWK] = {}
        self._next_refresh = 0.0
        self._last_attempt: Optional[float] = None

    def get_signing_key(self, kid: Optional[str]) -> jwt.PyJWK:
        keys = self._get_keys()
        key = self._select(keys, kid)
        if key is None and self._may_force_refresh():
            logger.info("Signing key %r not in cached key set, refreshing", kid)
            keys = self._get_keys(force=True)
            key = self._select(keys, kid)
        if key is None:
            raise KeySetError(f"No signing key found for kid {kid!r}.")
        return key

    @staticmethod
    def _select(keys, kid):
        if kid is None:
            return next(iter(keys.values())) if len(keys) == 1 else None
        return keys.get(kid)

    def _may_force_refresh(self) -> bool:
        with self._lock:
            if self._last_attempt is None:
                return True
            return self._clock() - self._last_attempt >= self.min_refresh_interval

    def _get_keys(self, force: bool = False) -> Dict[str, jwt.PyJWK]:
        with self._lock:
            now = self._clock()
            if self._keys and not force and now < self._next_refresh:
                return self._keys

            self._last_attempt = now
            try:
                keyset = jwt.PyJWKSet.from_dict(self._fetch(self.url, self.timeout))
            except (requests.RequestException, ValueError, PyJWKSetError) as exc:
                if not self._keys:
                    raise KeySetUnavailable(f"Could not fetch signing keys: {exc}") from exc
                logger.warning("Key set refresh from %s failed, serving cached keys: %s", self.url, exc)
                self._next_refresh = now + self.failure_backoff
                return self._keys

            self._keys = {key.key_id: key for key in keyset.keys}
            self._next_refresh = now + self.ttl
            logger.info("Fetched %d signing key(s) from %s", len(self._keys), self.url)
            return self._keys

    def clear(self):
        with self._lock:
            self._keys = {}
            self._next_refresh = 0.0
            self._last_attempt = None
