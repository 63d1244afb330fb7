from unittest import mock

import requests
from cryptography.hazmat.primitives.asymmetric import rsa
from django.test import SimpleTestCase

from common.tests.support import FakeClock, public_jwk, static_fetch
from user_auth_app.jwks import JWKSCache, KeySetError, KeySetUnavailable, fetch_json

URL = "https://shop-test.eu.auth0.com/.well-known/jwks.json"


def failing_fetch(url, timeout):
    failing_fetch.calls += 1
    raise requests.ConnectionError("unreachable")


class JWKSCacheTests(SimpleTestCase):
    def setUp(self):
        self.clock = FakeClock()

    def make_cache(self, fetch, **kwargs):
        return JWKSCache(URL, fetch=fetch, clock=self.clock, **kwargs)

    def test_keys_are_cached_for_ttl(self):
        fetch = static_fetch()
        cache = self.make_cache(fetch, ttl=600)

        cache.get_signing_key("test-key-1")
        self.clock.advance(599)
        cache.get_signing_key("test-key-1")
        self.assertEqual(fetch.calls, 1)

        self.clock.advance(2)
        cache.get_signing_key("test-key-1")
        self.assertEqual(fetch.calls, 2)

    def test_single_key_used_when_token_has_no_kid(self):
        cache = self.make_cache(static_fetch())
        self.assertEqual(cache.get_signing_key(None).key_id, "test-key-1")

    def test_no_kid_with_several_keys_is_rejected(self):
        second = public_jwk(rsa.generate_private_key(public_exponent=65537, key_size=2048), "k2")
        cache = self.make_cache(static_fetch(public_jwk(), second))
        with self.assertRaises(KeySetError):
            cache.get_signing_key(None)

    def test_unavailable_without_cached_keys(self):
        failing_fetch.calls = 0
        cache = self.make_cache(failing_fetch)
        with self.assertRaises(KeySetUnavailable):
            cache.get_signing_key("test-key-1")

    def test_stale_keys_served_when_refresh_fails(self):
        good = static_fetch()
        cache = self.make_cache(good, ttl=600, failure_backoff=30)
        cache.get_signing_key("test-key-1")

        failing_fetch.calls = 0
        cache._fetch = failing_fetch
        self.clock.advance(601)
        with self.assertLogs("user_auth_app.jwks", level="WARNING"):
            key = cache.get_signing_key("test-key-1")
        self.assertEqual(key.key_id, "test-key-1")
        self.assertEqual(failing_fetch.calls, 1)

        self.clock.advance(10)
        cache.get_signing_key("test-key-1")
        self.assertEqual(failing_fetch.calls, 1)

        self.clock.advance(25)
        with self.assertLogs("user_auth_app.jwks", level="WARNING"):
            cache.get_signing_key("test-key-1")
        self.assertEqual(failing_fetch.calls, 2)

    def test_unknown_kid_forces_one_refresh_for_rotation(self):
        new_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        documents = [{"keys": [public_jwk()]}, {"keys": [public_jwk(), public_jwk(new_key, "k2")]}]
        calls = []

        def rotating_fetch(url, timeout):
            calls.append(url)
            return documents[min(len(calls), 2) - 1]

        cache = self.make_cache(rotating_fetch, ttl=600, min_refresh_interval=60)
        cache.get_signing_key("test-key-1")
        self.clock.advance(61)

        self.assertEqual(cache.get_signing_key("k2").key_id, "k2")
        self.assertEqual(len(calls), 2)

    def test_forced_refresh_is_rate_limited(self):
        fetch = static_fetch()
        cache = self.make_cache(fetch, min_refresh_interval=60)
        cache.get_signing_key("test-key-1")

        for _ in range(3):
            with self.assertRaises(KeySetError):
                cache.get_signing_key("unknown")
        self.assertEqual(fetch.calls, 1)

        self.clock.advance(60)
        with self.assertRaises(KeySetError):
            cache.get_signing_key("unknown")
        self.assertEqual(fetch.calls, 2)

    def test_clear(self):
        fetch = static_fetch()
        cache = self.make_cache(fetch)
        cache.get_signing_key("test-key-1")
        cache.clear()
        cache.get_signing_key("test-key-1")
        self.assertEqual(fetch.calls, 2)


class FetchJsonTests(SimpleTestCase):
    @mock.patch("user_auth_app.jwks.requests.get")
    def test_uses_timeout_and_raises_for_status(self, get):
        get.return_value.json.return_value = {"keys": []}
        self.assertEqual(fetch_json(URL, 5), {"keys": []})
        get.assert_called_once_with(URL, timeout=5)
        get.return_value.raise_for_status.assert_called_once_with()
