"""Shared helpers for API tests.

Tokens are signed with a throwaway RSA key whose public half is served by a
static key-set fetcher, so the real verifier runs end to end without network
access. Rate limiters get a fresh registry per test driven by a fake clock.
"""

import time
from unittest import mock

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm
from django.test import override_settings
from rest_framework.test import APITestCase

from common.ratelimit import RateLimitRegistry
from common.throttling import SlidingWindowThrottle
from user_auth_app.authentication import Auth0JWTAuthentication
from user_auth_app.jwks import JWKSCache
from user_auth_app.tokens import TokenVerifier

DOMAIN = "shop-test.eu.auth0.com"
AUDIENCE = "https://api.shop.test"
ISSUER = f"https://{DOMAIN}/"
KID = "test-key-1"

PRIVATE_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)


def public_jwk(private_key=PRIVATE_KEY, kid=KID):
    jwk = RSAAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    jwk.update({"kid": kid, "alg": "RS256", "use": "sig"})
    return jwk


def static_fetch(*jwks):
    """A key-set fetcher returning ``jwks`` and counting its calls."""
    document = {"keys": list(jwks) or [public_jwk()]}

    def fetch(url, timeout):
        fetch.calls += 1
        return document

    fetch.calls = 0
    return fetch


def make_token(sub="auth0|user-1", private_key=PRIVATE_KEY, kid=KID, expires_in=3600, **claims):
    now = int(time.time())
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "iat": now,
        "exp": now + expires_in,
        "email": f"{sub.split('|')[-1]}@example.com",
        "name": "Test User",
        "nickname": sub.split("|")[-1],
    }
    payload.update(claims)
    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})


def make_verifier(fetch=None):
    key_set = JWKSCache(f"{ISSUER}.well-known/jwks.json", fetch=fetch or static_fetch())
    return TokenVerifier(DOMAIN, AUDIENCE, key_set=key_set)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@override_settings(AUTH0_DOMAIN=DOMAIN, AUTH0_AUDIENCE=AUDIENCE)
class SecuredAPITestCase(APITestCase):
    """APITestCase with a token verifier and isolated rate limiters."""

    def setUp(self):
        super().setUp()
        self.clock = FakeClock()
        self.registry = RateLimitRegistry.from_settings(clock=self.clock)
        patches = [
            mock.patch.object(Auth0JWTAuthentication, "verifier", make_verifier()),
            mock.patch.object(SlidingWindowThrottle, "registry", self.registry),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)

    def auth(self, sub="auth0|user-1", **claims):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(sub, **claims)}")
