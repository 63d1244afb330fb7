"""Bearer token verification against the identity provider's key set."""

import functools
from typing import Optional

import jwt
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .identity import Identity
from .jwks import JWKSCache, KeySetError


class InvalidToken(Exception):
    """The bearer token failed decoding, signature, issuer or audience checks."""


class TokenVerifier:
    """Verify RS256 tokens issued by ``https://<domain>/`` for ``audience``."""

    algorithms = ("RS256",)

    def __init__(self, domain: str, audience: str, key_set: Optional[JWKSCache] = None, leeway: int = 0):
        if not domain:
            raise ImproperlyConfigured("AUTH0_DOMAIN must be set to verify bearer tokens.")
        if not audience:
            raise ImproperlyConfigured("AUTH0_AUDIENCE must be set to verify bearer tokens.")
        self.issuer = f"https://{domain}/"
        self.audience = audience
        self.leeway = leeway
        self.key_set = key_set or JWKSCache(f"https://{domain}/.well-known/jwks.json")

    def verify(self, token: str) -> Identity:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"Malformed token: {exc}") from exc

        if header.get("alg") not in self.algorithms:
            raise InvalidToken(f"Unsupported signing algorithm {header.get('alg')!r}.")

        try:
            signing_key = self.key_set.get_signing_key(header.get("kid"))
        except KeySetError as exc:
            raise InvalidToken(str(exc)) from exc

        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=list(self.algorithms),
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": ["exp", "iss", "aud", "sub"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc

        return Identity.from_claims(claims)


@functools.lru_cache(maxsize=None)
def get_default_verifier() -> TokenVerifier:
    """Process-wide verifier configured from settings (shares one key-set cache)."""
    domain = settings.AUTH0_DOMAIN
    key_set = JWKSCache(
        f"https://{domain}/.well-known/jwks.json",
        ttl=settings.AUTH0_JWKS_CACHE_TTL,
        timeout=settings.AUTH0_JWKS_TIMEOUT,
    )
    return TokenVerifier(domain, settings.AUTH0_AUDIENCE, key_set=key_set)
