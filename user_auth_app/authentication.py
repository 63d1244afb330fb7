"""DRF authentication for ``Authorization: Bearer <token>`` headers."""

import logging

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from .tokens import InvalidToken, get_default_verifier

logger = logging.getLogger(__name__)


class Auth0JWTAuthentication(BaseAuthentication):
    """Authenticate requests with a token issued by the identity provider.

    - No header: the request stays anonymous (protected views answer 401).
    - Wrong scheme, empty or extra parts, or a token failing verification: 401.
    - Success: ``request.user`` is an ``Identity``, ``request.auth`` the raw token.

    ``verifier`` may be set on the class to inject a verifier (tests do).
    """

    keyword = "Bearer"
    verifier = None

    def get_verifier(self):
        return self.verifier or get_default_verifier()

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth:
            return None

        if auth[0].lower() != self.keyword.lower().encode():
            raise exceptions.AuthenticationFailed(
                "Access denied. No token provided or invalid format."
            )
        if len(auth) == 1:
            raise exceptions.AuthenticationFailed("Access denied. Token is empty.")
        if len(auth) > 2:
            raise exceptions.AuthenticationFailed(
                "Invalid token header. Token string should not contain spaces."
            )

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed(
                "Invalid token header. Token string should not contain invalid characters."
            )

        try:
            identity = self.get_verifier().verify(token)
        except InvalidToken as exc:
            logger.warning("Token verification failed: %s", exc)
            detail = f"Invalid token: {exc}" if settings.DEBUG else "Invalid token"
            raise exceptions.AuthenticationFailed(detail)

        return identity, token

    def authenticate_header(self, request):
        return self.keyword
