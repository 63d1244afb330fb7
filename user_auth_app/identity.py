"""The authenticated caller as seen by views and permissions."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Identity:
    """Claims taken from a verified bearer token.

    Quacks enough like a Django user for DRF (`is_authenticated`) while
    carrying the identity provider's subject id as the ownership key.
    """

    sub: str
    email: Optional[str] = None
    name: Optional[str] = None
    nickname: Optional[str] = None
    picture: Optional[str] = None
    permissions: Tuple[str, ...] = field(default_factory=tuple)
    scope: Optional[str] = None

    is_authenticated = True
    is_anonymous = False
    is_active = True

    @property
    def pk(self):
        return self.sub

    id = pk

    @classmethod
    def from_claims(cls, claims: dict) -> "Identity":
        return cls(
            sub=claims["sub"],
            email=claims.get("email"),
            name=claims.get("name"),
            nickname=claims.get("nickname"),
            picture=claims.get("picture"),
            permissions=tuple(claims.get("permissions") or ()),
            scope=claims.get("scope"),
        )

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def __str__(self):
        return self.sub
