from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from loguru import logger


class InvalidTokenError(Exception):
    pass


@dataclass(frozen=True)
class Principal:
    subject: str
    email: str
    name: str
    picture: Optional[str] = None


class IdentityProvider(Protocol):
    def verify_token(self, token: str) -> Principal: ...


DEMO_PRINCIPAL = Principal(
    subject="google_user_123",
    email="user@example.com",
    name="John Doe",
    picture="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=32&h=32&fit=crop&crop=face",
)


class MockGoogleIdentityProvider:
    """Stands in for Google sign-in: a fixed table of accepted tokens."""

    def __init__(self, tokens: Optional[Dict[str, Principal]] = None, demo_token: Optional[str] = None):
        self.tokens: Dict[str, Principal] = dict(tokens or {})
        if demo_token:
            self.tokens.setdefault(demo_token, DEMO_PRINCIPAL)

    def verify_token(self, token: str) -> Principal:
        principal = self.tokens.get(token or "")
        if principal is None:
            logger.debug("Rejected identity token")
            raise InvalidTokenError("Invalid token")
        return principal
