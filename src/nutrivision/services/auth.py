"""Request authentication."""

from typing import Protocol

from nutrivision.domain.models import RequestContext


class Authenticator(Protocol):
    """Resolves an access token to the calling user."""

    def authenticate(self, access_token: str) -> RequestContext:
        """Return the request context or raise AuthError."""
