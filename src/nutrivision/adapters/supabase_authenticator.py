"""Supabase-backed request authentication."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from nutrivision.domain.models import RequestContext
from nutrivision.errors import AuthError
from nutrivision.services.auth import Authenticator

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthenticator(Authenticator):
    """Validates access tokens against Supabase Auth."""

    client: Client

    def authenticate(self, access_token: str) -> RequestContext:
        """Return the user behind a Supabase access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except SupabaseAuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            raise AuthError("Unauthorized") from exc
        user = getattr(response, "user", None)
        if user is None:
            raise AuthError("Unauthorized")
        return RequestContext(
            user_id=UUID(str(user.id)),
            email=getattr(user, "email", None),
            access_token=access_token,
        )
