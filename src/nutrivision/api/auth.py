"""Bearer token authentication for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from nutrivision.config import parse_bearer_token
from nutrivision.domain.models import RequestContext  # noqa: TC001
from nutrivision.errors import AuthError

if TYPE_CHECKING:
    from nutrivision.containers import AppContainer


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> RequestContext:
    """Resolve the caller from the `Authorization: Bearer` header."""
    token = parse_bearer_token(authorization)
    if token is None:
        raise AuthError("Unauthorized")
    container: AppContainer = request.app.state.container
    return container.authenticator.authenticate(token)
