"""Translate Supabase failures into persistence errors."""

from typing import Protocol

import httpx
from supabase import PostgrestAPIError, PostgrestAPIResponse

from nutrivision.errors import PersistenceError


class Executable(Protocol):
    """A Supabase query builder ready to run."""

    def execute(self) -> PostgrestAPIResponse:
        """Run the query."""


def execute(query: Executable, action: str) -> PostgrestAPIResponse:
    """Run a query builder, raising PersistenceError on API or transport failures."""
    try:
        return query.execute()
    except PostgrestAPIError as exc:
        raise PersistenceError(f"Failed to {action}", details=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise PersistenceError(
            f"Failed to {action}", details=f"{type(exc).__name__}: {exc}"
        ) from exc
