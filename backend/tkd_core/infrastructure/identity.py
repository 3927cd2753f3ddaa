"""Identity Adapters: IdentityProvider implementations over the external auth service.

Invariants:
    - The domain only ever sees a UserId string or None
    - HeaderIdentityProvider trusts a header set by the upstream auth layer
      (the header must be stripped from client traffic at the edge)
"""

from fastapi import Request

from tkd_core.core.domain_types import UserId


class HeaderIdentityProvider:
    """Resolves the current user from a trusted request header."""

    def __init__(self, request: Request, header_name: str):
        self._request = request
        self._header_name = header_name

    async def resolve_current_user(self) -> UserId | None:
        value = self._request.headers.get(self._header_name, "").strip()
        return UserId(value) if value else None


class StaticIdentityProvider:
    """Always resolves the same user; for scripts and tests."""

    def __init__(self, user_id: str | None):
        self._user_id = UserId(user_id) if user_id else None

    async def resolve_current_user(self) -> UserId | None:
        return self._user_id
