"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - The identity provider is reached only through IdentityProvider

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations may do IO (session lookups, token checks)
"""

from typing import Protocol

from tkd_core.core.domain_types import UserId


class IdentityProvider(Protocol):
    """Narrow capability over the external identity service."""
    async def resolve_current_user(self) -> UserId | None: ...
