"""API Dependencies: identity resolution and domain configuration for routes.

Invariants:
    - Every domain route requires a resolvable user (401 otherwise)
    - PromotionPolicy handed to the evaluator explicitly, built from settings
"""

from fastapi import Depends, Request

from tkd_core.config import Settings, get_settings
from tkd_core.core.domain_types import UserId
from tkd_core.core.eligibility import PromotionPolicy
from tkd_core.core.errors import AuthenticationError
from tkd_core.core.repository_protocols import IdentityProvider
from tkd_core.infrastructure.identity import HeaderIdentityProvider


def get_identity_provider(
    request: Request, settings: Settings = Depends(get_settings),
) -> IdentityProvider:
    return HeaderIdentityProvider(request, settings.identity_header)


async def require_user(
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserId:
    user_id = await identity.resolve_current_user()
    if user_id is None:
        raise AuthenticationError()
    return user_id


def get_promotion_policy(
    settings: Settings = Depends(get_settings),
) -> PromotionPolicy:
    return settings.promotion_policy()
