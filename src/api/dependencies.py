"""FastAPI dependency injection providers.

This module provides dependency functions for injecting the container, its
services and the signed-in user into route handlers. The user is resolved
per request from the ``Authorization: Bearer <token>`` header and passed to
services explicitly.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header
from supabase import Client

from src.core.container import DependencyContainer, get_container
from src.core.exceptions import AdminRequired, AuthenticationRequired
from src.guide.session import SessionStore
from src.models.schemas import CurrentUser

logger = structlog.get_logger(__name__)


def get_supabase(container: DependencyContainer = Depends(get_container)) -> Client:
    """
    Get Supabase client instance.

    The container creates it once and reuses it across requests.
    """
    return container.supabase


def get_session_store(container: DependencyContainer = Depends(get_container)) -> SessionStore:
    return container.sessions


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    container: DependencyContainer = Depends(get_container),
) -> Optional[CurrentUser]:
    """
    Resolve the caller, or None when no valid session token is sent.

    An invalid or expired token counts as signed out.
    """
    token = _bearer_token(authorization)
    if token is None:
        return None

    try:
        response = container.supabase.auth.get_user(token)
    except Exception as e:
        logger.warning("auth_token_rejected", error=str(e))
        return None

    user = getattr(response, "user", None)
    if user is None:
        return None
    return CurrentUser(id=str(user.id), email=getattr(user, "email", None))


async def get_current_user(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    container: DependencyContainer = Depends(get_container),
) -> CurrentUser:
    """
    Require a signed-in user.

    Raises:
        AuthenticationRequired: Handled as a redirect to the sign-in page.
    """
    if user is None:
        raise AuthenticationRequired(container.settings.sign_in_path)
    return user


async def get_admin_user(
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(get_container),
) -> CurrentUser:
    """
    Require a signed-in admin.

    Raises:
        AdminRequired: Handled as a redirect to the home page.
    """
    if not await container.admin.is_admin(user):
        logger.warning("admin_access_denied", user_id=user.id)
        raise AdminRequired("/")
    return user
