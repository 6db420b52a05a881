"""
FastAPI dependencies for authentication.

Provides ``get_user_store``, ``get_token_service`` and ``get_current_user``
dependencies.  The token travels as the raw value of the ``Authorization``
header, without a ``Bearer`` prefix.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request

from auth.jwt import InvalidTokenError, TokenService
from auth.password import PasswordHasher
from database.user_store import UserStore
from utils.errors import Unauthorized


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def authenticate(authorization: Optional[str], tokens: TokenService) -> Dict[str, Any]:
    """
    Decide whether a header value grants access.

    Returns the decoded claims (``{"id": ..., "exp": ...}``) or raises
    ``Unauthorized`` with the reason.
    """
    if not authorization:
        raise Unauthorized("No token provided")
    try:
        return tokens.verify(authorization)
    except InvalidTokenError:
        raise Unauthorized("Invalid token")


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """
    Verify the ``Authorization`` header and return the authenticated
    identity.  The identity is also attached to ``request.state.user``.
    """
    identity = authenticate(authorization, tokens)
    request.state.user = identity
    return identity
