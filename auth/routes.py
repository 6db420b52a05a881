"""
Auth API routes — signup, login.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from api.middleware import SanitisedBody
from auth.dependencies import get_password_hasher, get_token_service, get_user_store
from auth.jwt import TokenService
from auth.password import PasswordHasher
from database.user_store import CONFLICT_MESSAGE, UserStore
from utils.errors import AccountError, ConflictError, InternalError, Unauthorized
from utils.schemas import (
    LOGIN_FIELDS,
    SIGNUP_FIELDS,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    TokenResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


@router.post(
    "/signup",
    response_model=TokenResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(SanitisedBody(*SIGNUP_FIELDS))],
)
async def signup(
    req: SignupRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Register a new user and return a token."""
    try:
        if await store.find_by_username_or_email(req.username, req.email):
            raise ConflictError(CONFLICT_MESSAGE)

        password_hash = await run_in_threadpool(hasher.hash, req.password)
        user = await store.create(
            {
                "username": req.username,
                "password_hash": password_hash,
                "email": req.email,
                "phone": req.phone,
                "dob": req.dob,
            }
        )
        token = tokens.issue(str(user.id))
    except AccountError:
        raise
    except Exception as exc:
        logger.exception("Signup error")
        raise InternalError("Server error") from exc

    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"token": token}


@router.post(
    "/login",
    response_model=TokenResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(SanitisedBody(*LOGIN_FIELDS))],
)
async def login(
    req: LoginRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with username + password."""
    try:
        user = await store.find_by_username(req.username)
        if user is None:
            await run_in_threadpool(hasher.verify_unknown, req.password)
            raise Unauthorized("Invalid username or password")
        if not await run_in_threadpool(hasher.verify, req.password, user.password_hash):
            raise Unauthorized("Invalid username or password")
        token = tokens.issue(str(user.id))
    except AccountError:
        raise
    except Exception as exc:
        logger.exception("Login error")
        raise InternalError("Server error") from exc

    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token}
