"""
Profile routes — read and update the logged-in user's record.

Both routes sit behind ``get_current_user``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.middleware import SanitisedBody
from auth.dependencies import get_current_user, get_user_store
from database.user_store import UserStore
from utils.errors import AccountError, InternalError, NotFoundError, ValidationError
from utils.schemas import (
    PROFILE_FIELDS,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    404: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


@router.get("/profile", response_model=ProfileResponse, responses=_ERROR_RESPONSES)
async def get_profile(
    identity: Dict[str, Any] = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    """Fetch the current user's profile (no password hash)."""
    try:
        user = await store.find_by_id(identity["id"])
    except Exception as exc:
        logger.exception("Fetch profile error")
        raise InternalError("Server error") from exc

    if user is None:
        raise NotFoundError("User not found")
    return UserStore.to_profile(user)


@router.put(
    "/profile",
    response_model=ProfileResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(SanitisedBody(*PROFILE_FIELDS))],
)
async def update_profile(
    req: ProfileUpdateRequest,
    identity: Dict[str, Any] = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    """Replace username, email, phone and dob of the current user."""
    fields = req.model_dump()
    if not all(fields.get(name) for name in PROFILE_FIELDS):
        raise ValidationError("All fields are required")

    try:
        user = await store.update_by_id(identity["id"], fields)
    except AccountError:
        raise
    except Exception as exc:
        logger.exception("Profile update error")
        raise InternalError("Failed to update profile") from exc

    return UserStore.to_profile(user)
