"""
Pydantic request / response schemas for the account API.

Field-level rules (username charset, phone digits, email shape) live in
``utils.validators`` so the store enforces them on every write; the
models here only describe the wire shape.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

# String fields run through the sanitiser gate, per route.
SIGNUP_FIELDS = ("username", "password", "email", "phone", "dob")
LOGIN_FIELDS = ("username", "password")
PROFILE_FIELDS = ("username", "email", "phone", "dob")


class SignupRequest(BaseModel):
    username: str
    password: str = Field(..., min_length=1)
    email: str
    phone: Optional[str] = None
    dob: str


class LoginRequest(BaseModel):
    username: str
    password: str


class ProfileUpdateRequest(BaseModel):
    """All four fields are required; presence is checked by the handler."""

    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    dob: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    username: str
    email: str
    phone: Optional[str] = None
    dob: str


class MessageResponse(BaseModel):
    message: str
