"""Pydantic schemas for login, password reset, and password change.

Learn: Request models never echo passwords back, and no response model
has a field for a hash or an opaque token.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from peoplehub.db.models import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: Role
    company: Optional[uuid.UUID] = None
    token: str
    token_type: str = "bearer"


class PrincipalRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: Role
    company: Optional[uuid.UUID] = None


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=6)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class MessageResponse(BaseModel):
    message: str
