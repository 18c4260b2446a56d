"""Pydantic schemas for companies and invitations."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from peoplehub.db.models import CompanyStatus
from peoplehub.schemas.auth import EMAIL_PATTERN
from peoplehub.schemas.user import UserRead


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    logo: str = Field(..., min_length=1, max_length=500)
    admin_email: str = Field(..., pattern=EMAIL_PATTERN)


class CompanyRead(BaseModel):
    id: uuid.UUID
    name: str
    logo: str
    admin_id: Optional[uuid.UUID] = None
    status: CompanyStatus
    invitation_expires_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CompanyStatusUpdate(BaseModel):
    status: Literal["active", "inactive"]


class AcceptInvitationRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)


class ActivationResponse(BaseModel):
    message: str = "Company activated successfully"
    company: CompanyRead
    user: UserRead
