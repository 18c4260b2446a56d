"""Pydantic schemas for users."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from peoplehub.db.models import Role, UserStatus


class UserRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: Role
    company_id: Optional[uuid.UUID] = None
    status: UserStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class UserStatusUpdate(BaseModel):
    status: Literal["active", "inactive"]
