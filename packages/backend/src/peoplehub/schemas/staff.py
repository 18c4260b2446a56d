"""Pydantic schemas for employees and service managers."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from peoplehub.schemas.auth import EMAIL_PATTERN
from peoplehub.schemas.user import UserRead


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    department: Optional[str] = Field(None, max_length=100)


class EmployeeCreate(StaffCreate):
    designation: Optional[str] = Field(None, max_length=100)


class EmployeeRead(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    department: Optional[str] = None
    designation: Optional[str] = None
    user: UserRead
    created_at: datetime

    model_config = {"from_attributes": True}


class ServiceManagerRead(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    department: Optional[str] = None
    user: UserRead
    created_at: datetime

    model_config = {"from_attributes": True}
