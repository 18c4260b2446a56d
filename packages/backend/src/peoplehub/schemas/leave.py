"""Pydantic schemas for leave requests."""

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from peoplehub.db.models import LeaveStatus
from peoplehub.schemas.staff import EmployeeRead


class LeaveCreate(BaseModel):
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=500)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "LeaveCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]


class LeaveRead(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    decided_by: Optional[uuid.UUID] = None
    employee: EmployeeRead
    created_at: datetime

    model_config = {"from_attributes": True}
