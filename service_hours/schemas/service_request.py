# service_hours/schemas/service_request.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional, List, Literal
from datetime import date, datetime
from uuid import UUID

RequestStatus = Literal["pending", "approved", "rejected"]


class ServiceRequestCreate(BaseModel):
    service_type: str = Field(..., min_length=1, max_length=128)
    description: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    supervisor_name: str = Field(..., min_length=1, max_length=128)
    supervisor_email: EmailStr
    total_hours: float = Field(..., gt=0, allow_inf_nan=False)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("service_type", "description", "location", "supervisor_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()

    @model_validator(mode="after")
    def validate_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class ServiceRequestOut(BaseModel):
    id: UUID
    service_type: str
    description: str
    location: str
    supervisor_name: str
    supervisor_email: str
    total_hours: float
    remaining_hours: float
    status: RequestStatus
    start_date: Optional[date]
    end_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssignStudent(BaseModel):
    """Commit hours from an approved request to a student."""
    student_id: UUID
    hours: float = Field(..., gt=0, allow_inf_nan=False)
    start_date: Optional[date] = None


class ReturnedHours(BaseModel):
    student_id: UUID
    student_name: str
    hours: float


class ServiceRequestDeletion(BaseModel):
    request_id: UUID
    returned_hours: List[ReturnedHours] = []
    deleted_assignments: int = 0
    detached_assignments: int = 0
