# service_hours/schemas/assignment.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal
from datetime import date, datetime
from uuid import UUID

AssignmentStatus = Literal["pending", "in_progress", "completed", "cancelled"]
VerificationStatus = Literal["pending", "verified", "rejected"]


class AssignmentCreate(BaseModel):
    """Direct grant, or an assignment drawn from ``service_request_id``."""
    student_id: UUID
    hours: float = Field(..., gt=0, allow_inf_nan=False)
    service_request_id: Optional[UUID] = None
    start_date: Optional[date] = None
    service_type: Optional[str] = Field(None, max_length=128)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    supervisor: Optional[str] = Field(None, max_length=128)
    supervisor_email: Optional[str] = Field(None, max_length=255)

    def grant_details(self) -> dict:
        return {
            "service_type": self.service_type,
            "description": self.description or "",
            "location": self.location or "",
            "supervisor": self.supervisor,
            "supervisor_email": self.supervisor_email,
        }


class AssignmentOut(BaseModel):
    id: UUID
    student_id: UUID
    service_request_id: Optional[UUID]
    hours: float
    status: AssignmentStatus
    verification_status: VerificationStatus
    start_date: date
    end_date: Optional[date]
    service_type: str
    description: str
    location: str
    supervisor: Optional[str]
    supervisor_email: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
