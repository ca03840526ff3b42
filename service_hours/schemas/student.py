# service_hours/schemas/student.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, Literal
from datetime import datetime
from uuid import UUID

StudentStatus = Literal["active", "inactive", "pending", "completed"]


class StudentCreate(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    program: str = Field(..., min_length=1, max_length=128)
    year: int = Field(default=1, ge=1, le=10)
    total_hours: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    status: StudentStatus = "active"

    @field_validator("student_id", "name", "program")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class StudentUpdate(BaseModel):
    """Profile edit; ``remaining_hours`` is ledger-managed and not accepted here."""
    student_id: Optional[str] = Field(None, min_length=1, max_length=32)
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    email: Optional[EmailStr] = None
    program: Optional[str] = Field(None, min_length=1, max_length=128)
    year: Optional[int] = Field(None, ge=1, le=10)
    total_hours: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    status: Optional[StudentStatus] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower().strip() if v else v


class StudentOut(BaseModel):
    id: UUID
    student_id: str
    name: str
    email: str
    program: str
    year: int
    total_hours: float
    remaining_hours: float
    status: StudentStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
