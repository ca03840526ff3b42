# service_hours/schemas/dashboard.py
from pydantic import BaseModel
from typing import Dict, List
from datetime import date
from uuid import UUID

from service_hours.schemas.service_request import ServiceRequestOut


class DashboardMetrics(BaseModel):
    total_students: int
    students_by_status: Dict[str, int]
    total_requests: int
    requests_by_status: Dict[str, int]
    hours_committed: float
    hours_completed: float
    completion_rate: float


class ProgressAssignment(BaseModel):
    id: UUID
    hours: float
    start_date: date
    status: str


class StudentProgress(BaseModel):
    id: UUID
    name: str
    student_id: str
    assigned_hours: float
    completed_hours: float
    progress_percentage: float
    assignments: List[ProgressAssignment]


class ProgressOverview(BaseModel):
    students: List[StudentProgress]
    recent_requests: List[ServiceRequestOut]


class LedgerIssue(BaseModel):
    entity: str
    id: UUID
    label: str
    problem: str
    stored_remaining: float
    expected_remaining: float
