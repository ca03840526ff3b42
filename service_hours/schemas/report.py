# service_hours/schemas/report.py
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date
from uuid import UUID


class StudentReportRow(BaseModel):
    id: UUID
    student_id: str
    name: str
    program: str
    assigned_hours: float
    completed_hours: float
    cancelled_hours: float
    remaining_hours: float
    status: str


class ReportSummary(BaseModel):
    start_date: Optional[date]
    end_date: Optional[date]
    service_type: Optional[str]
    program: Optional[str]
    assignment_count: int
    total_hours: float
    completed_hours: float
    hours_by_service_type: Dict[str, float]
    hours_by_program: Dict[str, float]
    students: List[StudentReportRow]
