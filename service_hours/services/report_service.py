# service_hours/services/report_service.py - Aggregated service-hour report data
from sqlalchemy.orm import Session
from sqlalchemy import select
from collections import defaultdict
from datetime import date
from typing import Optional

from service_hours.core.exceptions import ValidationError
from service_hours.models.student import Student
from service_hours.models.service_assignment import ServiceAssignment
from service_hours.schemas.report import ReportSummary, StudentReportRow


class ReportService:
    def __init__(self, db: Session):
        self.db = db

    def summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        service_type: Optional[str] = None,
        program: Optional[str] = None,
    ) -> ReportSummary:
        """
        Summarize assignments whose start date falls in the given range.

        Cancelled assignments are counted per student as ``cancelled_hours``
        but left out of every other total.
        """
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date cannot be before start_date", field="end_date")

        query = select(ServiceAssignment, Student).join(Student, ServiceAssignment.student_id == Student.id)
        if start_date:
            query = query.where(ServiceAssignment.start_date >= start_date)
        if end_date:
            query = query.where(ServiceAssignment.start_date <= end_date)
        if service_type:
            query = query.where(ServiceAssignment.service_type == service_type)
        if program:
            query = query.where(Student.program == program)

        rows = self.db.execute(query.order_by(Student.name)).all()

        by_type = defaultdict(float)
        by_program = defaultdict(float)
        per_student = {}
        total = completed = 0.0
        count = 0

        for assignment, student in rows:
            row = per_student.get(student.id)
            if row is None:
                row = per_student[student.id] = StudentReportRow(
                    id=student.id,
                    student_id=student.student_id,
                    name=student.name,
                    program=student.program,
                    assigned_hours=0.0,
                    completed_hours=0.0,
                    cancelled_hours=0.0,
                    remaining_hours=student.remaining_hours,
                    status=student.status,
                )

            if assignment.status == "cancelled":
                row.cancelled_hours += assignment.hours
                continue

            count += 1
            total += assignment.hours
            row.assigned_hours += assignment.hours
            by_type[assignment.service_type] += assignment.hours
            by_program[student.program] += assignment.hours
            if assignment.status == "completed":
                completed += assignment.hours
                row.completed_hours += assignment.hours

        return ReportSummary(
            start_date=start_date,
            end_date=end_date,
            service_type=service_type,
            program=program,
            assignment_count=count,
            total_hours=total,
            completed_hours=completed,
            hours_by_service_type=dict(by_type),
            hours_by_program=dict(by_program),
            students=list(per_student.values()),
        )
