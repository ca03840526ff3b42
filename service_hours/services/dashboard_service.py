# service_hours/services/dashboard_service.py - Read models for the admin and supervisor dashboards
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from collections import defaultdict
from typing import Dict, List

from service_hours.models.student import Student, STUDENT_STATUSES
from service_hours.models.service_request import ServiceRequest, REQUEST_STATUSES
from service_hours.models.service_assignment import ServiceAssignment, NON_TERMINAL_STATUSES
from service_hours.schemas.dashboard import (
    DashboardMetrics,
    ProgressAssignment,
    ProgressOverview,
    StudentProgress,
)
from service_hours.schemas.service_request import ServiceRequestOut

RECENT_REQUEST_LIMIT = 5


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _count_by_status(self, model, statuses) -> Dict[str, int]:
        rows = self.db.execute(
            select(model.status, func.count(model.id)).group_by(model.status)
        ).all()
        counts = {status: 0 for status in statuses}
        counts.update({status: count for status, count in rows})
        return counts

    def _sum_hours(self, *statuses: str) -> float:
        return self.db.execute(
            select(func.coalesce(func.sum(ServiceAssignment.hours), 0.0)).where(
                ServiceAssignment.status.in_(statuses)
            )
        ).scalar_one()

    def metrics(self) -> DashboardMetrics:
        students = self._count_by_status(Student, STUDENT_STATUSES)
        requests = self._count_by_status(ServiceRequest, REQUEST_STATUSES)
        committed = self._sum_hours(*NON_TERMINAL_STATUSES)
        completed = self._sum_hours("completed")
        assigned = committed + completed

        return DashboardMetrics(
            total_students=sum(students.values()),
            students_by_status=students,
            total_requests=sum(requests.values()),
            requests_by_status=requests,
            hours_committed=committed,
            hours_completed=completed,
            completion_rate=round(completed / assigned * 100, 1) if assigned else 0.0,
        )

    def progress(self) -> ProgressOverview:
        """Per-student progress for every student holding at least one assignment."""
        rows = self.db.execute(
            select(ServiceAssignment, Student)
            .join(Student, ServiceAssignment.student_id == Student.id)
            .order_by(Student.name, ServiceAssignment.start_date)
        ).all()

        grouped: Dict = defaultdict(list)
        students = {}
        for assignment, student in rows:
            grouped[student.id].append(assignment)
            students[student.id] = student

        progress: List[StudentProgress] = []
        for student_id, assignments in grouped.items():
            student = students[student_id]
            assigned = sum(a.hours for a in assignments if a.status != "cancelled")
            completed = sum(a.hours for a in assignments if a.status == "completed")
            progress.append(StudentProgress(
                id=student.id,
                name=student.name,
                student_id=student.student_id,
                assigned_hours=assigned,
                completed_hours=completed,
                progress_percentage=round(completed / assigned * 100, 1) if assigned else 0.0,
                assignments=[
                    ProgressAssignment(id=a.id, hours=a.hours, start_date=a.start_date, status=a.status)
                    for a in assignments
                ],
            ))

        recent = self.db.execute(
            select(ServiceRequest).order_by(ServiceRequest.created_at.desc()).limit(RECENT_REQUEST_LIMIT)
        ).scalars().all()

        return ProgressOverview(
            students=progress,
            recent_requests=[ServiceRequestOut.model_validate(r) for r in recent],
        )
