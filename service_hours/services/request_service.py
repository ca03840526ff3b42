# service_hours/services/request_service.py - Service request workflow
from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_
from datetime import date, timedelta
from typing import Dict, List, Optional
from uuid import UUID
import logging

from service_hours.core.config import settings
from service_hours.core.db import run_atomic
from service_hours.core.exceptions import InvalidTransition, NotFound
from service_hours.models.student import Student
from service_hours.models.service_request import ServiceRequest
from service_hours.models.service_assignment import ServiceAssignment, NON_TERMINAL_STATUSES
from service_hours.schemas.service_request import (
    AssignStudent,
    ReturnedHours,
    ServiceRequestCreate,
    ServiceRequestDeletion,
)
from service_hours.services.ledger import BalanceLedger
from service_hours.services.status import refresh_student_status

logger = logging.getLogger(__name__)


class ServiceRequestService:
    """Submission, decision, assignment and removal of service requests"""

    def __init__(self, db: Session):
        self.db = db

    def get_request(self, request_id: UUID) -> ServiceRequest:
        request = self.db.get(ServiceRequest, request_id)
        if not request:
            raise NotFound("Service request", request_id)
        return request

    def list_requests(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ServiceRequest]:
        query = select(ServiceRequest)

        if status:
            query = query.where(ServiceRequest.status == status)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(ServiceRequest.service_type).like(pattern),
                    func.lower(ServiceRequest.description).like(pattern),
                    func.lower(ServiceRequest.supervisor_name).like(pattern),
                    func.lower(ServiceRequest.location).like(pattern),
                )
            )

        query = query.order_by(ServiceRequest.created_at.desc())
        if limit:
            query = query.limit(limit)

        return list(self.db.execute(query).scalars().all())

    def list_assignments(self, request_id: UUID) -> List[ServiceAssignment]:
        self.get_request(request_id)
        return list(
            self.db.execute(
                select(ServiceAssignment)
                .where(ServiceAssignment.service_request_id == request_id)
                .order_by(ServiceAssignment.created_at.desc())
            ).scalars().all()
        )

    def submit(self, data: ServiceRequestCreate) -> ServiceRequest:
        """Supervisor submission: pending, with its full allotment available."""
        start = data.start_date or date.today()
        end = data.end_date or start + timedelta(days=settings.SERVICE_REQUEST_DEFAULT_DAYS)

        def operation(db: Session) -> ServiceRequest:
            request = ServiceRequest(
                service_type=data.service_type,
                description=data.description,
                location=data.location,
                supervisor_name=data.supervisor_name,
                supervisor_email=data.supervisor_email,
                total_hours=data.total_hours,
                remaining_hours=data.total_hours,
                status="pending",
                start_date=start,
                end_date=end,
            )
            db.add(request)
            db.flush()
            return request

        request = run_atomic(self.db, operation, name="submit service request")
        logger.info(f"Service request {request.id} submitted by {request.supervisor_email} for {request.total_hours:g}h")
        return request

    def decide(self, request_id: UUID, decision: str) -> ServiceRequest:
        """Approve or reject a pending request."""

        def operation(db: Session) -> ServiceRequest:
            request = self.get_request(request_id)
            if request.status != "pending":
                raise InvalidTransition("service request", request.status, decision)
            request.status = decision
            db.flush()
            return request

        request = run_atomic(self.db, operation, name=f"{decision} service request")
        logger.info(f"Service request {request.id} {decision}")
        return request

    def approve(self, request_id: UUID) -> ServiceRequest:
        return self.decide(request_id, "approved")

    def reject(self, request_id: UUID) -> ServiceRequest:
        return self.decide(request_id, "rejected")

    def assign_student(self, request_id: UUID, data: AssignStudent) -> ServiceAssignment:
        return run_atomic(
            self.db,
            lambda db: BalanceLedger(db).commit(
                data.student_id, data.hours, request_id=request_id, start_date=data.start_date
            ),
            name="assign student",
        )

    def delete_request(self, request_id: UUID) -> ServiceRequestDeletion:
        """
        Remove a request and dispose of its assignments.

        Pending and in-progress assignments are released first, so both the
        student and the request get their hours back, and are then deleted
        together with already cancelled ones. Completed assignments keep
        their committed hours and are detached from the request instead.
        """

        def operation(db: Session) -> ServiceRequestDeletion:
            request = self.get_request(request_id)
            ledger = BalanceLedger(db)
            assignments = db.execute(
                select(ServiceAssignment).where(ServiceAssignment.service_request_id == request.id)
            ).scalars().all()

            returned: List[ReturnedHours] = []
            students: Dict[UUID, Student] = {}
            deleted = detached = 0

            for assignment in assignments:
                students[assignment.student_id] = assignment.student
                if assignment.status in NON_TERMINAL_STATUSES:
                    ledger.release(assignment)
                    returned.append(ReturnedHours(
                        student_id=assignment.student_id,
                        student_name=assignment.student.name,
                        hours=assignment.hours,
                    ))

                if assignment.status == "completed":
                    assignment.service_request = None
                    detached += 1
                else:
                    db.delete(assignment)
                    deleted += 1

            db.flush()
            for student in students.values():
                refresh_student_status(db, student)

            db.delete(request)
            db.flush()

            return ServiceRequestDeletion(
                request_id=request_id,
                returned_hours=returned,
                deleted_assignments=deleted,
                detached_assignments=detached,
            )

        result = run_atomic(self.db, operation, name="delete service request")
        if result.returned_hours:
            summary = ", ".join(f"{r.student_name}: {r.hours:g} hours" for r in result.returned_hours)
            logger.info(f"Service request {request_id} removed. Hours returned to students: {summary}")
        else:
            logger.info(f"Service request {request_id} removed")
        return result
