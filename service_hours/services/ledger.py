# service_hours/services/ledger.py - Balance ledger for student and service request hours
from datetime import date
import math
from typing import Optional, Dict, Any
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from service_hours.core.exceptions import (
    InsufficientRequestHours,
    InsufficientStudentHours,
    InvalidTransition,
    LedgerInconsistency,
    NotFound,
    ValidationError,
)
from service_hours.models.student import Student
from service_hours.models.service_request import ServiceRequest
from service_hours.models.service_assignment import ServiceAssignment, NON_TERMINAL_STATUSES
from service_hours.services.status import HOURS_EPSILON, refresh_student_status

logger = logging.getLogger(__name__)


def _debit(balance: float, hours: float) -> float:
    remaining = balance - hours
    return 0.0 if remaining < HOURS_EPSILON else remaining


def _credit(balance: float, hours: float, ceiling: float, entity: str, identifier) -> float:
    credited = balance + hours
    if credited - ceiling > HOURS_EPSILON:
        raise LedgerInconsistency(
            f"Returning {hours:g} hours would push {entity} {identifier} above its total of {ceiling:g}; manual reconciliation required",
            entity=entity,
            id=str(identifier),
            balance=balance,
            total=ceiling,
        )
    return min(credited, ceiling)


class BalanceLedger:
    """
    Keeps ``remaining_hours`` on students and service requests consistent
    with the hours held by their assignments.

    Methods mutate rows inside the caller's session and never commit; wrap
    each call in ``run_atomic`` so the whole sequence lands or none of it.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_student(self, student_id: UUID) -> Student:
        student = self.db.get(Student, student_id)
        if not student:
            raise NotFound("Student", student_id)
        return student

    def get_request(self, request_id: UUID) -> ServiceRequest:
        request = self.db.get(ServiceRequest, request_id)
        if not request:
            raise NotFound("Service request", request_id)
        return request

    def credit_request(self, request_id: UUID, hours: float) -> ServiceRequest:
        request = self.get_request(request_id)
        request.remaining_hours = _credit(
            request.remaining_hours, hours, request.total_hours, "service request", request.id
        )
        return request

    def commit(
        self,
        student_id: UUID,
        hours: float,
        request_id: Optional[UUID] = None,
        start_date: Optional[date] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ServiceAssignment:
        """
        Allocate ``hours`` from the student's (and optionally the request's)
        balance into a new pending assignment.

        Args:
            student_id: Student primary key
            hours: Hours to commit, must be positive
            request_id: Approved service request to draw from, if any
            start_date: Assignment start date (defaults to today)
            details: Descriptive fields for a direct grant with no request

        Raises:
            ValidationError: non-positive hours, request not approved,
                missing service type on a direct grant
            InsufficientStudentHours / InsufficientRequestHours
            NotFound: student or request missing
        """
        if hours is None or not math.isfinite(hours) or hours <= 0:
            raise ValidationError("Hours must be a finite number greater than 0", field="hours")

        student = self.get_student(student_id)
        request = self.get_request(request_id) if request_id else None

        if request is not None and request.status != "approved":
            raise ValidationError(
                f"Service request is {request.status}; only approved requests accept assignments",
                field="service_request_id",
            )

        if hours - student.remaining_hours > HOURS_EPSILON:
            raise InsufficientStudentHours(hours, student.remaining_hours, student.student_id)
        if request is not None and hours - request.remaining_hours > HOURS_EPSILON:
            raise InsufficientRequestHours(hours, request.remaining_hours, str(request.id))

        if request is not None:
            fields = {
                "service_type": request.service_type,
                "description": request.description,
                "location": request.location,
                "supervisor": request.supervisor_name,
                "supervisor_email": request.supervisor_email,
                "end_date": request.end_date,
            }
        else:
            fields = dict(details or {})
            if not (fields.get("service_type") or "").strip():
                raise ValidationError("Service type is required for a direct grant", field="service_type")

        assignment = ServiceAssignment(
            student=student,
            service_request=request,
            hours=hours,
            status="pending",
            verification_status="pending",
            start_date=start_date or date.today(),
            **fields,
        )
        self.db.add(assignment)

        student.remaining_hours = _debit(student.remaining_hours, hours)
        if request is not None:
            request.remaining_hours = _debit(request.remaining_hours, hours)

        refresh_student_status(self.db, student)

        logger.info(
            f"Committed {hours:g}h for student {student.student_id}"
            + (f" from request {request.id}" if request is not None else " (direct grant)")
        )
        return assignment

    def release(self, assignment: ServiceAssignment) -> ServiceAssignment:
        """Cancel a non-terminal assignment and return its hours to both balances."""
        if assignment.status not in NON_TERMINAL_STATUSES:
            raise InvalidTransition("assignment", assignment.status, "cancelled")

        student = assignment.student
        student.remaining_hours = _credit(
            student.remaining_hours, assignment.hours, student.total_hours, "student", student.student_id
        )

        if assignment.service_request_id is not None:
            self.credit_request(assignment.service_request_id, assignment.hours)

        assignment.status = "cancelled"
        refresh_student_status(self.db, student)

        logger.info(f"Released {assignment.hours:g}h from assignment {assignment.id} back to student {student.student_id}")
        return assignment

    def finalize(self, assignment: ServiceAssignment) -> ServiceAssignment:
        """Mark a non-terminal assignment completed; committed hours stay committed."""
        if assignment.status not in NON_TERMINAL_STATUSES:
            raise InvalidTransition("assignment", assignment.status, "completed")

        assignment.status = "completed"
        assignment.end_date = date.today()
        assignment.verification_status = "verified"
        refresh_student_status(self.db, assignment.student)

        logger.info(f"Finalized assignment {assignment.id} ({assignment.hours:g}h)")
        return assignment
