# service_hours/services/reconciliation.py - Audit stored balances against committed assignments
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from typing import List
import logging

from service_hours.models.student import Student
from service_hours.models.service_request import ServiceRequest
from service_hours.models.service_assignment import ServiceAssignment
from service_hours.schemas.dashboard import LedgerIssue
from service_hours.services.status import HOURS_EPSILON

logger = logging.getLogger(__name__)


def _committed_by(db: Session, column) -> dict:
    rows = db.execute(
        select(column, func.sum(ServiceAssignment.hours))
        .where(ServiceAssignment.status != "cancelled", column.is_not(None))
        .group_by(column)
    ).all()
    return {key: hours for key, hours in rows}


def _check(entity: str, row, label: str, committed: float) -> List[LedgerIssue]:
    expected = row.total_hours - committed
    issues = []

    def issue(problem: str) -> LedgerIssue:
        return LedgerIssue(
            entity=entity,
            id=row.id,
            label=label,
            problem=problem,
            stored_remaining=row.remaining_hours,
            expected_remaining=expected,
        )

    if row.remaining_hours < -HOURS_EPSILON:
        issues.append(issue("negative balance"))
    if row.remaining_hours - row.total_hours > HOURS_EPSILON:
        issues.append(issue("balance above total"))
    if abs(row.remaining_hours - expected) > HOURS_EPSILON:
        issues.append(issue("balance does not match committed assignments"))
    return issues


def find_inconsistencies(db: Session) -> List[LedgerIssue]:
    """
    Check every student and service request balance.

    ``remaining_hours`` must equal ``total_hours`` minus the hours of all
    non-cancelled assignments, and stay within ``[0, total_hours]``.
    Nothing is corrected; issues are returned for manual reconciliation.
    """
    issues: List[LedgerIssue] = []

    student_commitments = _committed_by(db, ServiceAssignment.student_id)
    for student in db.execute(select(Student).order_by(Student.name)).scalars():
        issues.extend(_check("student", student, student.student_id, student_commitments.get(student.id, 0.0)))

    request_commitments = _committed_by(db, ServiceAssignment.service_request_id)
    for request in db.execute(select(ServiceRequest).order_by(ServiceRequest.created_at)).scalars():
        issues.extend(_check("service_request", request, request.service_type, request_commitments.get(request.id, 0.0)))

    if issues:
        logger.warning(f"Ledger audit found {len(issues)} inconsistencies")
    return issues
