# service_hours/services/status.py - Student status derivation
import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from service_hours.models.student import Student
from service_hours.models.service_assignment import ServiceAssignment, NON_TERMINAL_STATUSES

logger = logging.getLogger(__name__)

# Hours move in 0.5 steps; repeated +/- can leave float residue
HOURS_EPSILON = 0.001


def derive_student_status(current_status: str, remaining_hours: float, open_assignments: int) -> str:
    """
    Compute a student's aggregate status.

    ``completed`` is sticky. Otherwise a student with no balance left and no
    pending/in-progress assignments becomes ``completed``; every other case
    keeps the current (admin-managed) status.
    """
    if current_status == "completed":
        return "completed"
    if remaining_hours < HOURS_EPSILON and open_assignments == 0:
        return "completed"
    return current_status


def count_open_assignments(db: Session, student_id) -> int:
    return db.execute(
        select(func.count(ServiceAssignment.id)).where(
            ServiceAssignment.student_id == student_id,
            ServiceAssignment.status.in_(NON_TERMINAL_STATUSES),
        )
    ).scalar_one()


def refresh_student_status(db: Session, student: Student) -> str:
    """Flush pending changes, then re-derive and store ``student.status``."""
    db.flush()
    open_assignments = count_open_assignments(db, student.id)
    new_status = derive_student_status(student.status, student.remaining_hours, open_assignments)
    if new_status != student.status:
        logger.info(f"Student {student.student_id} status {student.status} -> {new_status}")
        student.status = new_status
    return new_status
