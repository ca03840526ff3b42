# service_hours/services/lifecycle.py - Assignment state machine
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from service_hours.core.exceptions import InvalidTransition, NotFound, ValidationError
from service_hours.models.service_assignment import (
    ServiceAssignment,
    ASSIGNMENT_STATUSES,
    TERMINAL_STATUSES,
)
from service_hours.services.ledger import BalanceLedger

logger = logging.getLogger(__name__)

# target status -> statuses it may be entered from
TRANSITIONS = {
    "in_progress": ("pending",),
    "completed": ("pending", "in_progress"),
    "cancelled": ("pending", "in_progress"),
}


class AssignmentLifecycle:
    """Moves assignments forward and applies the matching ledger effect."""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = BalanceLedger(db)

    def get_assignment(self, assignment_id: UUID) -> ServiceAssignment:
        assignment = self.db.get(ServiceAssignment, assignment_id)
        if not assignment:
            raise NotFound("Assignment", assignment_id)
        return assignment

    def transition(self, assignment_id: UUID, target: str) -> ServiceAssignment:
        if target not in ASSIGNMENT_STATUSES:
            raise ValidationError(f"Unknown assignment status '{target}'", field="status")

        assignment = self.get_assignment(assignment_id)
        current = assignment.status

        if current in TERMINAL_STATUSES or current not in TRANSITIONS.get(target, ()):
            raise InvalidTransition("assignment", current, target)

        if target == "completed":
            return self.ledger.finalize(assignment)
        if target == "cancelled":
            return self.ledger.release(assignment)

        assignment.status = target
        logger.info(f"Assignment {assignment.id} {current} -> {target}")
        return assignment

    def start(self, assignment_id: UUID) -> ServiceAssignment:
        return self.transition(assignment_id, "in_progress")

    def complete(self, assignment_id: UUID) -> ServiceAssignment:
        return self.transition(assignment_id, "completed")

    def cancel(self, assignment_id: UUID) -> ServiceAssignment:
        return self.transition(assignment_id, "cancelled")
