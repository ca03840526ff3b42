# tests/test_lifecycle.py
import uuid

import pytest

from service_hours.core.db import run_atomic
from service_hours.core.exceptions import InvalidTransition, NotFound, ValidationError
from service_hours.models import ServiceRequest, Student
from service_hours.services.ledger import BalanceLedger
from service_hours.services.lifecycle import AssignmentLifecycle


@pytest.fixture
def assignment(db, make_student, make_request):
    student = make_student(total_hours=12)
    request = make_request(total_hours=20)
    return run_atomic(db, lambda s: BalanceLedger(s).commit(student.id, 5, request_id=request.id))


def move(db, assignment_id, target):
    return run_atomic(db, lambda s: AssignmentLifecycle(s).transition(assignment_id, target))


def test_start_moves_to_in_progress_without_touching_balances(db, assignment):
    started = move(db, assignment.id, "in_progress")

    assert started.status == "in_progress"
    db.expire_all()
    assert db.get(Student, assignment.student_id).remaining_hours == 7
    assert db.get(ServiceRequest, assignment.service_request_id).remaining_hours == 15


def test_in_progress_can_still_be_cancelled(db, assignment):
    move(db, assignment.id, "in_progress")
    cancelled = move(db, assignment.id, "cancelled")

    assert cancelled.status == "cancelled"
    db.expire_all()
    assert db.get(Student, assignment.student_id).remaining_hours == 12
    assert db.get(ServiceRequest, assignment.service_request_id).remaining_hours == 20


def test_in_progress_can_be_completed(db, assignment):
    move(db, assignment.id, "in_progress")
    completed = move(db, assignment.id, "completed")

    assert completed.status == "completed"
    assert completed.verification_status == "verified"


def test_in_progress_cannot_be_started_twice(db, assignment):
    move(db, assignment.id, "in_progress")

    with pytest.raises(InvalidTransition):
        move(db, assignment.id, "in_progress")


@pytest.mark.parametrize("terminal", ["completed", "cancelled"])
@pytest.mark.parametrize("target", ["in_progress", "completed", "cancelled"])
def test_terminal_states_are_final(db, assignment, terminal, target):
    move(db, assignment.id, terminal)

    with pytest.raises(InvalidTransition) as exc:
        move(db, assignment.id, target)

    assert exc.value.context == {"entity": "assignment", "current": terminal, "target": target}


def test_moving_back_to_pending_is_not_allowed(db, assignment):
    with pytest.raises(InvalidTransition):
        move(db, assignment.id, "pending")


def test_unknown_target_status(db, assignment):
    with pytest.raises(ValidationError):
        move(db, assignment.id, "archived")


def test_missing_assignment(db):
    with pytest.raises(NotFound):
        AssignmentLifecycle(db).complete(uuid.uuid4())
