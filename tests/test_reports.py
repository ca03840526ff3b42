# tests/test_reports.py - Dashboard, report and reconciliation read models
from datetime import date

import pytest
from sqlalchemy import update

from service_hours.core.db import run_atomic
from service_hours.core.exceptions import ValidationError
from service_hours.models import ServiceRequest, Student
from service_hours.schemas.assignment import AssignmentOut
from service_hours.schemas.service_request import ServiceRequestOut
from service_hours.schemas.student import StudentOut
from service_hours.services.dashboard_service import DashboardService
from service_hours.services.ledger import BalanceLedger
from service_hours.services.lifecycle import AssignmentLifecycle
from service_hours.services.reconciliation import find_inconsistencies
from service_hours.services.report_service import ReportService


@pytest.fixture
def activity(db, make_student, make_request):
    """Two students, one request, one assignment in each terminal and open state."""
    maya = make_student(name="Maya Chen", program="Biology", total_hours=20)
    noah = make_student(name="Noah Patel", program="History", total_hours=10)
    request = make_request(total_hours=30, service_type="Food Bank")

    def commit(student, hours, when, **kwargs):
        return run_atomic(db, lambda s: BalanceLedger(s).commit(student.id, hours, start_date=when, **kwargs))

    done = commit(maya, 6, date(2026, 9, 5), request_id=request.id)
    dropped = commit(maya, 2, date(2026, 9, 12), request_id=request.id)
    commit(noah, 4, date(2026, 10, 2), details={"service_type": "Tutoring"})

    run_atomic(db, lambda s: AssignmentLifecycle(s).complete(done.id))
    run_atomic(db, lambda s: AssignmentLifecycle(s).cancel(dropped.id))
    return {"maya": maya, "noah": noah, "request": request}


def test_metrics(db, activity):
    metrics = DashboardService(db).metrics()

    assert metrics.total_students == 2
    assert metrics.students_by_status == {"active": 2, "inactive": 0, "pending": 0, "completed": 0}
    assert metrics.requests_by_status == {"pending": 0, "approved": 1, "rejected": 0}
    assert metrics.hours_committed == 4
    assert metrics.hours_completed == 6
    assert metrics.completion_rate == 60.0


def test_metrics_on_empty_store(db):
    metrics = DashboardService(db).metrics()

    assert metrics.total_students == 0
    assert metrics.completion_rate == 0.0


def test_progress(db, activity):
    overview = DashboardService(db).progress()

    maya, noah = overview.students
    assert maya.name == "Maya Chen"
    assert (maya.assigned_hours, maya.completed_hours, maya.progress_percentage) == (6, 6, 100.0)
    assert [a.status for a in maya.assignments] == ["completed", "cancelled"]
    assert (noah.assigned_hours, noah.completed_hours, noah.progress_percentage) == (4, 0, 0.0)
    assert [r.id for r in overview.recent_requests] == [activity["request"].id]


def test_report_summary_totals(db, activity):
    report = ReportService(db).summary()

    assert report.assignment_count == 2
    assert report.total_hours == 10
    assert report.completed_hours == 6
    assert report.hours_by_service_type == {"Food Bank": 6, "Tutoring": 4}
    assert report.hours_by_program == {"Biology": 6, "History": 4}

    maya = report.students[0]
    assert (maya.assigned_hours, maya.completed_hours, maya.cancelled_hours) == (6, 6, 2)
    assert maya.remaining_hours == 14


def test_report_filters(db, activity):
    service = ReportService(db)

    october = service.summary(start_date=date(2026, 10, 1), end_date=date(2026, 10, 31))
    assert [s.name for s in october.students] == ["Noah Patel"]

    biology = service.summary(program="Biology")
    assert biology.total_hours == 6

    food_bank = service.summary(service_type="Food Bank")
    assert food_bank.assignment_count == 1


def test_report_rejects_inverted_range(db):
    with pytest.raises(ValidationError):
        ReportService(db).summary(start_date=date(2026, 10, 2), end_date=date(2026, 10, 1))


def test_reconciliation_clean_after_normal_activity(db, activity):
    assert find_inconsistencies(db) == []


def test_reconciliation_flags_corrupted_balances(db, activity):
    db.execute(update(Student).where(Student.id == activity["noah"].id).values(remaining_hours=12.0))
    db.execute(update(ServiceRequest).where(ServiceRequest.id == activity["request"].id).values(remaining_hours=30.0))
    db.commit()

    issues = find_inconsistencies(db)

    by_entity = {}
    for issue in issues:
        by_entity.setdefault(issue.entity, []).append(issue.problem)
    assert by_entity["student"] == ["balance above total", "balance does not match committed assignments"]
    assert by_entity["service_request"] == ["balance does not match committed assignments"]

    student_issue = next(i for i in issues if i.entity == "student")
    assert student_issue.label == activity["noah"].student_id
    assert student_issue.stored_remaining == 12
    assert student_issue.expected_remaining == 6


@pytest.mark.parametrize("schema", [StudentOut, ServiceRequestOut, AssignmentOut])
def test_output_schemas_read_orm_rows(schema):
    assert schema.model_config["from_attributes"] is True
    assert "Config" not in vars(schema)


def test_progress_request_rows_validate_from_orm(db, activity):
    recent = DashboardService(db).progress().recent_requests[0]

    assert isinstance(recent, ServiceRequestOut)
    assert recent.remaining_hours == 24
