# tests/test_api.py - HTTP surface and error mapping
import uuid

import pytest


@pytest.fixture
def student(client):
    response = client.post("/api/students/", json={
        "student_id": "S20001",
        "name": "Priya Nair",
        "email": "priya.nair@university.edu",
        "program": "Nursing",
        "year": 3,
        "total_hours": 10,
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def approved_request(client):
    response = client.post("/api/service-requests/", json={
        "service_type": "Food Bank",
        "description": "Sorting donations on weekends",
        "location": "Community Center",
        "supervisor_name": "Marcus Lee",
        "supervisor_email": "marcus.lee@university.edu",
        "total_hours": 15,
    })
    assert response.status_code == 201
    assert response.json()["status"] == "pending"

    request_id = response.json()["id"]
    approved = client.put(f"/api/service-requests/{request_id}/approve")
    assert approved.status_code == 200
    return approved.json()


def assign(client, request_id, student_id, hours):
    return client.post(f"/api/service-requests/{request_id}/assign", json={"student_id": student_id, "hours": hours})


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["database"]["status"] == "healthy"


def test_assign_complete_flow(client, student, approved_request):
    response = assign(client, approved_request["id"], student["id"], 10)
    assert response.status_code == 201
    assignment = response.json()
    assert assignment["status"] == "pending"
    assert assignment["service_type"] == "Food Bank"

    completed = client.put(f"/api/assignments/{assignment['id']}/complete")
    assert completed.status_code == 200
    assert completed.json()["verification_status"] == "verified"

    refreshed = client.get(f"/api/students/{student['id']}").json()
    assert refreshed["remaining_hours"] == 0
    assert refreshed["status"] == "completed"
    assert client.get(f"/api/service-requests/{approved_request['id']}").json()["remaining_hours"] == 5

    history = client.get(f"/api/students/{student['id']}/assignments").json()
    assert [a["id"] for a in history] == [assignment["id"]]


def test_insufficient_hours_names_the_limit(client, student, approved_request):
    response = assign(client, approved_request["id"], student["id"], 11)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "insufficient_student_hours"
    assert body["detail"] == "Cannot assign 11 hours. Student only has 10 remaining hours available."
    assert body["context"]["available"] == 10
    assert client.get(f"/api/students/{student['id']}").json()["remaining_hours"] == 10


def test_request_allotment_limits_assignment(client, approved_request):
    big = client.post("/api/students/", json={
        "student_id": "S20002",
        "name": "Tom Hale",
        "email": "tom.hale@university.edu",
        "program": "Law",
        "total_hours": 40,
    }).json()

    response = assign(client, approved_request["id"], big["id"], 16)

    assert response.status_code == 400
    assert response.json()["error"] == "insufficient_request_hours"


def test_cancel_returns_hours_and_second_cancel_conflicts(client, student, approved_request):
    assignment = assign(client, approved_request["id"], student["id"], 4).json()

    first = client.put(f"/api/assignments/{assignment['id']}/cancel")
    second = client.put(f"/api/assignments/{assignment['id']}/cancel")

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["error"] == "invalid_transition"
    assert client.get(f"/api/students/{student['id']}").json()["remaining_hours"] == 10
    assert client.get(f"/api/service-requests/{approved_request['id']}").json()["remaining_hours"] == 15


def test_start_then_list_by_status(client, student, approved_request):
    assignment = assign(client, approved_request["id"], student["id"], 2).json()
    client.put(f"/api/assignments/{assignment['id']}/start")

    in_progress = client.get("/api/assignments/", params={"status": "in_progress"}).json()
    pending = client.get("/api/assignments/", params={"status": "pending"}).json()

    assert [a["id"] for a in in_progress] == [assignment["id"]]
    assert pending == []


def test_direct_grant_requires_service_type(client, student):
    response = client.post("/api/assignments/", json={"student_id": student["id"], "hours": 2})

    assert response.status_code == 400
    assert response.json()["context"]["field"] == "service_type"


def test_direct_grant(client, student):
    response = client.post("/api/assignments/", json={
        "student_id": student["id"],
        "hours": 1.5,
        "service_type": "Campus Cleanup",
        "location": "North Quad",
    })

    assert response.status_code == 201
    assert response.json()["service_request_id"] is None
    assert client.get(f"/api/students/{student['id']}").json()["remaining_hours"] == 8.5


def test_pending_request_rejects_assignments(client, student):
    pending = client.post("/api/service-requests/", json={
        "service_type": "Tutoring",
        "description": "Math help",
        "location": "Room 101",
        "supervisor_name": "Ann Moore",
        "supervisor_email": "ann.moore@university.edu",
        "total_hours": 5,
    }).json()

    response = assign(client, pending["id"], student["id"], 1)

    assert response.status_code == 400


def test_approving_twice_conflicts(client, approved_request):
    response = client.put(f"/api/service-requests/{approved_request['id']}/approve")

    assert response.status_code == 409


def test_duplicate_student_conflicts(client, student):
    response = client.post("/api/students/", json={**student, "student_id": "S20099"})

    assert response.status_code == 409
    assert response.json()["context"]["field"] == "email"


def test_unknown_ids_are_404(client):
    missing = uuid.uuid4()

    assert client.get(f"/api/students/{missing}").status_code == 404
    assert client.get(f"/api/service-requests/{missing}").status_code == 404
    assert client.put(f"/api/assignments/{missing}/complete").status_code == 404


def test_schema_validation_is_422(client):
    response = client.post("/api/service-requests/", json={
        "service_type": "Tutoring",
        "description": "x" * 101,
        "location": "Room 101",
        "supervisor_name": "Ann Moore",
        "supervisor_email": "ann.moore@university.edu",
        "total_hours": 0,
    })

    assert response.status_code == 422


def test_total_hours_edit_below_commitment(client, student, approved_request):
    assign(client, approved_request["id"], student["id"], 6)

    rejected = client.patch(f"/api/students/{student['id']}", json={"total_hours": 5})
    accepted = client.patch(f"/api/students/{student['id']}", json={"total_hours": 12})

    assert rejected.status_code == 400
    assert accepted.status_code == 200
    assert accepted.json()["remaining_hours"] == 6


def test_delete_request_reports_returned_hours(client, student, approved_request):
    assign(client, approved_request["id"], student["id"], 3)

    response = client.delete(f"/api/service-requests/{approved_request['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["returned_hours"] == [{"student_id": student["id"], "student_name": "Priya Nair", "hours": 3}]
    assert client.get(f"/api/students/{student['id']}").json()["remaining_hours"] == 10
    assert client.get(f"/api/service-requests/{approved_request['id']}").status_code == 404


def test_delete_student(client, student):
    assert client.delete(f"/api/students/{student['id']}").status_code == 204
    assert client.get(f"/api/students/{student['id']}").status_code == 404


def test_dashboard_and_reconciliation(client, student, approved_request):
    assignment = assign(client, approved_request["id"], student["id"], 4).json()
    client.put(f"/api/assignments/{assignment['id']}/complete")

    metrics = client.get("/api/dashboard/metrics").json()
    assert metrics["total_students"] == 1
    assert metrics["requests_by_status"]["approved"] == 1
    assert metrics["hours_completed"] == 4
    assert metrics["completion_rate"] == 100.0

    assert client.get("/api/dashboard/reconciliation").json() == []


def test_report_rejects_inverted_range(client):
    response = client.get("/api/reports/summary", params={"start_date": "2026-10-10", "end_date": "2026-10-01"})

    assert response.status_code == 400


@pytest.mark.parametrize("path", ["/api/assignments/", "/api/service-requests/{request_id}/assign"])
def test_nan_hours_rejected(client, student, approved_request, path):
    response = client.post(
        path.format(request_id=approved_request["id"]),
        content=f'{{"student_id": "{student["id"]}", "hours": NaN, "service_type": "Tutoring"}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert client.get(f"/api/students/{student['id']}").json()["remaining_hours"] == 10
