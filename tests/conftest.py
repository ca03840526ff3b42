# tests/conftest.py - Shared fixtures: in-memory database, sessions, API client, factories
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENV", "test")

import itertools

import pytest
from fastapi.testclient import TestClient

from service_hours.core.db import get_engine, get_session_maker
from service_hours.models import Base
from service_hours.schemas.service_request import ServiceRequestCreate
from service_hours.schemas.student import StudentCreate
from service_hours.services.request_service import ServiceRequestService
from service_hours.services.student_service import StudentService

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def fresh_schema():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def session_factory():
    sessions = []
    maker = get_session_maker()

    def factory():
        session = maker()
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.close()


@pytest.fixture
def db(session_factory):
    return session_factory()


@pytest.fixture
def client():
    from service_hours.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_student(db):
    def factory(total_hours=10.0, **overrides):
        n = next(_counter)
        data = {
            "student_id": f"S{10000 + n}",
            "name": f"Student {n}",
            "email": f"student{n}@university.edu",
            "program": "Computer Science",
            "year": 2,
            "total_hours": total_hours,
        }
        data.update(overrides)
        return StudentService(db).create_student(StudentCreate(**data))

    return factory


@pytest.fixture
def make_request(db):
    def factory(total_hours=20.0, approved=True, **overrides):
        data = {
            "service_type": "Library Assistant",
            "description": "Shelving and front desk support",
            "location": "Main Library",
            "supervisor_name": "Dana Reyes",
            "supervisor_email": "dana.reyes@university.edu",
            "total_hours": total_hours,
        }
        data.update(overrides)
        service = ServiceRequestService(db)
        request = service.submit(ServiceRequestCreate(**data))
        if approved:
            request = service.approve(request.id)
        return request

    return factory
