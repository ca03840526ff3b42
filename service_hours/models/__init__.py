# service_hours/models/__init__.py - Import all models so SQLAlchemy can discover them

from service_hours.models.base import Base

from service_hours.models.student import Student
from service_hours.models.service_request import ServiceRequest
from service_hours.models.service_assignment import ServiceAssignment

__all__ = [
    "Base",
    "Student",
    "ServiceRequest",
    "ServiceAssignment",
]
