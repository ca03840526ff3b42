# service_hours/services/student_service.py - Student roster business logic
from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_
from typing import List, Optional
from uuid import UUID
import logging

from service_hours.core.db import run_atomic
from service_hours.core.exceptions import DuplicateRecord, NotFound, ValidationError
from service_hours.models.student import Student
from service_hours.models.service_assignment import ServiceAssignment
from service_hours.schemas.student import StudentCreate, StudentUpdate
from service_hours.services.ledger import BalanceLedger
from service_hours.services.status import HOURS_EPSILON, refresh_student_status

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "name": Student.name,
    "student_id": Student.student_id,
    "email": Student.email,
    "program": Student.program,
    "year": Student.year,
    "total_hours": Student.total_hours,
    "remaining_hours": Student.remaining_hours,
    "status": Student.status,
    "created_at": Student.created_at,
}


def committed_hours(db: Session, student_id: UUID) -> float:
    """Hours held by the student's non-cancelled assignments."""
    return db.execute(
        select(func.coalesce(func.sum(ServiceAssignment.hours), 0.0)).where(
            ServiceAssignment.student_id == student_id,
            ServiceAssignment.status != "cancelled",
        )
    ).scalar_one()


class StudentService:
    """Service class for student roster operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_student(self, student_id: UUID) -> Student:
        student = self.db.get(Student, student_id)
        if not student:
            raise NotFound("Student", student_id)
        return student

    def list_students(
        self,
        search: Optional[str] = None,
        program: Optional[str] = None,
        status: Optional[str] = None,
        sort: str = "name",
        direction: str = "asc",
    ) -> List[Student]:
        if sort not in SORTABLE_COLUMNS:
            raise ValidationError(f"Cannot sort by '{sort}'", field="sort", allowed=sorted(SORTABLE_COLUMNS))

        query = select(Student)

        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(Student.name).like(pattern),
                    func.lower(Student.student_id).like(pattern),
                    func.lower(Student.email).like(pattern),
                )
            )
        if program:
            query = query.where(Student.program == program)
        if status:
            query = query.where(Student.status == status)

        column = SORTABLE_COLUMNS[sort]
        query = query.order_by(column.desc() if direction == "desc" else column.asc())

        return list(self.db.execute(query).scalars().all())

    def list_assignments(self, student_id: UUID) -> List[ServiceAssignment]:
        self.get_student(student_id)
        return list(
            self.db.execute(
                select(ServiceAssignment)
                .where(ServiceAssignment.student_id == student_id)
                .order_by(ServiceAssignment.created_at.desc())
            ).scalars().all()
        )

    def _check_unique(self, student_code: Optional[str], email: Optional[str], exclude: Optional[UUID] = None):
        if student_code:
            query = select(Student.id).where(Student.student_id == student_code)
            if exclude:
                query = query.where(Student.id != exclude)
            if self.db.execute(query).first():
                raise DuplicateRecord(f"Student with ID {student_code} already exists", field="student_id")
        if email:
            query = select(Student.id).where(Student.email == email)
            if exclude:
                query = query.where(Student.id != exclude)
            if self.db.execute(query).first():
                raise DuplicateRecord(f"Student with email {email} already exists", field="email")

    def create_student(self, data: StudentCreate) -> Student:
        """Create a student whose full allotment is still available."""

        def operation(db: Session) -> Student:
            self._check_unique(data.student_id, data.email)
            student = Student(
                student_id=data.student_id,
                name=data.name,
                email=data.email,
                program=data.program,
                year=data.year,
                total_hours=data.total_hours,
                remaining_hours=data.total_hours,
                status=data.status,
            )
            db.add(student)
            db.flush()
            return student

        student = run_atomic(self.db, operation, name="create student")
        logger.info(f"Created student {student.student_id} with {student.total_hours:g} hours")
        return student

    def update_student(self, student_id: UUID, data: StudentUpdate) -> Student:
        """
        Apply a profile edit.

        Changing ``total_hours`` re-derives ``remaining_hours`` from the hours
        already committed; a total below that commitment is rejected.
        """
        changes = data.model_dump(exclude_unset=True)

        def operation(db: Session) -> Student:
            student = self.get_student(student_id)
            self._check_unique(changes.get("student_id"), changes.get("email"), exclude=student.id)

            fields = dict(changes)
            new_total = fields.pop("total_hours", None)
            for field, value in fields.items():
                if value is not None:
                    setattr(student, field, value)

            if new_total is not None and abs(new_total - student.total_hours) > HOURS_EPSILON:
                committed = committed_hours(db, student.id)
                if new_total < committed - HOURS_EPSILON:
                    raise ValidationError(
                        f"Total hours cannot be lower than the {committed:g} hours already assigned",
                        field="total_hours",
                        committed=committed,
                    )
                student.total_hours = new_total
                student.remaining_hours = max(new_total - committed, 0.0)
                if "status" not in changes:
                    refresh_student_status(db, student)

            db.flush()
            return student

        student = run_atomic(self.db, operation, name="update student")
        logger.info(f"Updated student {student.student_id}")
        return student

    def delete_student(self, student_id: UUID) -> None:
        """
        Remove a student together with their assignments.

        Every non-cancelled assignment linked to a request, completed ones
        included, gives its hours back to that request.
        """

        def operation(db: Session) -> None:
            student = self.get_student(student_id)
            ledger = BalanceLedger(db)
            for assignment in student.assignments:
                if assignment.status != "cancelled" and assignment.service_request_id is not None:
                    ledger.credit_request(assignment.service_request_id, assignment.hours)
            db.delete(student)
            db.flush()

        run_atomic(self.db, operation, name="delete student")
        logger.info(f"Deleted student {student_id}")
