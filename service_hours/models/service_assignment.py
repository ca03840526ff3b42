# service_hours/models/service_assignment.py - Hours committed from a student's balance
from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy import String, Float, Integer, Date, DateTime, Text, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from service_hours.models.base import Base

ASSIGNMENT_STATUSES = ("pending", "in_progress", "completed", "cancelled")
NON_TERMINAL_STATUSES = ("pending", "in_progress")
TERMINAL_STATUSES = ("completed", "cancelled")
VERIFICATION_STATUSES = ("pending", "verified", "rejected")


class ServiceAssignment(Base):
    __tablename__ = "service_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    service_request_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("service_requests.id", ondelete="RESTRICT"), nullable=True, index=True)

    # Fixed at creation
    hours: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    verification_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    start_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    end_date: Mapped[date | None] = mapped_column(Date)

    # Mirrored from the originating request
    service_type: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    supervisor: Mapped[str | None] = mapped_column(String(128))
    supervisor_email: Mapped[str | None] = mapped_column(String(255))

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    student: Mapped["Student"] = relationship("Student", back_populates="assignments")
    service_request: Mapped["ServiceRequest | None"] = relationship("ServiceRequest", back_populates="assignments")

    __table_args__ = (
        CheckConstraint("status IN ('pending','in_progress','completed','cancelled')", name="ck_assignment_status"),
        CheckConstraint("verification_status IN ('pending','verified','rejected')", name="ck_assignment_verification_status"),
        CheckConstraint("hours > 0", name="ck_assignment_hours_positive"),
        Index("ix_service_assignments_student_status", "student_id", "status"),
    )

    # Lifecycle writes only land if the row is still in the state that was read
    __mapper_args__ = {"version_id_col": version}

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
