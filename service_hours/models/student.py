# service_hours/models/student.py - Student roster with ledger-managed balance
from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import String, Integer, Float, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from service_hours.models.base import Base

STUDENT_STATUSES = ("active", "inactive", "pending", "completed")


class Student(Base):
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    program: Mapped[str] = mapped_column(String(128), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    remaining_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignments: Mapped[list["ServiceAssignment"]] = relationship(
        "ServiceAssignment",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="ServiceAssignment.created_at.desc()",
    )

    __table_args__ = (
        CheckConstraint("status IN ('active','inactive','pending','completed')", name="ck_student_status"),
        CheckConstraint("total_hours >= 0", name="ck_student_total_hours_positive"),
        CheckConstraint("remaining_hours >= 0", name="ck_student_remaining_hours_positive"),
    )

    # Every UPDATE is conditional on the version that was read
    __mapper_args__ = {"version_id_col": version}
