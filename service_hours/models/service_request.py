# service_hours/models/service_request.py - Supervisor-submitted service requests
from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy import String, Integer, Float, Date, DateTime, Text, CheckConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from service_hours.models.base import Base

REQUEST_STATUSES = ("pending", "approved", "rejected")


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    service_type: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    supervisor_name: Mapped[str] = mapped_column(String(128), nullable=False)
    supervisor_email: Mapped[str] = mapped_column(String(255), nullable=False)
    total_hours: Mapped[float] = mapped_column(Float, nullable=False)
    remaining_hours: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")  # pending|approved|rejected
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Weak reference only: assignments are disposed of explicitly on delete
    assignments: Mapped[list["ServiceAssignment"]] = relationship(
        "ServiceAssignment",
        back_populates="service_request",
        passive_deletes="all",
    )

    __table_args__ = (
        CheckConstraint("status IN ('pending','approved','rejected')", name="ck_service_request_status"),
        CheckConstraint("total_hours > 0", name="ck_service_request_total_hours_positive"),
        CheckConstraint("remaining_hours >= 0", name="ck_service_request_remaining_hours_positive"),
        CheckConstraint("remaining_hours <= total_hours", name="ck_service_request_remaining_within_total"),
        Index("ix_service_requests_status_created", "status", "created_at"),
    )

    __mapper_args__ = {"version_id_col": version}
