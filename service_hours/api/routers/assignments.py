# service_hours/api/routers/assignments.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import List, Optional
from uuid import UUID

from service_hours.core.db import get_db, run_atomic
from service_hours.models.service_assignment import ServiceAssignment
from service_hours.schemas.assignment import AssignmentCreate, AssignmentOut, AssignmentStatus
from service_hours.services.ledger import BalanceLedger
from service_hours.services.lifecycle import AssignmentLifecycle

router = APIRouter()


@router.get("/", response_model=List[AssignmentOut])
async def list_assignments(
    assignment_status: Optional[List[AssignmentStatus]] = Query(None, alias="status"),
    student_id: Optional[UUID] = Query(None),
    service_request_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    query = select(ServiceAssignment)
    if assignment_status:
        query = query.where(ServiceAssignment.status.in_(assignment_status))
    if student_id:
        query = query.where(ServiceAssignment.student_id == student_id)
    if service_request_id:
        query = query.where(ServiceAssignment.service_request_id == service_request_id)

    assignments = db.execute(
        query.order_by(ServiceAssignment.created_at.desc()).limit(limit)
    ).scalars().all()
    return [AssignmentOut.model_validate(a) for a in assignments]


@router.post("/", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
async def create_assignment(data: AssignmentCreate, db: Session = Depends(get_db)):
    """Grant hours to a student directly, or from ``service_request_id``"""
    assignment = run_atomic(
        db,
        lambda session: BalanceLedger(session).commit(
            data.student_id,
            data.hours,
            request_id=data.service_request_id,
            start_date=data.start_date,
            details=data.grant_details(),
        ),
        name="create assignment",
    )
    return AssignmentOut.model_validate(assignment)


@router.get("/{assignment_id}", response_model=AssignmentOut)
async def get_assignment(assignment_id: UUID, db: Session = Depends(get_db)):
    return AssignmentOut.model_validate(AssignmentLifecycle(db).get_assignment(assignment_id))


def _transition(db: Session, assignment_id: UUID, target: str) -> AssignmentOut:
    assignment = run_atomic(
        db,
        lambda session: AssignmentLifecycle(session).transition(assignment_id, target),
        name=f"move assignment to {target}",
    )
    return AssignmentOut.model_validate(assignment)


@router.put("/{assignment_id}/start", response_model=AssignmentOut)
async def start_assignment(assignment_id: UUID, db: Session = Depends(get_db)):
    return _transition(db, assignment_id, "in_progress")


@router.put("/{assignment_id}/complete", response_model=AssignmentOut)
async def complete_assignment(assignment_id: UUID, db: Session = Depends(get_db)):
    """Mark completed and verified; the hours stay committed"""
    return _transition(db, assignment_id, "completed")


@router.put("/{assignment_id}/cancel", response_model=AssignmentOut)
async def cancel_assignment(assignment_id: UUID, db: Session = Depends(get_db)):
    """Cancel and return the hours to the student and request"""
    return _transition(db, assignment_id, "cancelled")
