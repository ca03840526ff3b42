# service_hours/api/routers/service_requests.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from service_hours.core.db import get_db
from service_hours.schemas.assignment import AssignmentOut
from service_hours.schemas.service_request import (
    AssignStudent,
    RequestStatus,
    ServiceRequestCreate,
    ServiceRequestDeletion,
    ServiceRequestOut,
)
from service_hours.services.request_service import ServiceRequestService

router = APIRouter()


@router.get("/", response_model=List[ServiceRequestOut])
async def list_service_requests(
    request_status: Optional[RequestStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Match service type, description, supervisor or location"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List service requests, newest first"""
    requests = ServiceRequestService(db).list_requests(status=request_status, search=search, limit=limit)
    return [ServiceRequestOut.model_validate(r) for r in requests]


@router.post("/", response_model=ServiceRequestOut, status_code=status.HTTP_201_CREATED)
async def submit_service_request(data: ServiceRequestCreate, db: Session = Depends(get_db)):
    """Supervisor submission; starts out pending"""
    return ServiceRequestOut.model_validate(ServiceRequestService(db).submit(data))


@router.get("/{request_id}", response_model=ServiceRequestOut)
async def get_service_request(request_id: UUID, db: Session = Depends(get_db)):
    return ServiceRequestOut.model_validate(ServiceRequestService(db).get_request(request_id))


@router.get("/{request_id}/assignments", response_model=List[AssignmentOut])
async def get_service_request_assignments(request_id: UUID, db: Session = Depends(get_db)):
    assignments = ServiceRequestService(db).list_assignments(request_id)
    return [AssignmentOut.model_validate(a) for a in assignments]


@router.put("/{request_id}/approve", response_model=ServiceRequestOut)
async def approve_service_request(request_id: UUID, db: Session = Depends(get_db)):
    return ServiceRequestOut.model_validate(ServiceRequestService(db).approve(request_id))


@router.put("/{request_id}/reject", response_model=ServiceRequestOut)
async def reject_service_request(request_id: UUID, db: Session = Depends(get_db)):
    return ServiceRequestOut.model_validate(ServiceRequestService(db).reject(request_id))


@router.post("/{request_id}/assign", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
async def assign_student(request_id: UUID, data: AssignStudent, db: Session = Depends(get_db)):
    """Commit hours from an approved request to a student"""
    assignment = ServiceRequestService(db).assign_student(request_id, data)
    return AssignmentOut.model_validate(assignment)


@router.delete("/{request_id}", response_model=ServiceRequestDeletion)
async def delete_service_request(request_id: UUID, db: Session = Depends(get_db)):
    """Remove a request, returning held hours to its students"""
    return ServiceRequestService(db).delete_request(request_id)
