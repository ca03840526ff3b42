# service_hours/api/routers/students.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Literal, Optional
from uuid import UUID

from service_hours.core.db import get_db
from service_hours.schemas.assignment import AssignmentOut
from service_hours.schemas.student import StudentCreate, StudentOut, StudentStatus, StudentUpdate
from service_hours.services.student_service import StudentService

router = APIRouter()


@router.get("/", response_model=List[StudentOut])
async def list_students(
    search: Optional[str] = Query(None, description="Match name, student ID or email"),
    program: Optional[str] = Query(None),
    student_status: Optional[StudentStatus] = Query(None, alias="status"),
    sort: str = Query("name"),
    direction: Literal["asc", "desc"] = Query("asc"),
    db: Session = Depends(get_db)
):
    """List students with search, filters and sorting"""
    students = StudentService(db).list_students(
        search=search, program=program, status=student_status, sort=sort, direction=direction
    )
    return [StudentOut.model_validate(s) for s in students]


@router.post("/", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
async def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    """Add a student; remaining hours start at the full allotment"""
    return StudentOut.model_validate(StudentService(db).create_student(data))


@router.get("/{student_id}", response_model=StudentOut)
async def get_student(student_id: UUID, db: Session = Depends(get_db)):
    return StudentOut.model_validate(StudentService(db).get_student(student_id))


@router.patch("/{student_id}", response_model=StudentOut)
async def update_student(student_id: UUID, data: StudentUpdate, db: Session = Depends(get_db)):
    """Edit a student's profile, status or total hours"""
    return StudentOut.model_validate(StudentService(db).update_student(student_id, data))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: UUID, db: Session = Depends(get_db)):
    StudentService(db).delete_student(student_id)


@router.get("/{student_id}/assignments", response_model=List[AssignmentOut])
async def get_student_assignments(student_id: UUID, db: Session = Depends(get_db)):
    assignments = StudentService(db).list_assignments(student_id)
    return [AssignmentOut.model_validate(a) for a in assignments]
