"""
Employee lookup routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.auth import SessionUser, EmployeeResponse
from app.services.repositories import EmployeeRepo
from app.utils.security import get_current_employee
from app.utils.responses import success_response, not_found_error

router = APIRouter()

@router.get("/{email}")
async def get_employee(
    email: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Get an employee profile by email"""
    employee = EmployeeRepo.get_by_email(db, email.lower())
    if not employee:
        not_found_error("Employee")

    return success_response(
        message="Employee retrieved",
        data=EmployeeResponse.model_validate(employee)
    )
