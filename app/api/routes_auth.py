"""
Authentication routes
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.schemas.auth import RegisterRequest, LoginRequest, SessionUser, EmployeeResponse, TokenResponse
from app.services.repositories import EmployeeRepo
from app.utils.security import hash_password, verify_password, create_access_token, get_current_employee
from app.utils.responses import success_response, bad_request_error, unauthorized_error

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register")
async def register(
    register_data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Register a new employee account"""
    email = register_data.email.lower()
    if EmployeeRepo.get_by_email(db, email):
        bad_request_error("An employee with this email already exists")

    try:
        employee = EmployeeRepo.create(
            db,
            name=register_data.name,
            email=email,
            password_hash=hash_password(register_data.password),
            team=register_data.team or "General",
        )
    except IntegrityError:
        db.rollback()
        bad_request_error("An employee with this email already exists")

    logger.info(f"Employee registered: {employee.email}")
    return success_response(
        message="Registration successful",
        data=EmployeeResponse.model_validate(employee),
        status_code=201
    )

@router.post("/login")
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Exchange email and password for an access token"""
    employee = EmployeeRepo.get_by_email(db, login_data.email.lower())
    if not employee or not verify_password(login_data.password, employee.password_hash):
        logger.warning(f"Failed login for {login_data.email}")
        unauthorized_error("Invalid email or password")

    token = create_access_token(employee)
    user = SessionUser.model_validate(employee)

    response = success_response(
        message="Login successful",
        data=TokenResponse(token=token, user=user)
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.JWT_TTL_SECONDS
    )
    logger.info(f"Employee logged in: {employee.email}")
    return response

@router.post("/logout")
async def logout():
    """Clear the auth cookie"""
    response = success_response(message="Logged out")
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return response

@router.get("/me")
async def me(user: SessionUser = Depends(get_current_employee)):
    """Return the authenticated employee"""
    return success_response(message="Current user", data=user)
