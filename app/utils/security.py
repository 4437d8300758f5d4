"""
Security utilities and authentication
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.models import Employee
from app.schemas.auth import SessionUser

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Unrecognised hash format
        return False


def create_access_token(employee: Employee, ttl_seconds: Optional[int] = None) -> str:
    """Issue a signed access token for an employee"""
    now = datetime.now(tz=timezone.utc)
    ttl = settings.JWT_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    payload = {
        "sub": employee.id,
        "email": employee.email,
        "role": employee.role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl)).timestamp()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Verify signature and expiry of an access token"""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized: Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized: Invalid token")


def load_session_user(token: str, db: Session) -> SessionUser:
    """Resolve a token to the employee it was issued for"""
    payload = decode_token(token)
    employee = db.query(Employee).filter(Employee.id == str(payload.get("sub"))).first()
    if employee is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized: User not found")
    return SessionUser(
        id=employee.id,
        email=employee.email,
        name=employee.name,
        role=employee.role,
        team=employee.team,
    )


def get_current_employee(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> SessionUser:
    """Authenticate the request from the auth cookie or a bearer header"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        logger.warning(f"Rejected {request.method} {request.url.path}: no token provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized: No token provided")
    try:
        return load_session_user(token, db)
    except HTTPException as exc:
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc.detail}")
        raise


def require_roles(*roles: str):
    """Dependency factory restricting an endpoint to the given roles"""
    def _dep(user: SessionUser = Depends(get_current_employee)) -> SessionUser:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return _dep


def is_valid_id(value: Optional[str]) -> bool:
    """Check that a document identifier is a well-formed UUID"""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
