"""
Authentication Routes

POST /auth/login - Login as admin or student and get JWT token

Admin credentials come from settings; everyone else is looked up in the
students collection. Logout is client-side (tokens are stateless).
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.config import get_settings
from app.core.auth import (
    verify_password, create_admin_token, create_student_token, ROLE_ADMIN, ROLE_STUDENT
)
from app.services.mongo_service import StudentService
from app.schemas.schemas import LoginRequest, LoginResponse, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def is_admin_login(username: str, password: str) -> bool:
    settings = get_settings()
    return (
        secrets.compare_digest(username, settings.admin_username)
        and secrets.compare_digest(password, settings.admin_password)
    )


def authenticate_student(db: Database, username: str, password: str) -> Optional[dict]:
    """Student document for valid credentials, else None."""
    student = StudentService(db).get_by_username(username)
    if not student or not student.get("password"):
        return None
    if not verify_password(password, student["password"]):
        return None
    return student


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Database = Depends(get_mongo_db)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    if not request.username or not request.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    if is_admin_login(request.username, request.password):
        logger.info("Admin login")
        return LoginResponse(
            message="Login successful",
            token=create_admin_token(request.username),
            user=UserSummary(
                id=f"admin:{request.username}",
                username=request.username,
                name="Administrator",
                role=ROLE_ADMIN,
            ),
        )

    student = authenticate_student(db, request.username, request.password)
    if not student:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return LoginResponse(
        message="Login successful",
        token=create_student_token(student),
        user=UserSummary(
            id=student["id"],
            username=student["username"],
            name=student.get("name"),
            rollNumber=student.get("rollNumber"),
            role=ROLE_STUDENT,
        ),
    )
