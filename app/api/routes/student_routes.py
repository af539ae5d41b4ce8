"""
Student Routes

POST /students/register - Create student account
POST /students/login - Student login
GET /students/profile - Get own profile
PUT /students/profile - Update own profile
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.db.mongodb import get_mongo_db
from app.core.auth import hash_password, create_student_token, get_current_student, ROLE_STUDENT
from app.api.routes.auth_routes import authenticate_student
from app.services.mongo_service import StudentService
from app.services.profile_service import ProfileService
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, StudentAuthResponse, StudentSummary,
    ProfileUpdate, ProfileResponse, ProfileUpdateResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])


def _auth_response(message: str, student: dict) -> StudentAuthResponse:
    return StudentAuthResponse(
        message=message,
        token=create_student_token(student),
        profileComplete=bool(student.get("profileComplete")),
        student=StudentSummary(
            id=student["id"],
            username=student["username"],
            rollNumber=student["rollNumber"],
            name=student["name"],
        ),
    )


@router.post("/register", response_model=StudentAuthResponse, status_code=201)
def register(request: RegisterRequest, db: Database = Depends(get_mongo_db)):
    """Register a student account. Returns a token so the client is logged in immediately."""
    if not all([request.username, request.password, request.rollNumber, request.name]):
        raise HTTPException(status_code=400, detail="All fields are required")

    students = StudentService(db)
    if students.exists(request.username, request.rollNumber):
        raise HTTPException(status_code=409, detail="Username or Roll Number already exists")

    try:
        student = students.insert({
            "username": request.username,
            "password": hash_password(request.password),
            "rollNumber": request.rollNumber,
            "name": request.name,
            "profileComplete": False,
            "skills": [],
            "education": [],
            "certifications": [],
            "type": ROLE_STUDENT,
        })
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        raise HTTPException(status_code=409, detail="Username or Roll Number already exists")

    logger.info(f"Registered student {student['rollNumber']}")
    return _auth_response("Student registered successfully", student)


@router.post("/login", response_model=StudentAuthResponse)
def login(request: LoginRequest, db: Database = Depends(get_mongo_db)):
    """Student login."""
    if not request.username or not request.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    student = authenticate_student(db, request.username, request.password)
    if not student:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _auth_response("Login successful", student)


@router.get("/profile", response_model=ProfileResponse)
def get_profile(student: dict = Depends(get_current_student), db: Database = Depends(get_mongo_db)):
    """Get current student's profile (defaults if none saved yet)."""
    return ProfileService(db).get_profile(student)


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: ProfileUpdate,
    student: dict = Depends(get_current_student),
    db: Database = Depends(get_mongo_db),
):
    """Update own profile. Only provided fields change; lists are replaced."""
    profile, token = ProfileService(db).update_profile(student, data)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        token=token,
        profileComplete=profile["profileComplete"],
        profile=profile,
    )
