"""
User Routes

GET /user/profile - Get own profile
PUT /user/profile - Update own profile
GET /user/dashboard - Own achievement counts
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_student
from app.services.analytics_service import AnalyticsService
from app.services.profile_service import ProfileService
from app.schemas.schemas import ProfileUpdate, ProfileResponse, ProfileUpdateResponse, DashboardStats

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(student: dict = Depends(get_current_student), db: Database = Depends(get_mongo_db)):
    return ProfileService(db).get_profile(student)


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: ProfileUpdate,
    student: dict = Depends(get_current_student),
    db: Database = Depends(get_mongo_db),
):
    profile, token = ProfileService(db).update_profile(student, data)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        token=token,
        profileComplete=profile["profileComplete"],
        profile=profile,
    )


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(student: dict = Depends(get_current_student), db: Database = Depends(get_mongo_db)):
    """Counts of the caller's achievements by status."""
    return AnalyticsService(db).dashboard_stats(student["rollNumber"])
