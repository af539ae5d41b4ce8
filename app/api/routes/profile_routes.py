"""
Profile Routes

POST /profile/update-name - Change display name everywhere and get a new token
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_student
from app.services.profile_service import ProfileService
from app.schemas.schemas import NameUpdate, NameUpdateResponse

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.post("/update-name", response_model=NameUpdateResponse)
def update_name(
    data: NameUpdate,
    student: dict = Depends(get_current_student),
    db: Database = Depends(get_mongo_db),
):
    """Rename the student on their profile and on every achievement they logged."""
    if not data.name or not data.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    profile, token = ProfileService(db).update_name(student, data.name)
    return NameUpdateResponse(message="Name updated successfully", token=token, name=profile["name"])
