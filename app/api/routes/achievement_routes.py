"""
Achievement Routes

POST /achievements/log - Submit an achievement (starts pending)
GET /achievements/student - Own achievements (alias: /achievements/my-achievements)
GET /achievements/ - All achievements (admin)
GET /achievements/pending - Review queue (admin)
GET /achievements/analytics - Counts by status/category/level
PUT /achievements/{id}/validate - Validate or reject (admin)
PUT /achievements/{id} - Edit own achievement (goes back to pending)
DELETE /achievements/{id} - Delete own achievement (admin may delete any)

Lifecycle: pending -> validated|rejected by an admin; any edit resets to pending.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_user, get_current_student, get_current_admin, ROLE_ADMIN
from app.services.mongo_service import AchievementService, StudentService, new_id, utc_now_iso
from app.services.analytics_service import AnalyticsService
from app.schemas.schemas import (
    AchievementCreate, AchievementUpdate, AchievementStatusUpdate, AchievementStatus,
    AchievementResponse, AchievementLogResponse, AchievementSummary, AchievementActionResponse,
    AnalyticsResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/achievements", tags=["Achievements"])

REQUIRED_FIELDS = (
    "studentName", "rollNumber", "achievementTitle", "category",
    "level", "achievementDate", "issuingAuthority", "evidenceLink",
)

DECISIONS = (AchievementStatus.validated.value, AchievementStatus.rejected.value)

DUPLICATE_MESSAGE = "This achievement has already been logged for this student."


def _clean(fields: dict) -> dict:
    return {k: v.strip() if isinstance(v, str) else v for k, v in fields.items()}


def _history_entry(status: str, user: dict, at: str) -> dict:
    return {"status": status, "changedBy": user.get("username"), "changedAt": at}


def _get_or_404(achievements: AchievementService, achievement_id: str) -> dict:
    achievement = achievements.get_by_id(achievement_id)
    if not achievement:
        raise HTTPException(status_code=404, detail="Achievement not found.")
    return achievement


# ============================================================
# SUBMISSION
# ============================================================

@router.post("/log", response_model=AchievementLogResponse, status_code=201)
def log_achievement(
    data: AchievementCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db),
):
    """
    Submit an achievement for review.

    Students may leave studentName/rollNumber out (taken from the token)
    but cannot submit for another roll number.
    """
    fields = _clean(data.model_dump())

    if user["role"] != ROLE_ADMIN:
        if fields["rollNumber"] and fields["rollNumber"] != user.get("rollNumber"):
            raise HTTPException(status_code=403, detail="Students can only log their own achievements")
        fields["rollNumber"] = fields["rollNumber"] or user.get("rollNumber")
        fields["studentName"] = fields["studentName"] or user.get("name")

    missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required fields: {', '.join(missing)}. All fields, including Evidence Link, are required.",
        )

    achievements = AchievementService(db)
    if achievements.find_duplicate(fields["rollNumber"], fields["achievementTitle"]):
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)

    if user["role"] == ROLE_ADMIN:
        owner = StudentService(db).get_by_roll_number(fields["rollNumber"])
        student_id = owner["id"] if owner else None
    else:
        student_id = user["id"]

    now = utc_now_iso()
    doc = {
        "id": new_id(),
        "studentId": student_id,
        **fields,
        "status": AchievementStatus.pending.value,
        "dateLogged": now,
        "lastUpdated": now,
        "reviewedBy": None,
        "reviewedAt": None,
        "statusHistory": [_history_entry(AchievementStatus.pending.value, user, now)],
    }

    try:
        created = achievements.insert(doc)
    except DuplicateKeyError:
        # Concurrent submission got past the read check; the unique index caught it
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)

    logger.info(f"Achievement {created['id']} logged for {created['rollNumber']}")
    return AchievementLogResponse(
        message="Achievement logged successfully and is pending validation.",
        achievement=AchievementSummary(**created),
    )


# ============================================================
# LISTINGS
# ============================================================

@router.get("/student", response_model=List[AchievementResponse])
@router.get("/my-achievements", response_model=List[AchievementResponse], include_in_schema=False)
def get_my_achievements(student: dict = Depends(get_current_student), db: Database = Depends(get_mongo_db)):
    """Caller's achievements, newest first."""
    return AchievementService(db).list_by_roll_number(student["rollNumber"])


@router.get("/", response_model=List[AchievementResponse])
def get_all_achievements(admin: dict = Depends(get_current_admin), db: Database = Depends(get_mongo_db)):
    return AchievementService(db).list()


@router.get("/pending", response_model=List[AchievementResponse])
def get_pending_achievements(admin: dict = Depends(get_current_admin), db: Database = Depends(get_mongo_db)):
    return AchievementService(db).list({"status": AchievementStatus.pending.value})


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(user: dict = Depends(get_current_user), db: Database = Depends(get_mongo_db)):
    """Admins see everything; students see their own counts."""
    roll_number = None if user["role"] == ROLE_ADMIN else user.get("rollNumber")
    if user["role"] != ROLE_ADMIN and not roll_number:
        raise HTTPException(status_code=403, detail="Token is missing a roll number")
    return AnalyticsService(db).summary(roll_number)


# ============================================================
# REVIEW
# ============================================================

@router.put("/{achievement_id}/validate", response_model=AchievementActionResponse)
def validate_achievement(
    achievement_id: str,
    data: AchievementStatusUpdate,
    admin: dict = Depends(get_current_admin),
    db: Database = Depends(get_mongo_db),
):
    """Set status to validated or rejected. Anything else is rejected with 400."""
    if data.status not in DECISIONS:
        raise HTTPException(
            status_code=400,
            detail='Invalid status provided. Must be "validated" or "rejected".',
        )

    achievements = AchievementService(db)
    achievement = _get_or_404(achievements, achievement_id)

    now = utc_now_iso()
    achievement["status"] = data.status
    achievement["reviewedBy"] = admin.get("username")
    achievement["reviewedAt"] = now
    achievement["lastUpdated"] = now
    achievement.setdefault("statusHistory", []).append(_history_entry(data.status, admin, now))

    updated = achievements.replace(achievement)
    logger.info(f"Achievement {achievement_id} marked {data.status} by {admin.get('username')}")
    return AchievementActionResponse(message="Achievement status updated successfully.", achievement=updated)


# ============================================================
# OWNER EDITS
# ============================================================

@router.put("/{achievement_id}", response_model=AchievementActionResponse)
def update_achievement(
    achievement_id: str,
    data: AchievementUpdate,
    student: dict = Depends(get_current_student),
    db: Database = Depends(get_mongo_db),
):
    """Edit own achievement. Always goes back to pending for re-review."""
    achievements = AchievementService(db)
    achievement = _get_or_404(achievements, achievement_id)
    if achievement["rollNumber"] != student["rollNumber"]:
        raise HTTPException(status_code=403, detail="You can only edit your own achievements")

    fields = _clean(data.model_dump(exclude_none=True))
    blank = [f for f, v in fields.items() if f in REQUIRED_FIELDS and not v]
    if blank:
        raise HTTPException(status_code=400, detail=f"Fields cannot be empty: {', '.join(blank)}")

    title = fields.get("achievementTitle")
    if title and achievements.find_duplicate(achievement["rollNumber"], title, exclude_id=achievement_id):
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)

    now = utc_now_iso()
    achievement.update(fields)
    achievement["status"] = AchievementStatus.pending.value
    achievement["lastUpdated"] = now
    achievement.setdefault("statusHistory", []).append(
        _history_entry(AchievementStatus.pending.value, student, now)
    )

    try:
        updated = achievements.replace(achievement)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)

    return AchievementActionResponse(
        message="Achievement updated and resubmitted for validation.",
        achievement=updated,
    )


@router.delete("/{achievement_id}", response_model=MessageResponse)
def delete_achievement(
    achievement_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db),
):
    achievements = AchievementService(db)
    achievement = _get_or_404(achievements, achievement_id)
    if user["role"] != ROLE_ADMIN and achievement["rollNumber"] != user.get("rollNumber"):
        raise HTTPException(status_code=403, detail="You can only delete your own achievements")

    achievements.delete(achievement_id)
    logger.info(f"Achievement {achievement_id} deleted by {user.get('username')}")
    return MessageResponse(message="Achievement deleted successfully.")
