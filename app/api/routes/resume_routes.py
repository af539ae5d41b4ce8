"""
Resume Routes

POST /resume/generate - Build a resume from validated achievements

Query/body flag mock=true forces the rule-based generator. Students may only
generate their own resume; admins must name the rollNumber.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.concurrency import run_in_threadpool
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_user, ROLE_ADMIN
from app.services.ai import AIProvider, get_ai_provider
from app.services.mongo_service import AchievementService, StudentService
from app.services.resume_service import generate_resume
from app.schemas.schemas import AchievementStatus, ResumeRequest, ResumeDocument

router = APIRouter(prefix="/resume", tags=["Resume"])


@router.post("/generate", response_model=ResumeDocument)
async def generate(
    data: Optional[ResumeRequest] = None,
    mock: bool = Query(False, description="Force the rule-based generator"),
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db),
    provider: Optional[AIProvider] = Depends(get_ai_provider),
):
    """Generate a resume. Nothing is stored."""
    data = data or ResumeRequest()

    if user["role"] == ROLE_ADMIN:
        if not data.rollNumber:
            raise HTTPException(status_code=400, detail="rollNumber is required")
        roll_number = data.rollNumber
    else:
        roll_number = data.rollNumber or user.get("rollNumber")
        if not user.get("rollNumber") or roll_number != user.get("rollNumber"):
            raise HTTPException(status_code=403, detail="You can only generate your own resume")

    achievements = await run_in_threadpool(
        AchievementService(db).list_by_roll_number, roll_number, AchievementStatus.validated.value
    )
    if not achievements:
        raise HTTPException(
            status_code=404,
            detail="No validated achievements found. Submit achievements and wait for admin validation first.",
        )

    profile = await run_in_threadpool(StudentService(db).get_by_roll_number, roll_number) or {}
    display_name = (
        profile.get("name")
        or achievements[0].get("studentName")
        or (user.get("name") if user["role"] != ROLE_ADMIN else "")
    )

    return await generate_resume(
        provider,
        profile,
        display_name,
        achievements,
        mock=mock or bool(data.mock),
    )
