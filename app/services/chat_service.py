"""
Chat Service - role-scoped assistant.

Students get their own profile and achievements as context; admins get
aggregate statistics only. The system instruction for each role forbids
crossing that boundary.
"""

import json
import logging
from typing import Dict, Any, Tuple

from fastapi.concurrency import run_in_threadpool
from pymongo.database import Database

from app.core.auth import ROLE_ADMIN
from app.services.ai import AIProvider
from app.services.analytics_service import AnalyticsService
from app.services.mongo_service import StudentService, AchievementService

logger = logging.getLogger(__name__)


STUDENT_INSTRUCTION = (
    "You are an expert academic advisor for the student. Answer questions based ONLY on "
    "the student's personal profile and their submitted achievements. Never discuss or "
    "reveal data belonging to other students or general admin statistics. Use a supportive "
    "and informative tone."
)

ADMIN_INSTRUCTION = (
    "You are a specialized data analyst for the administration. Answer questions based ONLY "
    "on the provided aggregated statistics and achievement distribution data. Do not discuss "
    "any individual student's personal details, GPA, or specific names. Use a formal, "
    "objective, and analytical tone."
)


class ChatService:

    def __init__(self, db: Database, provider: AIProvider):
        self.db = db
        self.provider = provider

    def student_context(self, user: dict) -> Dict[str, Any]:
        profile = StudentService(self.db).get_by_roll_number(user["rollNumber"]) or {}
        achievements = AchievementService(self.db).list_by_roll_number(user["rollNumber"])
        return {
            "profile": {
                "name": profile.get("name") or user.get("name"),
                "email": profile.get("email"),
                "degree": profile.get("degree"),
                "institution": profile.get("institution"),
                "gpa": profile.get("gpa"),
                "education": profile.get("education") or [],
                "skills": profile.get("skills") or [],
            },
            "achievements": [
                {
                    "title": a.get("achievementTitle"),
                    "status": a.get("status"),
                    "date": a.get("achievementDate"),
                    "description": a.get("achievementDescription"),
                    "category": a.get("category"),
                    "level": a.get("level"),
                }
                for a in achievements
            ],
        }

    def admin_context(self) -> Dict[str, Any]:
        return AnalyticsService(self.db).summary()

    def build_context(self, user: dict) -> Tuple[str, Dict[str, Any]]:
        """(system instruction, data context) for the caller's role."""
        if user["role"] == ROLE_ADMIN:
            return ADMIN_INSTRUCTION, self.admin_context()
        return STUDENT_INSTRUCTION, self.student_context(user)

    async def reply(self, user: dict, message: str) -> str:
        instruction, context = await run_in_threadpool(self.build_context, user)
        prompt = (
            f"DATA CONTEXT:\n{json.dumps(context, indent=2, default=str)}\n\n"
            f"USER QUESTION:\n{message}"
        )
        logger.info(f"Chat request from {user['role']} {user['id']}")
        text = await self.provider.generate_text(prompt, system_prompt=instruction, temperature=0.7)
        return text.strip()
