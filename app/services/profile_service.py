"""
Profile Service - student profile read/update shared by /students, /user and /profile routes.

The profile lives on the student's account document (keyed by rollNumber).
Every update recomputes profileComplete, pushes a changed name onto the
student's achievements and returns a fresh token carrying the current name.
"""

import logging
from typing import Dict, Any, Tuple

from pymongo.database import Database

from app.core.auth import create_student_token, ROLE_STUDENT
from app.schemas.schemas import ProfileUpdate
from app.services.mongo_service import StudentService, AchievementService, new_id, utc_now_iso

logger = logging.getLogger(__name__)


# Must all be non-empty for profileComplete
REQUIRED_FIELDS = ("name", "email", "phone", "degree", "institution")

# Fields counted by completionPercentage
COMPLETION_FIELDS = (
    "name", "email", "phone", "location", "degree", "institution",
    "graduationYear", "gpa", "linkedin", "github", "portfolio",
)

LIST_FIELDS = ("skills", "education", "certifications")


def _filled(value) -> bool:
    return bool(str(value).strip()) if value is not None else False


def is_profile_complete(profile: Dict[str, Any]) -> bool:
    return all(_filled(profile.get(field)) for field in REQUIRED_FIELDS)


def completion_percentage(profile: Dict[str, Any]) -> int:
    filled = sum(1 for field in COMPLETION_FIELDS if _filled(profile.get(field)))
    return round(100 * filled / len(COMPLETION_FIELDS))


class ProfileService:
    """One ownership rule for every profile route: callers only touch their own rollNumber."""

    def __init__(self, db: Database):
        self.students = StudentService(db)
        self.achievements = AchievementService(db)

    def _with_completion(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        profile["profileComplete"] = is_profile_complete(profile)
        profile["completionPercentage"] = completion_percentage(profile)
        return profile

    def default_profile(self, user: dict) -> Dict[str, Any]:
        """Empty profile built from token claims, used when no document exists yet."""
        return {
            "id": user.get("id"),
            "username": user.get("username"),
            "rollNumber": user["rollNumber"],
            "name": user.get("name") or "",
            "skills": [],
            "education": [],
            "certifications": [],
            "type": ROLE_STUDENT,
        }

    def get_profile(self, user: dict) -> Dict[str, Any]:
        """Caller's profile. Never fails for a valid student token."""
        profile = self.students.get_by_roll_number(user["rollNumber"])
        if profile is None:
            logger.info(f"No profile document for {user['rollNumber']}, returning defaults")
            profile = self.default_profile(user)
        return self._with_completion(profile)

    def update_profile(self, user: dict, update: ProfileUpdate) -> Tuple[Dict[str, Any], str]:
        """
        Apply the provided fields to the caller's profile.

        Returns:
            (profile, token) - the stored profile and a token with the current name
        """
        fields = update.model_dump(exclude_none=True)
        for key, value in fields.items():
            if isinstance(value, str):
                fields[key] = value.strip()
        return self._save(user, fields)

    def update_name(self, user: dict, name: str) -> Tuple[Dict[str, Any], str]:
        return self._save(user, {"name": name.strip()})

    def _save(self, user: dict, fields: Dict[str, Any]) -> Tuple[Dict[str, Any], str]:
        roll_number = user["rollNumber"]
        existing = self.students.get_by_roll_number(roll_number) or {}
        fields["profileComplete"] = is_profile_complete({**existing, **fields})

        # Only written when the profile document is created by this update
        defaults = {
            "id": user.get("id") or new_id(),
            "username": user.get("username"),
            "name": user.get("name") or "",
            "type": ROLE_STUDENT,
            "createdAt": utc_now_iso(),
        }
        for list_field in LIST_FIELDS:
            defaults[list_field] = []
        defaults = {k: v for k, v in defaults.items() if k not in fields}

        profile = self.students.upsert_profile(roll_number, fields, defaults)

        if fields.get("name") and fields["name"] != existing.get("name"):
            renamed = self.achievements.rename_student(roll_number, fields["name"])
            logger.info(f"Renamed student {roll_number} on {renamed} achievements")

        token = create_student_token(profile)
        return self._with_completion(profile), token
