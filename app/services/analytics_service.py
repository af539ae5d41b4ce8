"""
Analytics Service - achievement counts for dashboards.

Recomputed on every request with $group aggregations; nothing is cached.
"""

from typing import Dict, Any, List, Optional

from pymongo.database import Database

from app.schemas.schemas import AchievementStatus
from app.services.mongo_service import AchievementService

UNCATEGORIZED = "uncategorized"


def _buckets(rows: List[dict]) -> List[Dict[str, Any]]:
    """[{_id, count}] -> [{name, value}], largest first, missing values merged."""
    merged: Dict[str, int] = {}
    for row in rows:
        name = row["_id"] if row["_id"] not in (None, "") else UNCATEGORIZED
        name = str(name)
        merged[name] = merged.get(name, 0) + row["count"]
    return [
        {"name": name, "value": value}
        for name, value in sorted(merged.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


class AnalyticsService:

    def __init__(self, db: Database):
        self.achievements = AchievementService(db)

    def status_counts(self, match: Optional[dict] = None) -> Dict[str, int]:
        counts = {status.value: 0 for status in AchievementStatus}
        for row in self.achievements.aggregate_counts("status", match):
            if row["_id"] in counts:
                counts[row["_id"]] = row["count"]
        counts["total"] = sum(counts.values())
        return counts

    def summary(self, roll_number: Optional[str] = None) -> Dict[str, Any]:
        """
        Counts by status, category and level.

        Args:
            roll_number: Restrict to one student's achievements (None = all)
        """
        match = {"rollNumber": roll_number} if roll_number else None
        counts = self.status_counts(match)
        return {
            "total": counts["total"],
            "pending": counts["pending"],
            "validated": counts["validated"],
            "rejected": counts["rejected"],
            "byCategory": _buckets(self.achievements.aggregate_counts("category", match)),
            "byLevel": _buckets(self.achievements.aggregate_counts("level", match)),
        }

    def dashboard_stats(self, roll_number: str) -> Dict[str, int]:
        """Student dashboard tiles; 'accepted' is the validated count."""
        counts = self.status_counts({"rollNumber": roll_number})
        return {
            "total": counts["total"],
            "accepted": counts["validated"],
            "rejected": counts["rejected"],
            "pending": counts["pending"],
        }
