"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. students      - Account + profile documents (one per rollNumber)
2. achievements  - Submitted achievements and their review state

Every service is built from an injected Database so request handlers and
tests decide which database is used.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from app.db.mongodb import get_collection


# ============================================================
# HELPERS
# ============================================================

# Never leave the service layer
HIDDEN_FIELDS = ("_id", "password")


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a JSON-serializable dict without internals."""
    if doc is None:
        return None
    return {k: v for k, v in doc.items() if k not in HIDDEN_FIELDS}


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def utc_now_iso() -> str:
    """Timestamp format stored on every document."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


# ============================================================
# STUDENTS COLLECTION
# Account credentials and the profile live on the same document
# ============================================================

class StudentService:
    """
    Handles student account/profile documents.
    Lookups go by username (login) or rollNumber (everything else).
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "students")

    def insert(self, doc: dict) -> dict:
        """Insert a new student document. Returns the stored document (with password)."""
        doc = dict(doc)
        doc.setdefault("id", new_id())
        doc.setdefault("createdAt", utc_now_iso())
        self.collection.insert_one(doc)
        doc.pop("_id", None)
        return doc

    def get_by_username(self, username: str) -> Optional[dict]:
        """Raw document including the password hash (for login only)."""
        return self.collection.find_one({"username": username}, {"_id": 0})

    def get_by_roll_number(self, roll_number: str) -> Optional[dict]:
        doc = self.collection.find_one({"rollNumber": roll_number})
        return serialize_doc(doc)

    def exists(self, username: str, roll_number: str) -> bool:
        """True if either the username or the roll number is taken."""
        doc = self.collection.find_one(
            {"$or": [{"username": username}, {"rollNumber": roll_number}]},
            {"_id": 1},
        )
        return doc is not None

    def upsert_profile(self, roll_number: str, fields: Dict[str, Any], defaults: Dict[str, Any]) -> dict:
        """
        Apply profile fields to the student's document, creating it if absent.

        Args:
            roll_number: Owner of the profile
            fields: Fields to overwrite
            defaults: Fields only written when the document is created

        Returns:
            The updated document (serialized)
        """
        doc = self.collection.find_one_and_update(
            {"rollNumber": roll_number},
            {
                "$set": {**fields, "updatedAt": utc_now_iso()},
                "$setOnInsert": defaults,
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(doc)


# ============================================================
# ACHIEVEMENTS COLLECTION
# ============================================================

class AchievementService:
    """
    Handles achievement documents.
    Status transitions are decided by the route handlers; this class only persists.
    """

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "achievements")

    def insert(self, doc: dict) -> dict:
        """
        Insert an achievement document.

        Raises:
            pymongo.errors.DuplicateKeyError if (rollNumber, achievementTitle) exists
        """
        doc = dict(doc)
        self.collection.insert_one(doc)
        doc.pop("_id", None)
        return doc

    def get_by_id(self, achievement_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"id": achievement_id}))

    def find_duplicate(self, roll_number: str, title: str, exclude_id: str = None) -> Optional[dict]:
        """Existing record with the same roll number and title, if any."""
        query = {"rollNumber": roll_number, "achievementTitle": title}
        if exclude_id:
            query["id"] = {"$ne": exclude_id}
        return serialize_doc(self.collection.find_one(query))

    def list(self, query: Dict[str, Any] = None) -> List[dict]:
        """List achievements matching query, newest first."""
        cursor = self.collection.find(query or {}).sort("dateLogged", DESCENDING)
        return serialize_docs(cursor)

    def list_by_roll_number(self, roll_number: str, status: str = None) -> List[dict]:
        query = {"rollNumber": roll_number}
        if status:
            query["status"] = status
        return self.list(query)

    def replace(self, doc: dict) -> dict:
        """Persist a full achievement document (single-document atomic write)."""
        self.collection.replace_one({"id": doc["id"]}, doc)
        return serialize_doc(doc)

    def delete(self, achievement_id: str) -> bool:
        result = self.collection.delete_one({"id": achievement_id})
        return result.deleted_count > 0

    def rename_student(self, roll_number: str, name: str) -> int:
        """Propagate a profile name change onto the student's achievements."""
        result = self.collection.update_many(
            {"rollNumber": roll_number},
            {"$set": {"studentName": name}},
        )
        return result.modified_count

    def aggregate_counts(self, field: str, match: Dict[str, Any] = None) -> List[dict]:
        """
        Group achievements by a field and count.

        Returns:
            [{"_id": <value>, "count": n}, ...]
        """
        pipeline = []
        if match:
            pipeline.append({"$match": match})
        pipeline.append({"$group": {"_id": f"${field}", "count": {"$sum": 1}}})
        return list(self.collection.aggregate(pipeline))
