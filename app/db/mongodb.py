"""
MongoDB Connection Utility

MongoDB stores (one collection per record type):
- students: Account + profile documents, keyed by rollNumber
- achievements: Student-submitted achievements awaiting/after review

WHY a document store?
- Profile list fields (skills, education, certifications) are freeform
- No joins needed: achievements carry rollNumber + studentName
- Azure Cosmos DB speaks the same API, so the same client works there
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Process-wide client (connection pooling handled internally by pymongo).
# Handlers never touch it directly; they receive the Database via get_mongo_db.
_client: MongoClient = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """
    FastAPI dependency - the application database.

    Usage:
        @router.get("/things")
        async def route(db: Database = Depends(get_mongo_db)):
            ...

    Tests override this dependency with an in-memory database.
    """
    return get_mongo_client()[get_settings().mongodb_db]


def close_mongo_client():
    """Close the shared client on shutdown."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "achievements": "achievements",
}


def get_collection(db: Database, name: str) -> Collection:
    """Get a specific collection from an injected database."""
    return db[COLLECTIONS[name]]


def test_mongo_connection(db: Database) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        db.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


def init_mongo_indexes(db: Database):
    """
    Create indexes for query performance and uniqueness.
    Call this once during app startup.
    """
    students = get_collection(db, "students")
    students.create_index("id", unique=True)
    students.create_index("username", unique=True)
    students.create_index("rollNumber", unique=True)

    achievements = get_collection(db, "achievements")
    achievements.create_index("id", unique=True)
    achievements.create_index([("status", ASCENDING), ("dateLogged", DESCENDING)])

    # One achievement title per student; backs the read-then-write duplicate check
    achievements.create_index(
        [("rollNumber", ASCENDING), ("achievementTitle", ASCENDING)],
        unique=True,
    )

    logger.info("MongoDB indexes created successfully")
