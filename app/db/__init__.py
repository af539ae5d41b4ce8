"""
Database module - MongoDB client, FastAPI dependency and index setup.

Route handlers take the database via Depends(get_mongo_db).
"""
from app.db.mongodb import get_mongo_db, init_mongo_indexes, close_mongo_client

__all__ = ["get_mongo_db", "init_mongo_indexes", "close_mongo_client"]
