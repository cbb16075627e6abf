"""
MongoDB Connection Utility

MongoDB stores every job portal entity:
- users: candidate and employer accounts
- companies: employer-owned company profiles
- jobs: job postings
- applications: a candidate's submission for a job
- posts / comments: the community feed

Uniqueness rules (user email, company name, one application per
job/applicant pair) are enforced by the indexes created here.
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the job portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by its name in COLLECTIONS."""
    db = get_mongo_db()
    return db[name]


def close_mongo_client() -> None:
    """Close the shared client on shutdown."""
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def check_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        db = get_mongo_db()
        # ping command checks connection
        db.command('ping')
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
    "jobs": "jobs",
    "applications": "applications",
    "posts": "posts",
    "comments": "comments"
}


def init_mongo_indexes():
    """
    Create indexes for uniqueness rules and common lookups.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["companies"]].create_index("name", unique=True)

    # One application per candidate per job
    db[COLLECTIONS["applications"]].create_index([
        ("job", ASCENDING),
        ("applicant", ASCENDING)
    ], unique=True)

    # Newest-first listings
    db[COLLECTIONS["jobs"]].create_index([("created_at", DESCENDING)])
    db[COLLECTIONS["jobs"]].create_index("created_by")
    db[COLLECTIONS["posts"]].create_index([("created_at", DESCENDING)])
    db[COLLECTIONS["comments"]].create_index("post")

    logger.info("MongoDB indexes created successfully")
