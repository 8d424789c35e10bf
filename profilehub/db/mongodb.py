"""
MongoDB Connection Utility

MongoDB stores a single collection:
- profiles: one document per registered profile

The client is created once per process (pymongo pools connections
internally). Route handlers never reach for it directly; they receive the
profiles collection through the get_profiles_collection dependency so it
can be swapped out in tests.
"""
import logging
from pymongo import ASCENDING, TEXT, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import OperationFailure
from profilehub.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None

# Collection name constants (avoid typos)
COLLECTIONS = {
    "profiles": "profiles",
}

# Left behind by an older schema that stored per-profile edit tokens
LEGACY_INDEXES = ["editToken_1"]


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection."""
    db = get_mongo_db()
    return db[name]


def get_profiles_collection() -> Collection:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/")
        async def list_profiles(collection: Collection = Depends(get_profiles_collection)):
            ...
    """
    return get_collection(COLLECTIONS["profiles"])


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def drop_legacy_indexes(collection: Collection) -> None:
    """Drop indexes from older schemas; a missing index is not an error."""
    for index_name in LEGACY_INDEXES:
        try:
            collection.drop_index(index_name)
            logger.info("Dropped legacy index %s", index_name)
        except OperationFailure as e:
            # 27 = IndexNotFound
            if e.code != 27:
                logger.error("Error dropping %s index: %s", index_name, e)


def init_mongo_indexes(collection: Collection = None):
    """
    Create indexes for profile lookups and search.
    Call this once during app startup.
    """
    if collection is None:
        collection = get_profiles_collection()

    drop_legacy_indexes(collection)

    # Profile names are the public identity and must be unique
    collection.create_index([("name", ASCENDING)], unique=True)
    collection.create_index([("skills", ASCENDING)])
    collection.create_index([("location", ASCENDING)])
    collection.create_index([("views", ASCENDING)])

    # Text index over the searchable fields
    collection.create_index([
        ("name", TEXT),
        ("skills", TEXT),
        ("location", TEXT)
    ], name="profile_text_search")

    logger.info("MongoDB indexes created successfully")
