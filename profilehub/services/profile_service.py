"""
Profile Service - CRUD operations for the profiles collection.

Every document-store call made by the API goes through ProfileService.
The service takes the collection it works on, so handlers get it from the
get_profiles_collection dependency and tests hand it a mongomock one.

Documents look like:
{
    "_id": ObjectId(...),
    "name": "ada",
    "password": "$2b$12$...",      # bcrypt hash, never leaves this module
    "bio": "...",
    "skills": ["python", "rust"],
    "socialLinks": {"github": "...", "linkedin": None, ...},
    "location": "Pune",
    "imageUrl": "https://...",
    "projects": [{"title": "...", "description": None, "codeSnippet": None, "url": None}],
    "views": 0,
    "createdAt": datetime,
    "updatedAt": datetime
}
"""

import re
from datetime import datetime, timezone
from typing import Optional, List
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from profilehub.schemas.schemas import ProfileCreate, ProfileUpdate


# Listing and search never return more than this many profiles
MAX_RESULTS = 50

# Fields a search query is matched against
SEARCH_FIELDS = ("name", "skills", "location")

# Projection that keeps the password hash out of every read
PUBLIC_PROJECTION = {"password": 0}


class ProfileNameTakenError(Exception):
    """Raised when a profile name is already registered."""


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_profile(doc: dict) -> Optional[dict]:
    """Convert a profile document to a JSON-ready dict without the password."""
    if doc is None:
        return None
    doc = {k: v for k, v in doc.items() if k != "password"}
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_profiles(docs: list) -> list:
    """Convert list of profile documents to JSON-ready dicts."""
    return [serialize_profile(doc) for doc in docs]


def to_object_id(profile_id: str) -> Optional[ObjectId]:
    """Parse a profile id, returning None when it is not a valid ObjectId."""
    if isinstance(profile_id, ObjectId):
        return profile_id
    # ObjectId(None) would mint a fresh id
    if not isinstance(profile_id, str):
        return None
    try:
        return ObjectId(profile_id)
    except InvalidId:
        return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProfileService:
    """
    Handles profile document storage and queries.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def get_by_name(self, name: str) -> Optional[dict]:
        """Fetch a profile by its unique name (includes the password hash)."""
        return self.collection.find_one({"name": name})

    def get_by_id_and_name(self, profile_id: str, name: str) -> Optional[dict]:
        """
        Fetch the profile a token was issued for.
        Both claims must still match, so a token stops working if the
        profile disappears.
        """
        oid = to_object_id(profile_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid, "name": name}, PUBLIC_PROJECTION)

    # --------------------------------------------------------
    # Writes
    # --------------------------------------------------------

    def create(self, data: ProfileCreate, password_hash: str, image_url: str) -> dict:
        """
        Insert a new profile.

        Args:
            data: Validated registration fields
            password_hash: bcrypt hash of data.password
            image_url: Uploaded image URL or the default avatar

        Returns:
            The stored document (with password hash)

        Raises:
            ProfileNameTakenError: name already registered
        """
        if self.get_by_name(data.name):
            raise ProfileNameTakenError(data.name)

        now = _utcnow()
        doc = {
            "name": data.name,
            "password": password_hash,
            "bio": data.bio,
            "skills": data.skills or [],
            "socialLinks": data.socialLinks.model_dump() if data.socialLinks else {},
            "location": data.location,
            "imageUrl": image_url,
            "projects": [p.model_dump() for p in data.projects or []],
            "views": 0,
            "createdAt": now,
            "updatedAt": now
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration of the same name
            raise ProfileNameTakenError(data.name) from e
        doc["_id"] = result.inserted_id
        return doc

    def update(self, profile_id: str, data: ProfileUpdate, image_url: Optional[str] = None) -> Optional[dict]:
        """
        Apply an edit. Fields left out of the request keep their stored values.

        Returns:
            The updated document without the password, or None if missing
        """
        oid = to_object_id(profile_id)
        if oid is None:
            return None

        changes = {}
        for field in ["bio", "skills", "location"]:
            value = getattr(data, field)
            if value is not None:
                changes[field] = value
        if data.socialLinks is not None:
            changes["socialLinks"] = data.socialLinks.model_dump()
        if data.projects is not None:
            changes["projects"] = [p.model_dump() for p in data.projects]
        if image_url:
            changes["imageUrl"] = image_url
        changes["updatedAt"] = _utcnow()

        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER
        )

    def get_and_count_view(self, profile_id: str) -> Optional[dict]:
        """
        Fetch a profile for display and bump its view counter by one.
        $inc keeps concurrent views from overwriting each other.
        """
        oid = to_object_id(profile_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$inc": {"views": 1}},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER
        )

    # --------------------------------------------------------
    # Listing / search
    # --------------------------------------------------------

    def list_top(self, limit: int = MAX_RESULTS) -> List[dict]:
        """Most viewed profiles first."""
        cursor = self.collection.find({}, PUBLIC_PROJECTION).sort("views", DESCENDING).limit(limit)
        return list(cursor)

    def search(self, query: str, limit: int = MAX_RESULTS) -> List[dict]:
        """
        Case-insensitive substring search over name, skills and location.
        The query is matched literally, not as a regular expression.
        """
        pattern = re.escape(query)
        cursor = self.collection.find(
            {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]},
            PUBLIC_PROJECTION
        ).limit(limit)
        return list(cursor)
