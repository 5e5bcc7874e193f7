"""
MongoDB access for the Asset Management backend.

A single ``MongoClient`` is created at import time and shared by every
request. Route handlers receive the database through ``get_db`` so that
tests can swap in a different one.

Collections:

- users      -> registered HR managers and employees
- employees  -> company rosters
- assets     -> inventory owned by an HR manager
- requests   -> employee asset requests
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.database import Database

from config import settings
from errors import ValidationError

USERS = "users"
EMPLOYEES = "employees"
ASSETS = "assets"
REQUESTS = "requests"

client = MongoClient(settings.DATABASE_URL)
db = client[settings.DATABASE_NAME]


def get_db() -> Database:
    return db


def ensure_indexes(database: Database) -> None:
    database[USERS].create_index("email", unique=True)


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid identifier format", value)


def serialize(value: Any) -> Any:
    """Convert ObjectIds (at any depth) to strings for JSON responses."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize(v) for v in value]
    return value


def create_document(collection_name: str, data: Dict, database: Optional[Database] = None) -> str:
    database = database if database is not None else db
    now = datetime.now(timezone.utc)
    doc = dict(data)
    doc.setdefault("created_at", now)
    doc["updated_at"] = now
    result = database[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict] = None,
    limit: Optional[int] = None,
    sort: Optional[List] = None,
    database: Optional[Database] = None,
) -> List[Dict]:
    database = database if database is not None else db
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return [serialize(doc) for doc in cursor]


def now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
