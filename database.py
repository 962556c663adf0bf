"""
MongoDB access helpers.

Collections are named after the lowercase schema class:
item, user, cart, order.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import settings
from errors import MalformedInput, StoreFailure

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("created_at", "updated_at")

client: Optional[MongoClient] = None
db: Optional[Database] = None

if settings.database_url and settings.database_name:
    # MongoClient connects lazily, so this does not block import
    client = MongoClient(settings.database_url)
    db = client[settings.database_name]


def get_db() -> Database:
    if db is None:
        raise StoreFailure("Database not available")
    return db


def ensure_indexes() -> None:
    """One user per email, one cart per user."""
    database = get_db()
    database["user"].create_index([("email", ASCENDING)], unique=True)
    database["cart"].create_index([("userId", ASCENDING)], unique=True)
    logger.info("MongoDB indexes ensured")


def to_object_id(value: Any, label: str = "id", body_key: str = "error") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise MalformedInput(f"Invalid {label}", body_key=body_key)
    return ObjectId(value)


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = data.copy()

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = get_db()[collection_name].insert_one(data_dict)
    data_dict["_id"] = result.inserted_id
    return data_dict


def get_documents(
    collection_name: str,
    filter_dict: Optional[dict] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    cursor = get_db()[collection_name].find(filter_dict or {})
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def find_document(collection_name: str, filter_dict: dict) -> Optional[Dict[str, Any]]:
    return get_db()[collection_name].find_one(filter_dict)


def update_document(collection_name: str, document_id: ObjectId, fields: dict) -> None:
    fields = dict(fields, updated_at=datetime.now(timezone.utc))
    get_db()[collection_name].update_one({"_id": document_id}, {"$set": fields})


def _jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return public_document(value)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def public_document(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of a stored document fit for a response: id instead of _id, no store metadata."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key in METADATA_FIELDS:
            continue
        if key == "_id":
            key = "id"
        out[key] = _jsonable(value)
    return out
