"""
MongoDB access helpers.

Connection settings come from the environment (DATABASE_URL, DATABASE_NAME);
a .env file next to the app is honored. When they are missing `db` stays None
and the API answers 503 on routes that need storage.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from dotenv import load_dotenv
from pydantic import BaseModel
from pymongo import MongoClient

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

db = None

if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]
    logger.info("MongoDB database %s configured", DATABASE_NAME)
else:
    logger.warning("DATABASE_URL / DATABASE_NAME not set, storage disabled")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def _require_db():
    if db is None:
        raise RuntimeError("Database not initialized")
    return db


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    doc = _as_dict(data)
    doc["created_at"] = doc["updated_at"] = _now()
    result = _require_db()[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = _require_db()[collection_name].find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def update_document(collection_name: str, doc_id: ObjectId, data: Union[BaseModel, Dict[str, Any]]) -> bool:
    fields = _as_dict(data)
    fields["updated_at"] = _now()
    result = _require_db()[collection_name].update_one({"_id": doc_id}, {"$set": fields})
    return result.matched_count > 0


def delete_document(collection_name: str, doc_id: ObjectId) -> bool:
    result = _require_db()[collection_name].delete_one({"_id": doc_id})
    return result.deleted_count > 0
