import re
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from .config import Settings
from .core import StoreUnavailable
from .logger import get_logger

# Document stores backing the product collection. Both hand back plain
# dicts with "id", "created_at" and "updated_at" filled in.

log = get_logger("database")

COLLECTION = "product"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    """Process-local collection; the default when no database is configured."""

    name = "memory"

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        doc = dict(document, id=uuid.uuid4().hex, created_at=now, updated_at=now)
        with self._lock:
            self._docs[doc["id"]] = doc
        return dict(doc)

    def find(self, title_contains: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            # newest insert first so equal timestamps still list newest first
            docs = list(reversed(list(self._docs.values())))
        if title_contains:
            term = title_contains.lower()
            docs = [d for d in docs if term in d.get("title", "").lower()]
        docs.sort(key=lambda d: d["created_at"], reverse=True)
        return [dict(d) for d in docs]

    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._docs.get(product_id)
        return dict(doc) if doc else None

    def count(self) -> int:
        with self._lock:
            return len(self._docs)

    def ping(self) -> bool:
        return True


def serialize_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(doc)
    _id = doc.pop("_id", None)
    if _id is not None:
        doc["id"] = str(_id)
    return doc


class MongoStore:
    """Product collection in MongoDB."""

    name = "mongo"

    def __init__(self, url: str, database_name: str = "catalog", client: Optional[MongoClient] = None):
        self._client = client if client is not None else MongoClient(url, serverSelectionTimeoutMS=5000, tz_aware=True)
        self.db = self._client[database_name]
        self.collection = self.db[COLLECTION]

    def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        doc = dict(document, created_at=now, updated_at=now)
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            log.error("insert into %s failed: %s", COLLECTION, e)
            raise StoreUnavailable() from e
        return serialize_doc(doc)

    def find(self, title_contains: Optional[str] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {}
        if title_contains:
            # literal substring, not a pattern
            query["title"] = {"$regex": re.escape(title_contains), "$options": "i"}
        try:
            cursor = self.collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            return [serialize_doc(doc) for doc in cursor]
        except PyMongoError as e:
            log.error("query on %s failed: %s", COLLECTION, e)
            raise StoreUnavailable() from e

    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        try:
            oid = ObjectId(product_id)
        except (InvalidId, TypeError):
            return None
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            log.error("lookup of %s failed: %s", product_id, e)
            raise StoreUnavailable() from e
        return serialize_doc(doc) if doc else None

    def count(self) -> int:
        try:
            return self.collection.count_documents({})
        except PyMongoError as e:
            raise StoreUnavailable() from e

    def ping(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError:
            return False


def build_store(settings: Settings):
    if settings.backend == "mongo":
        if not settings.database_url:
            raise ValueError("STORE_BACKEND=mongo requires DATABASE_URL")
        log.info("using MongoDB store (database=%s)", settings.database_name)
        return MongoStore(settings.database_url, settings.database_name)
    if settings.backend != "memory":
        raise ValueError(f"unknown STORE_BACKEND: {settings.backend!r}")
    log.info("using in-memory store")
    return InMemoryStore()
