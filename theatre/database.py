# theatre/database.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from theatre import config
from theatre.services.change_feed import INSERT, UPDATE, ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

# Collections the service reads and writes
USERS = "users"
SHOWS = "shows"
BOOKINGS = "bookings"
REVIEWS = "reviews"
USER_ACTIVITY = "user_activity"
MESSAGES = "messages"

TABLES = (USERS, SHOWS, BOOKINGS, REVIEWS, USER_ACTIVITY, MESSAGES)


class StoreError(Exception):
    """Raised when the backing database rejects or fails a call."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def connect(uri: str = config.MONGO_URI, name: str = config.MONGO_DB):
    client = AsyncIOMotorClient(uri, tz_aware=True)
    return client, client.get_database(name)


class Store:
    """Generic select/insert/update access to the booking collections.

    Rows are plain dicts keyed by a string ``id``; Mongo's ``_id`` never
    leaves this class. Every successful write is published on the change feed.
    """

    def __init__(self, database, feed: Optional[ChangeFeed] = None):
        self.database = database
        self.feed = feed or ChangeFeed()

    def _collection(self, table: str):
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        return self.database.get_collection(table)

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        cursor = self._collection(table).find(filters or {}, {"_id": 0})
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if descending else ASCENDING)
        if limit:
            cursor = cursor.limit(limit)
        try:
            return await cursor.to_list(length=None)
        except PyMongoError as exc:
            logger.error("Select on %s failed: %s", table, exc)
            raise StoreError(f"Failed to read {table}") from exc

    async def select_one(self, table: str, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection(table).find_one(filters, {"_id": 0})
        except PyMongoError as exc:
            logger.error("Lookup on %s failed: %s", table, exc)
            raise StoreError(f"Failed to read {table}") from exc

    async def count(self, table: str, filters: Optional[Dict[str, Any]] = None) -> int:
        try:
            return await self._collection(table).count_documents(filters or {})
        except PyMongoError as exc:
            logger.error("Count on %s failed: %s", table, exc)
            raise StoreError(f"Failed to count {table}") from exc

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row, filling in ``id`` and ``created_at`` when absent."""
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", utc_now())
        try:
            # insert_one adds _id to the dict it is given
            await self._collection(table).insert_one(dict(row))
        except PyMongoError as exc:
            logger.error("Insert into %s failed: %s", table, exc)
            raise StoreError(f"Failed to write {table}") from exc

        await self.feed.publish(ChangeEvent(table=table, event=INSERT, row=row))
        return row

    async def update(self, table: str, filters: Dict[str, Any], values: Dict[str, Any]) -> int:
        """Apply ``values`` to every matching row; returns the matched count."""
        values = dict(values)
        values["updated_at"] = utc_now()
        try:
            result = await self._collection(table).update_many(filters, {"$set": values})
        except PyMongoError as exc:
            logger.error("Update on %s failed: %s", table, exc)
            raise StoreError(f"Failed to update {table}") from exc

        if result.matched_count:
            await self.feed.publish(ChangeEvent(table=table, event=UPDATE, row={**filters, **values}))
        return result.matched_count
