"""
Analysis history storage behind an explicit repository interface
"""
from typing import List

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from resume_analyzer.models.schemas import HistoryRecord
from resume_analyzer.services.db import HISTORY_COLLECTION, get_history_collection
from resume_analyzer.utils.exceptions import DatabaseError
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 50


class HistoryRepository:
    """create/list operations over saved analyses, newest first"""

    async def create(self, record: HistoryRecord) -> HistoryRecord:
        raise NotImplementedError

    async def list(self, limit: int = DEFAULT_LIMIT) -> List[HistoryRecord]:
        raise NotImplementedError


class InMemoryHistoryRepository(HistoryRepository):

    def __init__(self):
        self._records: List[HistoryRecord] = []

    async def create(self, record: HistoryRecord) -> HistoryRecord:
        self._records.insert(0, record)
        return record

    async def list(self, limit: int = DEFAULT_LIMIT) -> List[HistoryRecord]:
        return list(self._records[:limit])


class MongoHistoryRepository(HistoryRepository):

    def __init__(self, collection):
        self.collection = collection

    async def create(self, record: HistoryRecord) -> HistoryRecord:
        try:
            await self.collection.insert_one(record.model_dump())
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to save history record: {e}", operation="insert_one", collection=HISTORY_COLLECTION, cause=e
            ) from e
        logger.info(f"Saved history record with score={record.score}")
        return record

    async def list(self, limit: int = DEFAULT_LIMIT) -> List[HistoryRecord]:
        try:
            cursor = self.collection.find({}, {"_id": 0}).sort("created_at", DESCENDING).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise DatabaseError(
                f"Failed to list history: {e}", operation="find", collection=HISTORY_COLLECTION, cause=e
            ) from e
        return [HistoryRecord(**doc) for doc in docs]


_memory_repository = InMemoryHistoryRepository()


def get_history_repository() -> HistoryRepository:
    collection = get_history_collection()
    if collection is None:
        return _memory_repository
    return MongoHistoryRepository(collection)
