from functools import lru_cache

import motor.motor_asyncio
from pymongo import DESCENDING

from resume_analyzer.models.settings import get_settings
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

HISTORY_COLLECTION = "history"


@lru_cache()
def get_client(mongo_uri: str) -> motor.motor_asyncio.AsyncIOMotorClient:
    logger.info("Initializing MongoDB client")
    return motor.motor_asyncio.AsyncIOMotorClient(mongo_uri)


def get_history_collection():
    storage = get_settings().storage
    if not storage.mongo_uri:
        return None
    return get_client(storage.mongo_uri)[storage.db_name][HISTORY_COLLECTION]


async def init_indexes():
    """Index initialization for collections."""
    history_coll = get_history_collection()
    if history_coll is None:
        logger.info("No MONGO_URI configured; skipping index initialization")
        return

    logger.info("Starting database index initialization")
    try:
        await history_coll.create_index([("created_at", DESCENDING)])
        logger.debug("Created index on history.created_at")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug("Index on history.created_at already exists")
        else:
            logger.warning(f"Could not create index on history.created_at: {e}")
