"""MongoDB adapter (lazy pymongo client)."""
import logging
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from gamehive.server.settings import settings

logger = logging.getLogger(__name__)

# MongoDB client (lazy initialization)
_mongo_client: Optional[MongoClient] = None


def get_mongo_client() -> MongoClient:
    """MongoDB 클라이언트 가져오기 (싱글톤)"""
    global _mongo_client

    if _mongo_client is None:
        _mongo_client = MongoClient(settings.MONGODB_URL, tz_aware=True)
        logger.info("MongoDB client initialized for database %s", settings.MONGODB_DATABASE)

    return _mongo_client


def get_database() -> Database:
    return get_mongo_client()[settings.MONGODB_DATABASE]


def ensure_indexes(db: Database) -> None:
    """고유 인덱스 생성 (중복 사용자/게임은 DB가 거부)"""
    db["users"].create_index([("username", ASCENDING)], unique=True)
    db["users"].create_index([("email", ASCENDING)], unique=True)
    db["suggested_games"].create_index([("slug", ASCENDING)], unique=True)
    db["suggested_games"].create_index([("name", ASCENDING)], unique=True)
    db["suggested_games"].create_index([("addedAt", DESCENDING)])
    db["reviews"].create_index([("gameId", ASCENDING), ("createdAt", DESCENDING)])
    logger.info("MongoDB indexes ensured")


def close_mongo_client() -> None:
    global _mongo_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None
        logger.info("MongoDB client closed")
