"""
MongoDB 연결 관리

앱 lifespan 에서 한 번 연결하고 Beanie 문서 모델(users, profiles,
schedules, friend_graphs)을 등록합니다.
"""

import logging
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from pymongo.errors import PyMongoError

from planmate.core.config import Settings
from planmate.models import DOCUMENT_MODELS

client: Optional[AsyncIOMotorClient] = None

logger = logging.getLogger(__name__)


def connect_to_mongo(settings: Settings) -> AsyncIOMotorClient:
    """Motor 클라이언트 생성 (실제 연결은 첫 명령 시점)"""
    global client
    client = AsyncIOMotorClient(
        settings.mongo_url,
        maxPoolSize=10,
        minPoolSize=1,
        serverSelectionTimeoutMS=5000,
    )
    return client


async def init_mongodb(settings: Settings):
    """클라이언트 생성 후 문서 모델과 인덱스 등록"""
    mongo = connect_to_mongo(settings)
    try:
        await init_beanie(
            database=mongo[settings.mongo_db_name],
            document_models=DOCUMENT_MODELS
        )
    except PyMongoError as e:
        logger.error(
            f"Failed to initialize MongoDB: {e}",
            extra={"database": settings.mongo_db_name}
        )
        raise

    logger.info(
        "MongoDB initialized",
        extra={
            "database": settings.mongo_db_name,
            "collections": [model.Settings.name for model in DOCUMENT_MODELS]
        }
    )


async def check_mongo_connection() -> bool:
    """ping 명령으로 연결 상태 확인"""
    if client is None:
        return False
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
    return True


async def close_mongo_connection():
    global client
    if client is not None:
        client.close()
        client = None
        logger.info("MongoDB connection closed")
