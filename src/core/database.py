"""MongoDB 연결 관리"""
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from src.core.config import settings
from src.core.exceptions import DatabaseConnectionException
from src.core.logging import logger


_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """AsyncMongoClient 반환 (최초 호출 시 생성)

    클라이언트 생성은 연결을 열지 않으므로 실제 연결 확인은 ping_db()에서 합니다.
    """
    global _client
    if _client is None:
        _client = AsyncMongoClient(
            settings.mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_database() -> AsyncDatabase:
    """설정된 데이터베이스 핸들"""
    return get_client()[settings.mongodb_database]


async def ping_db() -> bool:
    """MongoDB 연결 상태 확인"""
    try:
        await get_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


async def init_db() -> None:
    """MongoDB 연결 확인

    Raises:
        DatabaseConnectionException: ping 실패
    """
    try:
        await get_client().admin.command("ping")
        logger.info("MongoDB connection established")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise DatabaseConnectionException(str(e))


async def close_db() -> None:
    """클라이언트 종료"""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        logger.info("MongoDB connection closed")
