"""브랜드/카테고리 리포지토리 - 이름 매칭 및 이름 조회"""
from typing import Any, Iterable

from bson import ObjectId
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from src.core.exceptions import DatabaseQueryException
from src.repositories.models import BRANDS_COLLECTION, CATEGORIES_COLLECTION, CatalogStatus


class CatalogRepository:
    """브랜드/카테고리 데이터 액세스 레이어"""

    def __init__(self, db: AsyncDatabase):
        self.db = db

    async def find_active_brand_ids(self, pattern: str) -> list[ObjectId]:
        """이름이 pattern(이스케이프된 정규식)을 포함하는 활성 브랜드 ID"""
        return await self._find_active_ids(BRANDS_COLLECTION, pattern)

    async def find_active_category_ids(self, pattern: str) -> list[ObjectId]:
        """이름이 pattern(이스케이프된 정규식)을 포함하는 활성 카테고리 ID"""
        return await self._find_active_ids(CATEGORIES_COLLECTION, pattern)

    async def find_names(self, collection_name: str, ids: Iterable[Any]) -> dict[Any, str]:
        """ID → 이름 매핑 (상태 무관)"""
        unique_ids = list({i for i in ids if i is not None})
        if not unique_ids:
            return {}
        try:
            cursor = self.db[collection_name].find({"_id": {"$in": unique_ids}}, {"name": 1})
            docs = await cursor.to_list()
        except PyMongoError as e:
            raise DatabaseQueryException(f"{collection_name}.find", str(e)) from e
        return {doc["_id"]: doc.get("name") for doc in docs}

    async def _find_active_ids(self, collection_name: str, pattern: str) -> list[ObjectId]:
        try:
            cursor = self.db[collection_name].find(
                {
                    "status": CatalogStatus.ACTIVE.value,
                    "name": {"$regex": pattern, "$options": "i"},
                },
                {"_id": 1},
            )
            docs = await cursor.to_list()
        except PyMongoError as e:
            raise DatabaseQueryException(f"{collection_name}.find", str(e)) from e
        return [doc["_id"] for doc in docs]
