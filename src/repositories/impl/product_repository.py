"""상품 리포지토리 - products 컬렉션 접근 로직"""
import time
from typing import Any, Callable, Optional

from pymongo import TEXT
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure, PyMongoError

from src.core.config import settings
from src.core.exceptions import DatabaseQueryException, TextSearchUnsupportedException
from src.core.logging import logger
from src.repositories.models import PRODUCTS_COLLECTION, TEXT_INDEX_NAME, TEXT_INDEX_WEIGHTS


# MongoDB 에러 코드: IndexNotFound
_INDEX_NOT_FOUND_CODE = 27


def is_text_search_error(error: Exception) -> bool:
    """$text 실행 불가(텍스트 인덱스 없음 등) 오류인지 판별"""
    if not isinstance(error, OperationFailure):
        return False
    if error.code == _INDEX_NOT_FOUND_CODE:
        return True
    message = str(error)
    return "text index" in message or "$text" in message


class ProductRepository:
    """상품 데이터 액세스 레이어"""

    def __init__(self, db: AsyncDatabase):
        self.collection = db[PRODUCTS_COLLECTION]

    async def aggregate_search(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """집계 파이프라인 실행

        Raises:
            TextSearchUnsupportedException: $text 실행 불가
            DatabaseQueryException: 그 외 쿼리 오류
        """
        try:
            cursor = await self.collection.aggregate(pipeline)
            return await cursor.to_list()
        except PyMongoError as e:
            if is_text_search_error(e):
                raise TextSearchUnsupportedException(str(e)) from e
            raise DatabaseQueryException("aggregate", str(e)) from e

    async def count(self, filter_: dict[str, Any]) -> int:
        """필터에 맞는 문서 수"""
        try:
            return await self.collection.count_documents(filter_)
        except PyMongoError as e:
            raise DatabaseQueryException("count_documents", str(e)) from e

    async def find_page(
        self,
        filter_: dict[str, Any],
        projection: dict[str, int],
        sort: dict[str, Any],
        skip: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        """정렬/페이지 단위 조회"""
        try:
            cursor = (
                self.collection.find(filter_, projection)
                .sort(list(sort.items()))
                .skip(skip)
                .limit(limit)
            )
            return await cursor.to_list()
        except PyMongoError as e:
            raise DatabaseQueryException("find", str(e)) from e

    async def has_text_index(self) -> bool:
        """텍스트 인덱스 존재 여부

        Raises:
            DatabaseQueryException: 인덱스 정보 조회 실패
        """
        try:
            indexes = await self.collection.index_information()
        except PyMongoError as e:
            raise DatabaseQueryException("index_information", str(e)) from e

        for info in indexes.values():
            if "weights" in info:
                return True
            if any(direction == TEXT for _, direction in info.get("key", [])):
                return True
        return False

    async def ensure_text_index(self, language: str = "none") -> bool:
        """title/description 가중치 텍스트 인덱스 생성

        컬렉션당 텍스트 인덱스는 하나만 허용되므로 다른 이름의 인덱스가
        이미 있으면 실패하며, 이 경우 False를 반환합니다.
        """
        try:
            await self.collection.create_index(
                [("title", TEXT), ("description", TEXT)],
                name=TEXT_INDEX_NAME,
                weights=TEXT_INDEX_WEIGHTS,
                default_language=language,
            )
            logger.info(f"Text index ensured: {TEXT_INDEX_NAME}")
            return True
        except PyMongoError as e:
            logger.warning(f"Failed to ensure text index: {e}")
            return False


class TextIndexProbe:
    """텍스트 인덱스 존재 여부를 짧게 캐시하는 프로브

    요청마다 index_information()을 호출하지 않도록 결과를 ttl_s 동안 재사용합니다.
    확인 실패는 "인덱스 없음"으로 취급합니다 (정규식 경로로 강등).
    """

    def __init__(
        self,
        repository: ProductRepository,
        ttl_s: Optional[float] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.repository = repository
        self.ttl_s = settings.text_index_probe_ttl_s if ttl_s is None else ttl_s
        self._timer = timer
        self._value: Optional[bool] = None
        self._checked_at = 0.0

    async def supports_native_text_search(self) -> bool:
        now = self._timer()
        if self._value is not None and now - self._checked_at < self.ttl_s:
            return self._value

        try:
            value = await self.repository.has_text_index()
        except Exception as e:
            logger.warning(f"Text index check failed, using regex search: {e}")
            value = False

        self._value = value
        self._checked_at = now
        return value

    def invalidate(self) -> None:
        """다음 호출에서 다시 확인"""
        self._value = None
