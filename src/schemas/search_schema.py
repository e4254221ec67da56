"""Pydantic 스키마 정의 (검색 요청/응답/캐시 키)"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ObjectId 등 임의 식별자를 문자열로 정규화
ObjectIdStr = Annotated[str, BeforeValidator(str)]

Number = Union[int, float]

# null로 저장된 집계 값은 0으로 취급
Count = Annotated[Number, BeforeValidator(lambda v: 0 if v is None else v)]


class SortOption(str, Enum):
    """사용자 지정 정렬 옵션"""

    NEWEST = "newest"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"
    RATING = "rating"


class SearchFilters(BaseModel):
    """적용된 검색 필터 (유효성 통과한 값만 보관)"""

    category: Optional[str] = Field(None, description="카테고리 ObjectId")
    brand: Optional[str] = Field(None, description="브랜드 ObjectId")
    min_price: Optional[float] = Field(None, description="최소 가격")
    max_price: Optional[float] = Field(None, description="최대 가격")


class SearchCacheKey(BaseModel):
    """검색 캐시 키 구성 요소

    같은 논리적 요청은 필드 순서와 무관하게 같은 키가 되도록
    canonical_json()으로 직렬화한 뒤 해시합니다.
    """

    term: str
    page: int
    limit: int
    filters: SearchFilters
    sort: Optional[str] = None


class CamelModel(BaseModel):
    """응답 필드를 camelCase로 내보내는 기본 모델"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class NamedRef(CamelModel):
    """조인된 카테고리/브랜드 (이름만)"""

    id: Optional[ObjectIdStr] = Field(None, alias="_id")
    name: Optional[str] = None


class ProductSearchItem(CamelModel):
    """검색 결과 상품 한 건"""

    id: ObjectIdStr = Field(..., alias="_id")
    title: str = ""
    price: Optional[Number] = None
    discounted_price: Optional[Number] = None
    images: list[str] = Field(default_factory=list)
    ratings_average: Count = 0
    ratings_quantity: Count = 0
    created_at: Optional[datetime] = None
    category: Optional[NamedRef] = None
    brand: Optional[NamedRef] = None
    seller_trusted: bool = False

    @classmethod
    def to_payload(cls, document: dict[str, Any]) -> dict[str, Any]:
        """MongoDB 문서 → JSON 직렬화 가능한 dict"""
        return cls.model_validate(document).model_dump(mode="json", by_alias=True)


class PaginationMeta(CamelModel):
    """페이지네이션 메타데이터"""

    current_page: int
    total_pages: int
    limit: int
    total: int
    next: Optional[str] = None
    prev: Optional[str] = None
    label_next: str = "Next"
    label_prev: str = "Previous"


class SearchResponse(CamelModel):
    """상품 검색 응답"""

    success: bool = True
    products: list[ProductSearchItem]
    query: str
    pagination: PaginationMeta
    cached: Optional[bool] = Field(None, description="캐시 히트 시에만 true")


class ErrorResponse(BaseModel):
    """오류 응답"""

    success: bool = False
    message: str
    error_code: Optional[str] = None


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str
    timestamp: datetime
    version: str
    database: bool
    cache: dict[str, Any]
