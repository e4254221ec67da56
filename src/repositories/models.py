"""문서 모델 상수 (MongoDB 컬렉션/필드 정의)

검색 서비스는 상품/브랜드/카테고리 컬렉션을 읽기만 합니다.
문서 스키마 자체는 커머스 백엔드가 소유합니다.
"""
from enum import Enum


PRODUCTS_COLLECTION = "products"
BRANDS_COLLECTION = "brands"
CATEGORIES_COLLECTION = "categories"


class ProductStatus(str, Enum):
    """상품 판매 상태"""

    AVAILABLE = "available"
    PENDING = "pending"


class CatalogStatus(str, Enum):
    """브랜드/카테고리 상태"""

    ACTIVE = "active"
    INACTIVE = "inactive"


# 검색 노출 조건 (승인 + 활성 + 판매 가능)
VISIBILITY_FILTER: dict = {
    "isApproved": True,
    "status": ProductStatus.AVAILABLE.value,
    "isActive": True,
}

# 검색 응답에 필요한 필드만 투영
SEARCH_RESULT_FIELDS: tuple[str, ...] = (
    "title",
    "price",
    "discountedPrice",
    "images",
    "ratingsAverage",
    "ratingsQuantity",
    "createdAt",
    "sellerTrusted",
)

# 상품 전문 검색 인덱스
TEXT_INDEX_NAME = "product_fulltext"
TEXT_INDEX_WEIGHTS = {"title": 10, "description": 3}
