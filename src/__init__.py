"""스토어프론트 상품 검색 서비스"""

__version__ = "1.0.0"
