"""해싱 유틸리티"""
import hashlib
import json
from typing import Any


SEARCH_CACHE_PREFIX = "search:v5:"


def hash_string(text: str) -> str:
    """
    문자열을 MD5 해시로 변환

    Args:
        text: 해시할 문자열

    Returns:
        MD5 해시 문자열
    """
    return hashlib.md5(text.encode()).hexdigest()


def canonical_json(data: Any) -> str:
    """키 정렬/공백 제거 JSON 직렬화

    dict 삽입 순서와 무관하게 같은 내용이면 같은 문자열을 반환합니다.
    """
    return json.dumps(data, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)


def generate_search_cache_key(key_fields: dict[str, Any]) -> str:
    """
    검색 요청 형태로 캐시 키 생성

    Args:
        key_fields: {term, page, limit, filters, sort}

    Returns:
        캐시 키 ("search:v5:" + MD5)
    """
    return f"{SEARCH_CACHE_PREFIX}{hash_string(canonical_json(key_fields))}"
