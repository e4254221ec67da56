"""검색어 텍스트 유틸리티"""
import re


# MongoDB($regex, PCRE)에서 의미를 갖는 메타문자
_REGEX_META = re.compile(r"[.*+?^${}()|\[\]\\]")

# 오른쪽→왼쪽(RTL) 문자 범위: 히브리어, 아랍어, 아랍어 보충, 아랍어 표시형 A/B
_RTL_ONLY = re.compile(
    r"^[\u0590-\u05FF\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF\s]+$"
)


def escape_regex(text: str) -> str:
    """정규식 메타문자 이스케이프

    re.escape()와 달리 공백/하이픈 등은 그대로 두어, 이스케이프 후에도
    공백 기준 단어 분리가 가능합니다.
    """
    if not text:
        return ""
    return _REGEX_META.sub(lambda m: "\\" + m.group(0), text)


def is_rtl_text(text: str) -> bool:
    """RTL 문자(아랍어/히브리어)와 공백으로만 구성되었는지 여부"""
    if not text:
        return False
    return bool(_RTL_ONLY.match(text))


def split_words(text: str) -> list[str]:
    """공백 기준 단어 분리 (빈 토큰 제외)"""
    if not text:
        return []
    return text.split()


def normalize_search_term(raw: object) -> str:
    """쿼리 파라미터 검색어 정리 (None → 빈 문자열, 앞뒤 공백 제거)"""
    if raw is None:
        return ""
    return str(raw).strip()
