"""Utilities package - Flat structure"""

from .hash_utils import SEARCH_CACHE_PREFIX, canonical_json, generate_search_cache_key, hash_string
from .text_utils import escape_regex, is_rtl_text, normalize_search_term, split_words

__all__ = [
    # hash
    "SEARCH_CACHE_PREFIX",
    "canonical_json",
    "generate_search_cache_key",
    "hash_string",
    # text
    "escape_regex",
    "is_rtl_text",
    "normalize_search_term",
    "split_words",
]
