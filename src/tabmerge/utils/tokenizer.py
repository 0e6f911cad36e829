# src/tabmerge/utils/tokenizer.py
import sys
from functools import lru_cache
from typing import Optional

import tiktoken

from tabmerge.config import TOKENIZER_ENCODING, TOKENIZER_FALLBACK_ENCODING

@lru_cache(maxsize=1)
def get_encoding() -> Optional["tiktoken.Encoding"]:
    """
    Loads the first usable encoding, once per process.
    Returns None when no encoding data can be loaded (e.g. offline).
    """
    for name in (TOKENIZER_ENCODING, TOKENIZER_FALLBACK_ENCODING):
        try:
            return tiktoken.get_encoding(name)
        except Exception as e:
            print(f"  > [Warning] Tokenizer encoding '{name}' unavailable: {e}", file=sys.stderr)
    return None

def count_tokens(text: str) -> int:
    """Token estimate for a document; about four characters per token without tiktoken data."""
    encoding = get_encoding()
    if encoding is None:
        return len(text) // 4
    return len(encoding.encode(text, disallowed_special=()))
