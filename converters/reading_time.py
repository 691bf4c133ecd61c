"""Reading-time estimation for converted documents."""

import math
import re

WORDS_PER_MINUTE = 200

# Kana, CJK ideographs and hangul syllables are read one character per word
_CJK_RANGES = '\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uac00-\ud7af'

_WORD_PATTERN = re.compile(rf'[{_CJK_RANGES}]|[^\s{_CJK_RANGES}]+')


def count_words(text: str) -> int:
    """Count words: one per CJK character, otherwise whitespace-separated runs."""
    return len(_WORD_PATTERN.findall(text or ''))


def estimate(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """
    Estimate the reading time of a text.

    Minutes are rounded to two decimals and then up to the next whole
    minute.

    Args:
        text: Document text (markdown is fine)
        words_per_minute: Reading speed

    Returns:
        Human-readable duration such as "3 min read"
    """
    minutes = count_words(text) / words_per_minute
    return f"{math.ceil(round(minutes, 2))} min read"


__all__ = ['estimate', 'count_words', 'WORDS_PER_MINUTE']
