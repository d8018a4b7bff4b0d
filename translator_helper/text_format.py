"""
鍵值大小寫格式轉換

"Hello World!" → hello_world / helloWorld / HelloWorld / hello-world /
HELLO_WORLD / hello.world / "hello world"
"""

import re
import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_CASE_FORMAT = "snake_case"

_APOSTROPHE_RE = re.compile(r"['’]")
_HUMP_RE = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')
_WORD_RE = re.compile(r'[^\W_]+')


def split_words(text: str) -> List[str]:
    """切分成單字（Unicode 字母 / 數字），並拆開 camelCase 駝峰"""
    text = _APOSTROPHE_RE.sub('', text)
    text = _HUMP_RE.sub(' ', text)
    return _WORD_RE.findall(text)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _camel(words: List[str]) -> str:
    return words[0].lower() + ''.join(_capitalize(w) for w in words[1:])


CASE_FORMATS: Dict[str, Callable[[List[str]], str]] = {
    "snake_case": lambda words: '_'.join(w.lower() for w in words),
    "camelCase": _camel,
    "PascalCase": lambda words: ''.join(_capitalize(w) for w in words),
    "kebab-case": lambda words: '-'.join(w.lower() for w in words),
    "CONSTANT_CASE": lambda words: '_'.join(w.upper() for w in words),
    "dot.case": lambda words: '.'.join(w.lower() for w in words),
    "lowercase": lambda words: ' '.join(w.lower() for w in words),
}


def format_text(text: str, case_format: str = DEFAULT_CASE_FORMAT) -> str:
    """
    依指定格式轉換文字

    Args:
        text: 原始文字（通常是翻譯後的英文）
        case_format: CASE_FORMATS 中的格式名稱，未知格式退回 snake_case

    Returns:
        格式化後的鍵值；沒有任何單字字元時返回去除空白的原文
    """
    formatter = CASE_FORMATS.get(case_format)
    if formatter is None:
        logger.warning(f"Unknown case format '{case_format}', using {DEFAULT_CASE_FORMAT}")
        formatter = CASE_FORMATS[DEFAULT_CASE_FORMAT]

    words = split_words(text)
    if not words:
        return text.strip()
    return formatter(words)
