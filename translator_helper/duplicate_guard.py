"""
重複鍵值檢查
"""

import re
import logging

from .document import read_text
from .i18n import safe_t
from .notifier import Notifier

logger = logging.getLogger(__name__)


def php_escape(value: str) -> str:
    """PHP 單引號字串跳脫（\\ 與 '）"""
    return value.replace('\\', '\\\\').replace("'", "\\'")


def key_pattern(key: str) -> "re.Pattern":
    """'key' => 或 "key" => 的比對樣式（兩種跳脫形式皆可）"""
    variants = {re.escape(key), re.escape(php_escape(key))}
    return re.compile(r"""['"](?:%s)['"]\s*=>""" % '|'.join(sorted(variants)))


def translation_key_exists(file_path, key: str, notifier: Notifier) -> bool:
    """
    檢查語系檔是否已有此鍵值

    Returns:
        已存在返回 True；讀取失敗時通知並返回 False（樂觀地繼續插入）
    """
    try:
        content = read_text(file_path)
    except (OSError, UnicodeDecodeError) as e:
        notifier.error(safe_t('locale.read_failed',
                              fallback="Failed to read locale file: {error}",
                              error=getattr(e, 'strerror', None) or str(e)))
        return False

    exists = key_pattern(key).search(content) is not None
    if exists:
        logger.info(f"Key '{key}' already present in {file_path}, skipping")
    return exists
