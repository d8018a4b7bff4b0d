"""
語系目錄掃描：列出語系根目錄下的直接子目錄
"""

import logging
from pathlib import Path
from typing import List

from .i18n import safe_t
from .notifier import Notifier

logger = logging.getLogger(__name__)


def get_locale_folders(root_lang_path, notifier: Notifier) -> List[str]:
    """
    取得語系目錄名稱（排序後）

    Args:
        root_lang_path: 語系根目錄，例如 <workspace>/resources/lang
        notifier: 失敗時的通知對象

    Returns:
        子目錄名稱列表；根目錄不存在或無法讀取時返回空列表
    """
    root = Path(root_lang_path)
    try:
        locales = sorted(entry.name for entry in root.iterdir() if entry.is_dir())
    except OSError as e:
        logger.debug(f"Cannot list {root}: {e}")
        notifier.error(safe_t('locale.folders_failed',
                              fallback="Failed to retrieve locale folders: {error}",
                              error=e.strerror or str(e)))
        return []

    logger.debug(f"Found locales in {root}: {locales}")
    return locales
