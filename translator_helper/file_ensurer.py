"""
確保語系檔存在（建立缺少的目錄與空陣列骨架）
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SKELETON = "<?php\n\nreturn [\n];\n"


def ensure_locale_file(file_path) -> bool:
    """
    建立缺少的目錄與語系檔骨架；已存在的檔案不做任何變更

    Returns:
        是否新建了檔案

    Raises:
        OSError: 目錄或檔案無法建立
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, 'x', encoding='utf-8', newline='') as f:
            f.write(SKELETON)
    except FileExistsError:
        return False

    logger.info(f"Created locale file {path}")
    return True
