#!/usr/bin/env python3
"""
翻譯鍵值產生器

選取文字 → 翻譯成鍵值語言（預設英文）→ 大小寫格式轉換。
翻譯失敗時不重試，直接以未格式化的原文作為鍵值，指令照常繼續。
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from .config import HelperConfig
from .text_format import format_text
from .translation_engines import TranslationEngine, get_engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyAndPath:
    """一次指令共用的鍵值與翻譯路徑"""
    key: str
    translation_path: str


def translation_path_for(file_path: str) -> str:
    """
    由相對檔案路徑產生翻譯路徑（目錄 + 主檔名，去除副檔名）

    Examples:
        >>> translation_path_for('admin/users.php')
        'admin/users'
        >>> translation_path_for('messages.php')
        'messages'
    """
    path = PurePosixPath(file_path.replace('\\', '/'))
    return str(path.parent / path.stem) if str(path.parent) != '.' else path.stem


class KeyDeriver:
    """鍵值產生器"""

    def __init__(self, config: HelperConfig, engine: Optional[TranslationEngine] = None):
        self.config = config
        self.engine = engine or get_engine(config)

    def derive_key(self, text: str) -> str:
        """
        產生鍵值

        Args:
            text: 選取的原文（非空，由呼叫端檢查）

        Returns:
            格式化後的鍵值；翻譯失敗時為原文
        """
        try:
            translated = self.engine.translate(text, self.config.key_language)
        except Exception as e:
            logger.error(f"Translation error: {e}")
            return text

        key = format_text(translated, self.config.case_format)
        if not key:
            logger.warning(f"Translation of {text!r} produced an empty key, using the original text")
            return text
        return key

    def get_key_and_path(self, file_path: str, text: str) -> KeyAndPath:
        return KeyAndPath(
            key=self.derive_key(text),
            translation_path=translation_path_for(file_path),
        )
