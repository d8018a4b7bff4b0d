#!/usr/bin/env python3
"""
語系檔合併器

在 PHP 陣列語系檔中插入一筆 'key' => 'value'，不解析 PHP，只依行的位置判斷：

1. 空檔或仍是原始骨架（return [\\n];）→ 整份改寫為只含一筆的陣列
2. 否則略過檔尾空行，由下往上找內容為 `];` 的行作為錨點
   - 錨點上方最後一筆項目缺逗號時補上逗號
   - 在錨點前插入新的一行（4 空白縮排，不加結尾逗號）
3. 找不到錨點（檔案截斷）→ 檔尾補上空行、新項目（含逗號）與 `];`

編輯以單一 WorkspaceEdit 原子性套用。
"""

import logging
from pathlib import Path
from typing import Optional

from .config import HelperConfig
from .document import Position, TextDocument, WorkspaceEdit, apply_edit, apply_text_edits
from .duplicate_guard import php_escape
from .i18n import safe_t
from .notifier import Notifier
from .translation_engines import TranslationEngine, get_engine

logger = logging.getLogger(__name__)

INDENT = "    "
OPENING_TAG = "<?php"
CLOSING_MARKER = "];"
FRESH_MARKER = "return [\n];"
COMMENT_PREFIXES = ('//', '#', '/*', '*')


def build_entry(key: str, value: str) -> str:
    return f"'{php_escape(key)}' => '{php_escape(value)}'"


def is_fresh(content: str) -> bool:
    """空檔或尚未加入任何項目的骨架"""
    return not content.strip() or FRESH_MARKER in content.replace('\r\n', '\n')


def _eol(content: str) -> str:
    return '\r\n' if '\r\n' in content else '\n'


def _find_anchor(lines) -> Optional[int]:
    last = len(lines) - 1
    while last >= 0 and not lines[last].strip():
        last -= 1
    for i in range(last, -1, -1):
        if lines[i].strip() == CLOSING_MARKER:
            return i
    return None


def _last_entry_line(lines, anchor: int) -> Optional[int]:
    for i in range(anchor - 1, -1, -1):
        stripped = lines[i].strip()
        if stripped and not stripped.startswith(COMMENT_PREFIXES):
            return i
    return None


def plan_insertion(document: TextDocument, entry: str) -> WorkspaceEdit:
    """
    計算插入一筆項目所需的編輯

    Args:
        document: 語系檔快照
        entry: 已序列化的項目（'key' => 'value'）

    Returns:
        尚未套用的 WorkspaceEdit
    """
    edit = WorkspaceEdit()
    eol = _eol(document.text)

    if is_fresh(document.text):
        skeleton = eol.join([OPENING_TAG, "", "return [", INDENT + entry, CLOSING_MARKER, ""])
        edit.replace(document, document.full_range(), skeleton)
        return edit

    lines = document.lines
    anchor = _find_anchor(lines)

    if anchor is None:
        logger.warning(f"No closing '{CLOSING_MARKER}' in {document.path}, appending a new tail")
        lead = "" if document.text.endswith('\n') else eol
        tail = f"{lead}{eol}{INDENT}{entry},{eol}{CLOSING_MARKER}{eol}"
        edit.insert(document, Position(document.line_count, 0), tail)
        return edit

    previous = _last_entry_line(lines, anchor)
    if previous is not None:
        content = lines[previous].rstrip()
        if not content.endswith((',', '[')):
            edit.insert(document, Position(previous, len(content)), ',')

    edit.insert(document, Position(anchor, 0), f"{INDENT}{entry}{eol}")
    return edit


def merge_text(content: str, key: str, value: str) -> str:
    """在記憶體中合併（不寫檔），返回合併後的內容"""
    document = TextDocument(Path("<memory>"), content)
    edits = plan_insertion(document, build_entry(key, value)).entries()
    if not edits:
        return content
    return apply_text_edits(*edits[0])


class LocaleFileMerger:
    """將新項目寫入語系檔並通知結果"""

    def __init__(self, config: HelperConfig, notifier: Notifier,
                 engine: Optional[TranslationEngine] = None):
        self.config = config
        self.notifier = notifier
        self._engine = engine

    @property
    def engine(self) -> TranslationEngine:
        if self._engine is None:
            self._engine = get_engine(self.config)
        return self._engine

    def resolve_value(self, text: str, locale: str) -> str:
        """儲存的值：預設為原文；啟用 per_locale_translation 時翻譯成該語系"""
        if not self.config.per_locale_translation:
            return text
        try:
            return self.engine.translate(text, locale.replace('_', '-'))
        except Exception as e:
            logger.error(f"Translation to '{locale}' failed, storing original text: {e}")
            return text

    def update_locale_file(self, file_path, key: str, text: str, locale: str) -> bool:
        """
        插入項目並套用編輯

        Returns:
            是否成功寫入
        """
        try:
            document = TextDocument.open(file_path)
        except (OSError, UnicodeDecodeError) as e:
            self.notifier.error(safe_t('locale.read_failed',
                                       fallback="Failed to read locale file: {error}",
                                       error=getattr(e, 'strerror', None) or str(e)))
            return False

        value = self.resolve_value(text, locale)
        edit = plan_insertion(document, build_entry(key, value))

        if apply_edit(edit):
            logger.debug(f"Added '{key}' to {file_path} ({locale})")
            self.notifier.info(safe_t('locale.added', fallback="Translation added to the locale file."))
            return True

        self.notifier.error(safe_t('locale.update_failed', fallback="Failed to update the locale file."))
        return False
