#!/usr/bin/env python3
"""
handleText 指令：串接所有元件

流程：
1. 檢查選取文字（空或只有空白 → 中止）
2. 取得翻譯檔相對路徑（參數或互動提示）
3. 產生鍵值與翻譯路徑
4. 替換選取範圍
5. 掃描語系目錄（無 → 中止）
6. 逐一語系：鎖定 → 確保檔案 → 檢查重複 → 合併

前置條件失敗會中止整個指令；單一語系的失敗只通知，不影響其他語系，
也不回滾已寫入的語系檔。
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .config import HelperConfig
from .duplicate_guard import translation_key_exists
from .errors import EditApplyError, LockTimeoutError
from .file_ensurer import ensure_locale_file
from .file_lock import locked
from .i18n import safe_t
from .key_deriver import KeyDeriver
from .locale_merger import LocaleFileMerger
from .locale_scanner import get_locale_folders
from .notifier import Notifier
from .selection_replacer import Selection, replace_selection
from .translation_engines import TranslationEngine, get_engine

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """指令執行結果"""
    completed: bool = False
    key: Optional[str] = None
    translation_path: Optional[str] = None
    wrapped_text: Optional[str] = None
    locales: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def normalize_file_path(file_path_input: str) -> str:
    """
    去除空白與開頭斜線，統一使用 `/` 分隔

    Examples:
        >>> normalize_file_path(' /admin/users.php ')
        'admin/users.php'
    """
    return file_path_input.strip().replace('\\', '/').lstrip('/')


def locale_file_path(lang_root: Path, locale: str, file_path_input: str) -> Path:
    """<root>/<locale>/<dirname(input)>/<basename(input)>，input 需先經 normalize_file_path"""
    return Path(lang_root) / locale / file_path_input


class HandleTextCommand:
    """選取文字 → 翻譯鍵值 → 語系檔"""

    def __init__(self, workspace, config: HelperConfig, notifier: Notifier,
                 engine: Optional[TranslationEngine] = None,
                 path_prompt: Optional[Callable[[], str]] = None):
        self.workspace = Path(workspace)
        self.config = config
        self.notifier = notifier
        self.engine = engine or get_engine(config)
        self.path_prompt = path_prompt
        self.key_deriver = KeyDeriver(config, self.engine)
        self.merger = LocaleFileMerger(config, notifier, self.engine)

    def _abort(self, result: CommandResult, key: str, fallback: str) -> CommandResult:
        self.notifier.error(safe_t(key, fallback=fallback))
        return result

    def run(self, selection: Selection, file_path_input: Optional[str] = None) -> CommandResult:
        result = CommandResult()

        text = selection.text
        if not text.strip():
            return self._abort(result, 'command.no_text_selected', "No text selected.")

        if not file_path_input and self.path_prompt is not None:
            file_path_input = self.path_prompt()
        file_path_input = normalize_file_path(file_path_input or "")
        if not file_path_input:
            return self._abort(result, 'command.no_path', "No translation file path given.")

        key_and_path = self.key_deriver.get_key_and_path(file_path_input, text)
        result.key = key_and_path.key
        result.translation_path = key_and_path.translation_path

        try:
            result.wrapped_text = replace_selection(selection, key_and_path.translation_path,
                                                    key_and_path.key)
        except EditApplyError as e:
            logger.error(e.message)
            return self._abort(result, 'command.replace_failed', "Failed to replace the selection.")

        lang_root = self.config.lang_root(self.workspace)
        result.locales = get_locale_folders(lang_root, self.notifier)
        if not result.locales:
            return self._abort(result, 'command.no_locale_directories', "No locale directories found.")

        for locale in result.locales:
            target = locale_file_path(lang_root, locale, file_path_input)
            outcome = self._process_locale(target, key_and_path.key, text, locale)
            getattr(result, outcome).append(locale)

        result.completed = True
        logger.info(f"'{result.key}': added={result.added} skipped={result.skipped} failed={result.failed}")
        return result

    def _process_locale(self, target: Path, key: str, text: str, locale: str) -> str:
        """單一語系的 ensure → check → merge，返回 added / skipped / failed"""
        try:
            with locked(target, timeout=self.config.lock_timeout):
                ensure_locale_file(target)
                if translation_key_exists(target, key, self.notifier):
                    return "skipped"
                if self.merger.update_locale_file(target, key, text, locale):
                    return "added"
                return "failed"
        except LockTimeoutError as e:
            logger.warning(f"[{e.error_type.value}] {e.message}")
            self.notifier.error(safe_t('locale.lock_timeout',
                                       fallback="Timed out waiting for lock on {path}",
                                       path=str(target)))
        except OSError as e:
            logger.error(f"Cannot prepare {target}: {e}")
            self.notifier.error(safe_t('locale.update_failed', fallback="Failed to update the locale file."))
        return "failed"
