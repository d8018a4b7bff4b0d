#!/usr/bin/env python3
"""
使用者訊息的國際化 (i18n) 模組

負責：
1. 語言包載入與快取（YAML）
2. 點號路徑查詢（"command.no_text_selected"）
3. 參數化訊息
4. 回退機制（找不到語言包或鍵值時使用英文 fallback）
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"
LOCALE_DIR = Path(__file__).parent / "locales"


class I18n:
    """訊息語言包管理器"""

    def __init__(self, lang: str = DEFAULT_LANG, locale_dir: Path = LOCALE_DIR):
        self.locale_dir = locale_dir
        self._cache: Dict[str, Dict] = {}
        self.current_lang = DEFAULT_LANG
        self.switch_language(DEFAULT_LANG)
        if lang != DEFAULT_LANG:
            self.switch_language(lang)

    def _load_yaml(self, lang: str) -> Dict:
        """
        載入 YAML 語言包

        Raises:
            FileNotFoundError: 語言包檔案不存在
        """
        # zh-TW → zh_TW.yaml
        yaml_file = self.locale_dir / f"{lang.replace('-', '_')}.yaml"
        if not yaml_file.exists():
            raise FileNotFoundError(f"Language pack not found: {yaml_file}")

        with open(yaml_file, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def switch_language(self, lang: str) -> bool:
        """
        切換語言，找不到語言包時保留目前語言

        Returns:
            是否成功切換
        """
        if lang in self._cache:
            self.current_lang = lang
            return True

        try:
            self._cache[lang] = self._load_yaml(lang)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Cannot load language pack '{lang}': {e}")
            return False

        self.current_lang = lang
        return True

    def lookup(self, key: str) -> Optional[str]:
        """依點號路徑查詢，找不到或不是字串時返回 None"""
        data = self._cache.get(self.current_lang, {})
        for part in key.split('.'):
            if not isinstance(data, dict):
                return None
            data = data.get(part)
        return data if isinstance(data, str) else None


_i18n_instance: Optional[I18n] = None


def init_i18n(lang: str = DEFAULT_LANG) -> I18n:
    """初始化（或重新初始化）全域 i18n 實例"""
    global _i18n_instance
    _i18n_instance = I18n(lang)
    return _i18n_instance


def get_i18n() -> I18n:
    """取得 i18n 實例，尚未初始化時使用預設語言"""
    global _i18n_instance
    if _i18n_instance is None:
        _i18n_instance = I18n()
    return _i18n_instance


def safe_t(key: str, fallback: str, **kwargs) -> str:
    """
    查詢訊息並套用參數，任何失敗都退回 fallback

    Examples:
        >>> safe_t('command.no_text_selected', fallback='No text selected.')
        'No text selected.'
    """
    template = get_i18n().lookup(key) or fallback
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return fallback.format(**kwargs)
