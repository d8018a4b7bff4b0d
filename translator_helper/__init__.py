"""
translator_helper - Laravel 翻譯鍵值輔助工具

選取原始碼中的文字，產生翻譯鍵值，將選取範圍替換為 `{{ __('path.key') }}`，
並把鍵值對寫入每個語系目錄下的翻譯檔。

**載入策略**: 延遲載入 (Lazy Loading)
- 只在實際使用時才載入子模組（deep-translator / google-genai 較重）
"""

__version__ = "1.0.0"

_module_cache = {}

_LAZY_ATTRS = {
    'HelperConfig': 'config',
    'load_config': 'config',
    'HandleTextCommand': 'command',
    'KeyDeriver': 'key_deriver',
    'LocaleFileMerger': 'locale_merger',
    'plan_insertion': 'locale_merger',
    'get_locale_folders': 'locale_scanner',
    'ensure_locale_file': 'file_ensurer',
    'translation_key_exists': 'duplicate_guard',
    'replace_selection': 'selection_replacer',
    'format_text': 'text_format',
    'Notifier': 'notifier',
}


def __getattr__(name):
    """
    延遲載入子模組屬性

    Raises:
        AttributeError: 屬性不存在
    """
    if name in _module_cache:
        return _module_cache[name]

    module_name = _LAZY_ATTRS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'translator_helper' has no attribute '{name}'")

    import importlib
    module = importlib.import_module(f".{module_name}", __name__)
    value = getattr(module, name)
    _module_cache[name] = value
    return value


__all__ = list(_LAZY_ATTRS) + ['__version__']
