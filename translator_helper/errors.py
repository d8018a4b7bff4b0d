#!/usr/bin/env python3
"""
錯誤類型與例外定義

錯誤分類：
- CONFIGURATION: 配置檔無法解析 → 指令不執行
- IO: 讀取失敗 → 通知後視為空 / 非重複，繼續處理
- EXTERNAL_SERVICE: 翻譯服務失敗 → 退回原文
- EDIT_APPLY: 套用編輯失敗 → 逐檔通知，不回滾其他語系
"""

from enum import Enum
from typing import Optional


class ErrorType(Enum):
    """錯誤類型分類"""
    IO = "io"
    EXTERNAL_SERVICE = "external_service"
    EDIT_APPLY = "edit_apply"
    CONFIGURATION = "configuration"


class TranslatorHelperError(Exception):
    """所有 translator_helper 例外的基底類別"""

    error_type: ErrorType = ErrorType.IO

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class TranslationError(TranslatorHelperError):
    """翻譯引擎失敗"""
    error_type = ErrorType.EXTERNAL_SERVICE


class EditApplyError(TranslatorHelperError):
    """文件編輯無法套用"""
    error_type = ErrorType.EDIT_APPLY


class LockTimeoutError(TranslatorHelperError):
    """等待檔案鎖逾時"""
    error_type = ErrorType.EDIT_APPLY


class ConfigurationError(TranslatorHelperError):
    """配置檔案格式錯誤"""
    error_type = ErrorType.CONFIGURATION
