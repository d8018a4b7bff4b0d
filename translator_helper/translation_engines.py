#!/usr/bin/env python3
"""
翻譯引擎

引擎：
- google: deep-translator（Google Translate 非官方介面，免費，無需 API key）
- gemini: google-genai 新 SDK（需要 GEMINI_API_KEY）
- none:   不翻譯，原文返回

所有引擎失敗時一律拋出 TranslationError，由呼叫端決定退回方案。
"""

import os
import logging
from typing import Optional

from .config import HelperConfig
from .errors import TranslationError

logger = logging.getLogger(__name__)


class TranslationEngine:
    """翻譯引擎介面"""

    name = "base"

    def translate(self, text: str, target_lang: str) -> str:
        raise NotImplementedError


class NullEngine(TranslationEngine):
    """不翻譯"""

    name = "none"

    def translate(self, text: str, target_lang: str) -> str:
        return text


class GoogleEngine(TranslationEngine):
    """deep-translator 的 GoogleTranslator"""

    name = "google"

    def __init__(self, source_lang: str = "auto"):
        self.source_lang = source_lang

    def translate(self, text: str, target_lang: str) -> str:
        try:
            from deep_translator import GoogleTranslator

            translated = GoogleTranslator(source=self.source_lang, target=target_lang).translate(text)
        except Exception as e:
            raise TranslationError(f"deep-translator failed: {e}") from e

        if not translated:
            raise TranslationError("deep-translator returned an empty result")

        logger.debug(f"deep-translator: {text!r} -> {translated!r}")
        return translated


class GeminiEngine(TranslationEngine):
    """透過 Gemini 模型翻譯（僅回傳譯文）"""

    name = "gemini"

    PROMPT = (
        "Translate the following text to the language with code '{target}'.\n"
        "Keep placeholders such as :name or {{name}} unchanged.\n"
        "Reply with the translation only, no quotes and no explanations.\n\n"
        "Text: {text}"
    )

    def __init__(self, model: str, api_key: Optional[str] = None):
        self.model = model
        self.api_key = api_key
        self._client = None

    def _get_client(self):
        if self._client is None:
            api_key = self.api_key or os.getenv('GEMINI_API_KEY')
            if not api_key:
                raise TranslationError("GEMINI_API_KEY is not set")

            from google import genai

            self._client = genai.Client(api_key=api_key)
        return self._client

    def translate(self, text: str, target_lang: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=self.PROMPT.format(target=target_lang, text=text),
            )
        except Exception as e:
            raise TranslationError(f"Gemini request failed: {e}") from e

        translated = _strip_quotes((response.text or "").strip())
        if not translated:
            raise TranslationError("Gemini returned an empty result")
        return translated


def _strip_quotes(text: str) -> str:
    """移除模型偶爾加上的外層引號"""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        return text[1:-1]
    return text


def get_engine(config: HelperConfig) -> TranslationEngine:
    """依配置建立翻譯引擎"""
    if config.translation_engine == "gemini":
        return GeminiEngine(config.gemini_model)
    if config.translation_engine == "none":
        return NullEngine()
    return GoogleEngine()
