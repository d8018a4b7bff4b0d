"""
translation_engines 測試（不連網，以 mock 取代外部服務）
"""

from unittest.mock import MagicMock

import pytest

from translator_helper.config import HelperConfig
from translator_helper.errors import TranslationError
from translator_helper.translation_engines import (
    GeminiEngine,
    GoogleEngine,
    NullEngine,
    get_engine,
)


@pytest.mark.parametrize("name, engine_type", [
    ("google", GoogleEngine),
    ("gemini", GeminiEngine),
    ("none", NullEngine),
])
def test_get_engine(name, engine_type):
    assert isinstance(get_engine(HelperConfig(translation_engine=name)), engine_type)


def test_null_engine_is_identity():
    assert NullEngine().translate("Bonjour", "en") == "Bonjour"


class TestGoogleEngine:

    def test_success(self, monkeypatch):
        import deep_translator

        instances = []

        class FakeTranslator:
            def __init__(self, source, target):
                instances.append((source, target))

            def translate(self, text):
                return "Hello world"

        monkeypatch.setattr(deep_translator, "GoogleTranslator", FakeTranslator)
        assert GoogleEngine().translate("Bonjour le monde", "en") == "Hello world"
        assert instances == [("auto", "en")]

    def test_failure_raises_translation_error(self, monkeypatch):
        import deep_translator

        class BrokenTranslator:
            def __init__(self, source, target):
                pass

            def translate(self, text):
                raise ConnectionError("offline")

        monkeypatch.setattr(deep_translator, "GoogleTranslator", BrokenTranslator)
        with pytest.raises(TranslationError):
            GoogleEngine().translate("Bonjour", "en")

    @pytest.mark.requires_api
    def test_real_service(self):
        assert GoogleEngine().translate("Bonjour", "en").lower().startswith("hello")


class TestGeminiEngine:

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(TranslationError):
            GeminiEngine("gemini-2.5-flash").translate("Bonjour", "en")

    def test_response_text_is_unquoted(self):
        engine = GeminiEngine("gemini-2.5-flash", api_key="test")
        engine._client = MagicMock()
        engine._client.models.generate_content.return_value = MagicMock(text=' "Hello" \n')

        assert engine.translate("Bonjour", "en") == "Hello"
        kwargs = engine._client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert "Bonjour" in kwargs["contents"]

    def test_request_failure(self):
        engine = GeminiEngine("gemini-2.5-flash", api_key="test")
        engine._client = MagicMock()
        engine._client.models.generate_content.side_effect = RuntimeError("quota")
        with pytest.raises(TranslationError):
            engine.translate("Bonjour", "en")

    def test_empty_response(self):
        engine = GeminiEngine("gemini-2.5-flash", api_key="test")
        engine._client = MagicMock()
        engine._client.models.generate_content.return_value = MagicMock(text="")
        with pytest.raises(TranslationError):
            engine.translate("Bonjour", "en")
