"""
text_format 測試：大小寫格式轉換
"""

import pytest

from translator_helper.text_format import CASE_FORMATS, format_text, split_words


@pytest.mark.parametrize("case_format, expected", [
    ("snake_case", "hello_world"),
    ("camelCase", "helloWorld"),
    ("PascalCase", "HelloWorld"),
    ("kebab-case", "hello-world"),
    ("CONSTANT_CASE", "HELLO_WORLD"),
    ("dot.case", "hello.world"),
    ("lowercase", "hello world"),
])
def test_formats(case_format, expected):
    assert format_text("Hello World", case_format) == expected


def test_every_format_is_covered():
    assert set(CASE_FORMATS) == {
        "snake_case", "camelCase", "PascalCase", "kebab-case",
        "CONSTANT_CASE", "dot.case", "lowercase",
    }


def test_default_is_snake_case():
    assert format_text("Welcome back") == "welcome_back"


def test_punctuation_and_apostrophes():
    assert format_text("Don't stop, believing!") == "dont_stop_believing"


def test_camel_humps_are_split():
    assert split_words("helloWorld HTMLParser") == ["hello", "World", "HTML", "Parser"]
    assert format_text("helloWorld", "snake_case") == "hello_world"


def test_digits_are_kept():
    assert format_text("Top 10 items", "camelCase") == "top10Items"


def test_unicode_letters():
    assert format_text("Привет мир", "snake_case") == "привет_мир"


def test_unknown_format_falls_back_to_snake_case(caplog):
    assert format_text("Hello World", "Title Case") == "hello_world"
    assert "Unknown case format" in caplog.text


def test_text_without_words_is_returned_stripped():
    assert format_text("  !!!  ") == "!!!"
