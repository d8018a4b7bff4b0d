"""
cli 測試
"""

import pytest

from translator_helper import cli
from translator_helper.cli import EXIT_ABORTED, EXIT_OK, EXIT_USAGE, find_match, main, parse_selection
from translator_helper.config import CONFIG_FILENAME
from translator_helper.document import Position, Range, TextDocument


@pytest.fixture
def offline_workspace(workspace):
    (workspace / CONFIG_FILENAME).write_text("translationEngine: none\n", encoding="utf-8")
    return workspace


@pytest.fixture
def source(workspace):
    return workspace / "resources" / "views" / "welcome.blade.php"


class TestParseSelection:

    def test_one_based_to_zero_based(self):
        assert parse_selection("1:5-1:16") == Range(Position(0, 4), Position(0, 15))

    def test_multiline(self):
        assert parse_selection("2:1-3:4") == Range(Position(1, 0), Position(2, 3))

    @pytest.mark.parametrize("value", ["1:5", "a:b-c:d", "0:1-1:2", "1:5-1:"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_selection(value)


class TestFindMatch:

    def test_first_occurrence(self, source):
        document = TextDocument.open(source)
        assert find_match(document, "Hello World") == Range(Position(0, 4), Position(0, 15))

    def test_nth_occurrence(self, temp_dir):
        path = temp_dir / "a.txt"
        path.write_text("Hi\nHi there\n", encoding="utf-8")
        assert find_match(TextDocument.open(path), "Hi", 2) == Range(Position(1, 0), Position(1, 2))

    def test_not_found(self, source):
        with pytest.raises(ValueError):
            find_match(TextDocument.open(source), "Goodbye")


class TestMain:

    def test_match_end_to_end(self, offline_workspace, source, capsys):
        code = main([str(source), "--match", "Hello World", "--path", "messages.php",
                     "--workspace", str(offline_workspace)])

        assert code == EXIT_OK
        assert "{{ __('messages.hello_world') }}" in capsys.readouterr().out
        assert "'hello_world' => 'Hello World'" in (
            offline_workspace / "resources" / "lang" / "fr" / "messages.php").read_text(encoding="utf-8")

    def test_selection_end_to_end(self, offline_workspace, source):
        code = main([str(source), "--selection", "2:4-2:16", "--path", "messages.php",
                     "--workspace", str(offline_workspace)])

        assert code == EXIT_OK
        assert source.read_text(encoding="utf-8").endswith("<p>{{ __('messages.welcome_back') }}</p>\n")

    def test_prompt_for_path(self, offline_workspace, source, monkeypatch):
        monkeypatch.setattr(cli, "prompt_for_path", lambda console: "auth.php")
        code = main([str(source), "--match", "Hello World", "--workspace", str(offline_workspace)])

        assert code == EXIT_OK
        assert (offline_workspace / "resources" / "lang" / "en" / "auth.php").exists()

    def test_empty_selection_aborts(self, offline_workspace, source):
        code = main([str(source), "--selection", "1:5-1:5", "--path", "messages.php",
                     "--workspace", str(offline_workspace)])
        assert code == EXIT_ABORTED

    def test_no_locales_aborts(self, offline_workspace, source):
        (offline_workspace / CONFIG_FILENAME).write_text(
            "translationEngine: none\nrootDirectory: nowhere\n", encoding="utf-8")
        code = main([str(source), "--match", "Hello World", "--path", "messages.php",
                     "--workspace", str(offline_workspace)])
        assert code == EXIT_ABORTED

    def test_bad_selection_is_a_usage_error(self, offline_workspace, source):
        with pytest.raises(SystemExit) as excinfo:
            main([str(source), "--selection", "nonsense", "--workspace", str(offline_workspace)])
        assert excinfo.value.code == EXIT_USAGE

    def test_selection_and_match_are_exclusive(self, source):
        with pytest.raises(SystemExit) as excinfo:
            main([str(source), "--selection", "1:1-1:2", "--match", "Hello"])
        assert excinfo.value.code == EXIT_USAGE

    def test_missing_source(self, offline_workspace):
        code = main([str(offline_workspace / "nope.blade.php"), "--match", "x",
                     "--workspace", str(offline_workspace)])
        assert code == EXIT_USAGE

    def test_broken_config(self, offline_workspace, source):
        (offline_workspace / CONFIG_FILENAME).write_text("- not\n- a mapping\n", encoding="utf-8")
        code = main([str(source), "--match", "Hello World", "--workspace", str(offline_workspace)])
        assert code == EXIT_USAGE

    def test_config_with_invalid_utf8(self, offline_workspace, source):
        (offline_workspace / CONFIG_FILENAME).write_bytes(b"rootDirectory: \xff\xfe\n")
        code = main([str(source), "--match", "Hello World", "--path", "messages.php",
                     "--workspace", str(offline_workspace)])
        assert code == EXIT_USAGE
        assert "Hello World" in source.read_text(encoding="utf-8")


class TestPackageExports:

    def test_lazy_attributes(self):
        import translator_helper
        from translator_helper.config import HelperConfig

        assert translator_helper.HelperConfig is HelperConfig
        assert callable(translator_helper.format_text)
        assert translator_helper.__version__ == "1.0.0"

    def test_unknown_attribute(self):
        import translator_helper

        with pytest.raises(AttributeError):
            translator_helper.does_not_exist
