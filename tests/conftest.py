"""
pytest 全局配置與共用 fixtures

Fixtures 說明：
- temp_dir: 臨時測試目錄
- workspace: 含 resources/lang/{en,fr} 與一個 Blade 檔的工作區
- notifier: 不輸出到終端機的通知器
- fake_engine / failing_engine: 假的翻譯引擎
- helper_config: 不連網的測試配置
"""

import io
import os
import sys
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from rich.console import Console

# 添加專案根目錄到 Python 路徑
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from translator_helper.config import HelperConfig  # noqa: E402
from translator_helper.errors import TranslationError  # noqa: E402
from translator_helper.i18n import init_i18n  # noqa: E402
from translator_helper.notifier import Notifier  # noqa: E402
from translator_helper.translation_engines import TranslationEngine  # noqa: E402


# ============================================================================
# pytest 配置
# ============================================================================

def pytest_configure(config):
    """註冊自訂標記"""
    config.addinivalue_line("markers", "unit: 標記為單元測試")
    config.addinivalue_line("markers", "integration: 標記為整合測試")
    config.addinivalue_line("markers", "requires_api: 需要真實翻譯服務的測試")


def pytest_addoption(parser):
    parser.addoption(
        "--use-real-api",
        action="store_true",
        default=False,
        help="使用真實翻譯服務進行測試（需要網路）"
    )


def pytest_collection_modifyitems(config, items):
    """跳過需要 API 的測試（除非明確指定）"""
    if not config.getoption("--use-real-api", default=False):
        skip_api = pytest.mark.skip(reason="需要 --use-real-api 標誌")
        for item in items:
            if "requires_api" in item.keywords:
                item.add_marker(skip_api)


# ============================================================================
# 隔離
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_environment():
    """還原環境變數（load_dotenv 會直接寫入 os.environ）並重設訊息語言"""
    saved = dict(os.environ)
    for name in list(os.environ):
        if name.startswith("TRANSLATOR_HELPER_"):
            del os.environ[name]
    init_i18n("en")
    yield
    os.environ.clear()
    os.environ.update(saved)
    init_i18n("en")


# ============================================================================
# 基礎 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir():
    """臨時測試目錄（每個測試獨立，使用後自動清理）"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def workspace(temp_dir) -> Path:
    """
    工作區結構：
        resources/lang/en/
        resources/lang/fr/
        resources/views/welcome.blade.php
    """
    lang_root = temp_dir / "resources" / "lang"
    (lang_root / "en").mkdir(parents=True)
    (lang_root / "fr").mkdir(parents=True)
    views = temp_dir / "resources" / "views"
    views.mkdir(parents=True)
    (views / "welcome.blade.php").write_text("<h1>Hello World</h1>\n<p>Welcome back</p>\n", encoding="utf-8")
    return temp_dir


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(translation_engine="none", lock_timeout=2.0)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(Console(file=io.StringIO(), width=200))


# ============================================================================
# 假翻譯引擎
# ============================================================================

class FakeEngine(TranslationEngine):
    """依字典翻譯，並記錄呼叫"""

    name = "fake"

    def __init__(self, translations: Optional[Dict[str, str]] = None):
        self.translations = translations or {}
        self.calls: List[tuple] = []

    def translate(self, text: str, target_lang: str) -> str:
        self.calls.append((text, target_lang))
        return self.translations.get((text, target_lang), self.translations.get(text, text))


class FailingEngine(TranslationEngine):
    """模擬翻譯服務失敗"""

    name = "failing"

    def __init__(self):
        self.calls = 0

    def translate(self, text: str, target_lang: str) -> str:
        self.calls += 1
        raise TranslationError("service unavailable")


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def failing_engine() -> FailingEngine:
    return FailingEngine()
