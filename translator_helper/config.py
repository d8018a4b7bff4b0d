#!/usr/bin/env python3
"""
translator_helper - 配置管理

三層配置架構：
- Tier 1: HelperConfig dataclass 預設值（最低優先級）
- Tier 2: 工作區 YAML 配置檔（.translator-helper.yaml）
- Tier 3: 環境變數 TRANSLATOR_HELPER_*（最高優先級）

優先級: Tier 3 > Tier 2 > Tier 1

配置在每次指令執行時重新讀取，建構成 HelperConfig 後明確傳遞給各元件，
不使用全域狀態。
"""

import os
import re
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError
from .text_format import CASE_FORMATS, DEFAULT_CASE_FORMAT

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".translator-helper.yaml"
ENV_PREFIX = "TRANSLATOR_HELPER_"
TRANSLATION_ENGINES = ("google", "gemini", "none")


@dataclass(frozen=True)
class HelperConfig:
    """單次指令執行的完整配置"""
    root_directory: str = "resources/lang"
    case_format: str = DEFAULT_CASE_FORMAT
    per_locale_translation: bool = False
    translation_engine: str = "google"
    key_language: str = "en"
    gemini_model: str = "gemini-2.5-flash"
    lock_timeout: float = 10.0
    message_language: str = "en"

    def lang_root(self, workspace: Path) -> Path:
        """語系根目錄的絕對路徑"""
        return Path(workspace) / self.root_directory


def _snake_case(name: str) -> str:
    """rootDirectory → root_directory"""
    return re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', name).lower()


def _convert_type(value: Any, var_type: type) -> Any:
    """
    類型轉換

    Raises:
        ValueError: 無法轉換
    """
    if var_type is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ('true', '1', 'yes', 'on')
    if var_type is float:
        return float(value)
    if var_type is int:
        return int(value)
    return str(value)


def _field_types() -> Dict[str, type]:
    return {f.name: f.type for f in fields(HelperConfig)}


def _validate(name: str, value: Any) -> bool:
    """枚舉欄位驗證"""
    if name == 'case_format' and value not in CASE_FORMATS:
        logger.warning(f"Unknown caseFormat '{value}', expected one of {sorted(CASE_FORMATS)}")
        return False
    if name == 'translation_engine' and value not in TRANSLATION_ENGINES:
        logger.warning(f"Unknown translationEngine '{value}', expected one of {TRANSLATION_ENGINES}")
        return False
    if name == 'lock_timeout' and value < 0:
        logger.warning(f"lockTimeout must be >= 0, got {value}")
        return False
    return True


def _apply_overrides(config: HelperConfig, raw: Dict[str, Any], source: str) -> HelperConfig:
    """將一層覆寫套用到配置上，無效值保留下層的值"""
    types = _field_types()
    changes = {}
    for raw_key, raw_value in raw.items():
        name = _snake_case(raw_key)
        if name not in types:
            logger.warning(f"Ignoring unknown setting '{raw_key}' from {source}")
            continue
        if raw_value is None:
            continue
        try:
            value = _convert_type(raw_value, types[name])
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid value for '{raw_key}' from {source}: {e}")
            continue
        if _validate(name, value):
            changes[name] = value
    return replace(config, **changes) if changes else config


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    載入 YAML 配置檔

    Raises:
        ConfigurationError: 檔案無法讀取、不是 UTF-8，或不是 YAML 映射
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}", str(path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping of settings", str(path))
    return data


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """取得所有 TRANSLATOR_HELPER_* 環境變數覆寫"""
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(HelperConfig):
        env_var = ENV_PREFIX + f.name.upper()
        if env_var in environ:
            overrides[f.name] = environ[env_var]
    return overrides


def load_config(workspace: Path, config_path: Optional[Path] = None) -> HelperConfig:
    """
    依三層架構建立配置

    Args:
        workspace: 工作區根目錄
        config_path: 明確指定的配置檔（預設 <workspace>/.translator-helper.yaml）

    Returns:
        HelperConfig 實例

    Raises:
        ConfigurationError: 配置檔無法解析，或明確指定的配置檔不存在
    """
    workspace = Path(workspace)

    env_file = workspace / '.env'
    if env_file.exists():
        try:
            load_dotenv(env_file, override=False)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read {env_file}: {e}", str(env_file))

    config = HelperConfig()

    if config_path is not None:
        if not Path(config_path).is_file():
            raise ConfigurationError(f"Config file not found: {config_path}", str(config_path))
        file_path = Path(config_path)
    else:
        file_path = workspace / CONFIG_FILENAME

    if file_path.is_file():
        config = _apply_overrides(config, load_config_file(file_path), str(file_path))
        logger.debug(f"Loaded settings from {file_path}")

    config = _apply_overrides(config, env_overrides(), "environment")
    logger.debug(f"Effective configuration: {config}")
    return config
