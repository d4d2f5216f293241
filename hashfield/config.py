"""
hashfield 設定載入模組

從 INI 檔讀取編碼設定，環境變數優先於檔案內容。
salt 屬於機密，建議放在 .env 或環境變數中，不要寫進版本控制的設定檔。

INI 範例：

    [hashfield]
    salt = hello world
    min_length = 10
    alphabet = abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from hashfield.errors import OptionsError
from hashfield.options import CodecOptions

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "hashfield"
DEFAULT_CONFIG_FILENAME = "hashfield.ini"

ENV_CONFIG_PATH = "HASHFIELD_CONFIG"
ENV_SALT = "HASHFIELD_SALT"
ENV_MIN_LENGTH = "HASHFIELD_MIN_LENGTH"
ENV_ALPHABET = "HASHFIELD_ALPHABET"


def _read_config(config_path: Optional[str]) -> configparser.ConfigParser:
    config = configparser.ConfigParser(interpolation=None)

    path = config_path or os.getenv(ENV_CONFIG_PATH)
    if not path:
        path = DEFAULT_CONFIG_FILENAME
        if not Path(path).exists():
            return config
    elif not Path(path).exists():
        raise FileNotFoundError(f"找不到設定檔: {path}")

    try:
        # utf-8-sig 可同時處理含 BOM 的檔案
        config.read(path, encoding="utf-8-sig")
    except configparser.Error as e:
        raise OptionsError(f"設定檔格式錯誤 {path}: {e}") from e

    logger.debug(f"Loaded configuration from: {path}")
    return config


def _parse_min_length(raw: str, source: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise OptionsError(f"{source} 必須為整數: {raw!r}") from None


def load_options(
    config_path: Optional[str] = None,
    section: str = DEFAULT_SECTION,
    env_file: Optional[str] = None,
) -> CodecOptions:
    """
    讀取設定並建立 CodecOptions（不會寫入程序共用狀態）

    優先順序：環境變數 > INI 檔 > 預設值。

    Args:
        config_path: INI 檔路徑；未指定時依序嘗試 HASHFIELD_CONFIG 與目前目錄的 hashfield.ini
        section: INI 區段名稱
        env_file: .env 檔路徑；未指定時搜尋目前目錄

    Returns:
        CodecOptions；未設定的項目保留預設值（salt 為隨機產生）
    """
    if load_dotenv(env_file or find_dotenv(usecwd=True)):
        logger.debug("Loaded environment from .env file")

    config = _read_config(config_path)
    values = {}

    if config.has_section(section):
        file_values = config[section]
        if "salt" in file_values:
            values["salt"] = file_values["salt"]
        if "min_length" in file_values:
            values["min_length"] = _parse_min_length(file_values["min_length"], f"[{section}] min_length")
        if "alphabet" in file_values:
            values["alphabet"] = file_values["alphabet"].strip()
    elif config.sections():
        logger.warning(f"Section [{section}] not found in configuration, using defaults")

    if ENV_SALT in os.environ:
        values["salt"] = os.environ[ENV_SALT]
    if ENV_MIN_LENGTH in os.environ:
        values["min_length"] = _parse_min_length(os.environ[ENV_MIN_LENGTH], ENV_MIN_LENGTH)
    if ENV_ALPHABET in os.environ:
        values["alphabet"] = os.environ[ENV_ALPHABET].strip()

    return CodecOptions(**values)


def configure(
    config_path: Optional[str] = None,
    section: str = DEFAULT_SECTION,
    env_file: Optional[str] = None,
) -> bool:
    """讀取設定並寫入程序共用狀態；已設定過時回傳 False"""
    return load_options(config_path, section, env_file).build()
