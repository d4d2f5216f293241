"""測試共用 fixture"""

import pytest

from hashfield.codec import Codec
from hashfield.config import ENV_ALPHABET, ENV_CONFIG_PATH, ENV_MIN_LENGTH, ENV_SALT
from hashfield.options import CodecOptions, _reset_options

ALPHANUMERIC = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"

HELLO_OPTIONS = CodecOptions(salt="hello world", min_length=10, alphabet=ALPHANUMERIC)


@pytest.fixture
def codec():
    return Codec(HELLO_OPTIONS)


@pytest.fixture
def fresh_options():
    """每個測試開始與結束時清空程序共用設定"""
    _reset_options()
    yield
    _reset_options()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """移除 hashfield 相關環境變數，並切換到空目錄避免讀到 .env / hashfield.ini"""
    for name in (ENV_CONFIG_PATH, ENV_SALT, ENV_MIN_LENGTH, ENV_ALPHABET):
        # 先 setenv 再 delenv，測試結束時才會還原為「未設定」
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
