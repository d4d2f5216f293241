"""
hashfield 編碼設定模組

CodecOptions 保存 salt、最小輸出長度與字母表。
整個程序共用一份設定：第一次 build()（或第一次以預設值取用）後即固定，
之後的 build() 一律忽略，不會拋出錯誤。
"""

import logging
import string
import threading
from dataclasses import dataclass, field, replace

from Crypto.Random import random as secure_random

from hashfield.errors import OptionsError

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + "1234567890"
DEFAULT_MIN_LENGTH = 8
SALT_LENGTH = 32
MIN_ALPHABET_SIZE = 16

SALT_CHARS = string.ascii_letters + string.digits


def generate_salt(length: int = SALT_LENGTH) -> str:
    """以密碼學安全亂數產生英數字 salt"""
    logger.debug("Generating salt")
    return "".join(secure_random.choice(SALT_CHARS) for _ in range(length))


@dataclass(frozen=True)
class CodecOptions:
    """
    編碼器設定（不可變）

    Attributes:
        salt: 打亂字母表順序用的任意字串，預設為隨機 32 碼
        min_length: 輸出字串最小長度，不足時以 salt 衍生的字元補齊
        alphabet: 輸出使用的字元集，字元不可重複，至少 16 個
    """

    salt: str = field(default_factory=generate_salt)
    min_length: int = DEFAULT_MIN_LENGTH
    alphabet: str = DEFAULT_ALPHABET

    def __post_init__(self):
        if not isinstance(self.salt, str):
            raise OptionsError(f"salt 必須為字串: {self.salt!r}")

        if isinstance(self.min_length, bool) or not isinstance(self.min_length, int):
            raise OptionsError(f"min_length 必須為整數: {self.min_length!r}")
        if self.min_length < 0:
            raise OptionsError(f"min_length 不可為負數: {self.min_length}")

        if not isinstance(self.alphabet, str):
            raise OptionsError(f"alphabet 必須為字串: {self.alphabet!r}")
        if any(ch.isspace() for ch in self.alphabet):
            raise OptionsError("alphabet 不可包含空白字元")
        duplicated = sorted({ch for ch in self.alphabet if self.alphabet.count(ch) > 1})
        if duplicated:
            raise OptionsError(f"alphabet 含有重複字元: {''.join(duplicated)}")
        if len(self.alphabet) < MIN_ALPHABET_SIZE:
            raise OptionsError(
                f"alphabet 至少需要 {MIN_ALPHABET_SIZE} 個不重複字元，目前為 {len(self.alphabet)}"
            )

    def with_salt(self, salt: str) -> "CodecOptions":
        return replace(self, salt=salt)

    def with_min_length(self, min_length: int) -> "CodecOptions":
        return replace(self, min_length=min_length)

    def with_alphabet(self, alphabet: str) -> "CodecOptions":
        return replace(self, alphabet=alphabet)

    def build(self) -> bool:
        """
        將此設定寫入程序共用狀態

        Returns:
            True 表示設定生效；已設定過則回傳 False 並忽略
        """
        return install_options(self)

    def __repr__(self) -> str:
        # salt 視為機密，不出現在 log 或錯誤訊息中
        return (
            f"CodecOptions(salt=<{len(self.salt)} chars>, "
            f"min_length={self.min_length}, alphabet={self.alphabet!r})"
        )


# --- 程序共用狀態：Unconfigured → Configured，不再轉移 ---

_lock = threading.Lock()
_options: CodecOptions | None = None


def install_options(options: CodecOptions) -> bool:
    """設定程序共用的 CodecOptions，只有第一次呼叫會生效"""
    global _options
    if not isinstance(options, CodecOptions):
        raise OptionsError(f"需要 CodecOptions，收到 {type(options).__name__}")

    with _lock:
        if _options is not None:
            logger.warning("Codec options already configured, ignoring new configuration")
            return False
        _options = options

    logger.debug(f"Codec options configured: {options!r}")
    return True


def get_options() -> CodecOptions:
    """取得程序共用設定；尚未設定時以預設值建立並固定"""
    global _options
    options = _options
    if options is not None:
        return options

    with _lock:
        if _options is None:
            _options = CodecOptions()
            logger.debug("Codec options not configured, using defaults")
        return _options


def is_configured() -> bool:
    return _options is not None


def _reset_options() -> None:
    """清除共用狀態，僅供測試使用"""
    global _options
    with _lock:
        _options = None
