"""
hashfield 編碼/解碼核心模組

以 hashids 套件將非負整數序列轉換為固定字母表的短字串，並可完整還原。
salt 決定字母表的打亂順序，min_length 不足時以字母表衍生字元補齊。

hashids 本身不處理的部分在此補上：64 位元範圍檢查、空序列的編碼、
字母表以外字元的錯誤訊息，以及解碼結果必須重新編碼回原字串的嚴格檢查。
"""

import functools
import logging
import operator
import re
from typing import Iterable

from hashids import Hashids

from hashfield.errors import ArityError, DecodeError, OptionsError, ValueRangeError
from hashfield.options import CodecOptions, get_options

logger = logging.getLogger(__name__)

MAX_VALUE = 2**64 - 1


def _check_value(value: int) -> int:
    if isinstance(value, bool):
        raise TypeError("布林值不可編碼")
    value = operator.index(value)
    if value < 0:
        raise ValueRangeError(f"只能編碼非負整數: {value}")
    if value > MAX_VALUE:
        raise ValueRangeError(f"數值超出 64 位元範圍: {value}")
    return value


def _digit_count(base: int) -> int:
    """MAX_VALUE 以 base 進位表示時的位數"""
    count = 1
    number = MAX_VALUE
    while number >= base:
        number //= base
        count += 1
    return count


class Codec:
    """
    依照 CodecOptions 建立的編碼器

    每個 Codec 持有一個 Hashids 實例，建構後即不再變動。
    """

    def __init__(self, options: CodecOptions):
        self.options = options
        self._hashids = Hashids(
            salt=options.salt,
            min_length=options.min_length,
            alphabet=options.alphabet,
        )
        self._charset = frozenset(options.alphabet)

        # 守衛與分隔字元之間的連續片段最長為抽籤字元加上 64 位元數字，或補齊後的 min_length
        boundaries = self._hashids._guards + self._hashids._separators
        self._boundary = re.compile(f"[{re.escape(boundaries)}]")
        self._max_run = max(_digit_count(len(self._hashids._alphabet)) + 1, options.min_length)

        self._empty = self._empty_token()

    def _empty_token(self) -> str:
        """空序列的編碼：單一字元重複至 min_length，且不是任何非空序列的編碼"""
        length = max(self.options.min_length, 1)
        for ch in self.options.alphabet:
            candidate = ch * length
            if not self._hashids.decode(candidate):
                return candidate
        raise OptionsError("無法為空序列產生編碼")

    def encode(self, values: Iterable[int]) -> str:
        """
        將整數序列編碼為字串

        Args:
            values: 0 ~ 2^64-1 的整數序列，可為空

        Returns:
            長度至少為 min_length 的字串；空序列也會得到非空字串
        """
        values = [_check_value(v) for v in values]
        encoded = self._hashids.encode(*values) if values else self._empty
        logger.debug(f"Encoding: {values} -> {encoded}")
        return encoded

    def decode(self, text: str) -> list[int]:
        """
        將字串解碼為整數序列

        解出的序列必須能重新編碼回完全相同的字串，否則視為非法輸入。

        Raises:
            DecodeError: 含字母表以外的字元，或不是任何序列的合法編碼
        """
        if not isinstance(text, str):
            raise DecodeError(f"只能解碼字串，收到 {type(text).__name__}", token=None)
        if not text:
            raise DecodeError("空字串無法解碼", token=text)

        invalid = sorted(set(text) - self._charset)
        if invalid:
            raise DecodeError(f"包含字母表以外的字元 {''.join(invalid)!r}: {text}", token=text)

        if text == self._empty:
            return []

        # 先擋下過長的數字片段，避免轉換成超大整數
        if any(len(run) > self._max_run for run in self._boundary.split(text)):
            raise DecodeError(f"編碼片段過長: {text[:32]}...", token=text)

        values = list(self._hashids.decode(text))
        if not values:
            raise DecodeError(f"不是合法的編碼: {text}", token=text)
        if any(v > MAX_VALUE for v in values):
            raise DecodeError(f"解碼數值超出 64 位元範圍: {text}", token=text)
        if self._hashids.encode(*values) != text:
            raise DecodeError(f"不是合法的編碼: {text}", token=text)

        logger.debug(f"Decoding: {text} -> {values}")
        return values

    def encode_single(self, value: int) -> str:
        return self.encode([value])

    def decode_single(self, text: str) -> int:
        """
        解碼單一整數

        Raises:
            ArityError: 字串解碼後不是恰好一個整數
        """
        values = self.decode(text)
        if len(values) != 1:
            raise ArityError(text, len(values))
        return values[0]


@functools.lru_cache(maxsize=32)
def codec_for(options: CodecOptions) -> Codec:
    """同一份設定共用同一個 Codec"""
    return Codec(options)


def default_codec() -> Codec:
    return codec_for(get_options())


def encode(values: Iterable[int]) -> str:
    return default_codec().encode(values)


def decode(text: str) -> list[int]:
    return default_codec().decode(text)


def encode_single(value: int) -> str:
    return default_codec().encode_single(value)


def decode_single(text: str) -> int:
    return default_codec().decode_single(text)
