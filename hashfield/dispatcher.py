"""
hashfield 欄位轉換模組

依欄位分類在序列化邊界套用編碼（輸出）與解碼（輸入）：
- 整數欄位輸出為字串 token
- 整數列表輸出為字串 token 列表
- Optional 欄位為 None 時輸出 null，不經過編碼器
- 其他欄位原樣傳遞

所有函式皆可傳入指定的 Codec，未指定時使用程序共用設定。
"""

import json
import logging
import operator
from collections.abc import Mapping
from typing import Any, Optional

from hashfield.classifier import DEFAULT_WIDTH, FieldCategory, FieldKind, UnsignedWidth
from hashfield.codec import MAX_VALUE, Codec, default_codec
from hashfield.errors import (
    ArityError,
    DecodeError,
    DuplicateFieldError,
    MissingFieldError,
    ValueRangeError,
)
from hashfield.schema import schema_for

logger = logging.getLogger(__name__)


def _resolve(codec: Optional[Codec]) -> Codec:
    return codec if codec is not None else default_codec()


def _check_width(value: int, width: UnsignedWidth) -> int:
    if isinstance(value, bool):
        raise TypeError("布林值不可編碼")
    value = operator.index(value)
    if value < 0:
        raise ValueRangeError(f"只能編碼非負整數: {value}")
    if value > width.max_value:
        raise ValueRangeError(f"數值超出 {width.bits} 位元欄位範圍: {value}")
    if value > MAX_VALUE:
        # U128 欄位只接受 64 位元內的值，不做截斷
        raise ValueRangeError(f"數值超出 64 位元範圍: {value}")
    return value


# --- 單一整數 ---


def encode_numeric(
    value: int,
    codec: Optional[Codec] = None,
    width: UnsignedWidth = DEFAULT_WIDTH,
) -> str:
    return _resolve(codec).encode_single(_check_width(value, width))


def decode_numeric(
    token: str,
    codec: Optional[Codec] = None,
    width: UnsignedWidth = DEFAULT_WIDTH,
) -> int:
    if not isinstance(token, str):
        raise DecodeError(f"整數欄位必須為字串 token，收到 {type(token).__name__}")

    value = _resolve(codec).decode_single(token)
    if value > width.max_value:
        raise DecodeError(f"解碼數值 {value} 超出 {width.bits} 位元欄位範圍", token=token)
    return value


# --- 整數列表 ---


def encode_sequence(
    values,
    codec: Optional[Codec] = None,
    width: UnsignedWidth = DEFAULT_WIDTH,
) -> list[str]:
    codec = _resolve(codec)
    return [encode_numeric(v, codec, width) for v in values]


def decode_sequence(
    tokens,
    codec: Optional[Codec] = None,
    width: UnsignedWidth = DEFAULT_WIDTH,
) -> list[int]:
    """逐一解碼，任一元素失敗則整個欄位失敗"""
    if not isinstance(tokens, list):
        raise DecodeError(f"列表欄位必須為字串 token 陣列，收到 {type(tokens).__name__}")

    codec = _resolve(codec)
    return [decode_numeric(token, codec, width) for token in tokens]


# --- Optional：None 直接回傳，不經過編碼器 ---


def encode_optional_numeric(value, codec=None, width=DEFAULT_WIDTH) -> Optional[str]:
    if value is None:
        return None
    return encode_numeric(value, codec, width)


def decode_optional_numeric(token, codec=None, width=DEFAULT_WIDTH) -> Optional[int]:
    if token is None:
        return None
    return decode_numeric(token, codec, width)


def encode_optional_sequence(values, codec=None, width=DEFAULT_WIDTH) -> Optional[list[str]]:
    if values is None:
        return None
    return encode_sequence(values, codec, width)


def decode_optional_sequence(tokens, codec=None, width=DEFAULT_WIDTH) -> Optional[list[int]]:
    if tokens is None:
        return None
    return decode_sequence(tokens, codec, width)


_ENCODERS = {
    FieldKind.NUMERIC: encode_numeric,
    FieldKind.SEQUENCE: encode_sequence,
    FieldKind.OPTIONAL_NUMERIC: encode_optional_numeric,
    FieldKind.OPTIONAL_SEQUENCE: encode_optional_sequence,
}

_DECODERS = {
    FieldKind.NUMERIC: decode_numeric,
    FieldKind.SEQUENCE: decode_sequence,
    FieldKind.OPTIONAL_NUMERIC: decode_optional_numeric,
    FieldKind.OPTIONAL_SEQUENCE: decode_optional_sequence,
}


def encode_value(category: FieldCategory, value: Any, codec: Optional[Codec] = None) -> Any:
    """依分類編碼單一欄位值；PASSTHROUGH 原樣回傳"""
    if category.kind is FieldKind.PASSTHROUGH:
        return value
    return _ENCODERS[category.kind](value, codec, category.width)


def decode_value(category: FieldCategory, raw: Any, codec: Optional[Codec] = None) -> Any:
    """依分類解碼單一欄位值；PASSTHROUGH 原樣回傳"""
    if category.kind is FieldKind.PASSTHROUGH:
        return raw
    return _DECODERS[category.kind](raw, codec, category.width)


# --- 整筆資料 ---


def to_dict(obj, codec: Optional[Codec] = None) -> dict:
    """
    將 dataclass 實例轉為可輸出的 dict

    雜湊欄位轉為 token，鍵名套用 rename。
    """
    schema = schema_for(type(obj))
    codec = _resolve(codec)

    data = {}
    for spec in schema.fields:
        value = getattr(obj, spec.name)
        try:
            data[spec.wire_name] = encode_value(spec.category, value, codec)
        except ValueRangeError as e:
            raise ValueRangeError(f"欄位 '{spec.name}': {e}") from e
    return data


def from_dict(cls: type, data: Mapping, codec: Optional[Codec] = None):
    """
    由 dict 還原 dataclass 實例

    Args:
        cls: 目標 dataclass
        data: 輸入資料，鍵可為輸出名稱或別名；未知的鍵會被忽略
        codec: 指定的 Codec

    Raises:
        DecodeError / ArityError: 雜湊欄位解碼失敗（錯誤附上欄位名稱）
        MissingFieldError: 缺少必要欄位
        DuplicateFieldError: 同一欄位以不同鍵名出現兩次
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"需要 mapping，收到 {type(data).__name__}")

    schema = schema_for(cls)
    codec = _resolve(codec)

    raw = {}
    for key, value in data.items():
        spec = schema.lookup(key)
        if spec is None:
            logger.debug(f"Ignoring unknown field '{key}' for {cls.__name__}")
            continue
        if spec.name in raw:
            raise DuplicateFieldError(spec.wire_name)
        raw[spec.name] = value

    kwargs = {}
    for spec in schema.fields:
        if spec.name not in raw:
            if spec.has_default:
                continue
            if spec.nullable:
                kwargs[spec.name] = None
                continue
            raise MissingFieldError(spec.wire_name)

        try:
            kwargs[spec.name] = decode_value(spec.category, raw[spec.name], codec)
        except ArityError as e:
            raise ArityError(e.token, e.count, field=spec.wire_name) from e
        except DecodeError as e:
            raise DecodeError(e.message, token=e.token, field=spec.wire_name) from e

    return cls(**kwargs)


def _reject_duplicate_keys(pairs: list) -> dict:
    result = {}
    for key, value in pairs:
        if key in result:
            raise DuplicateFieldError(key)
        result[key] = value
    return result


def dumps(obj, codec: Optional[Codec] = None, **json_kwargs) -> str:
    return json.dumps(to_dict(obj, codec), **json_kwargs)


def loads(cls: type, text: str, codec: Optional[Codec] = None):
    """解析 JSON 字串並還原為 cls 實例；JSON 物件中的重複鍵視為錯誤"""
    data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    return from_dict(cls, data, codec)
